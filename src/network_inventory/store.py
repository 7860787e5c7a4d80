"""
In-memory inventory store.

Holds devices, ports, alerts and per-device health records. All state lives
in process memory and is lost on restart; `seed()` loads a small demo network.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Optional

from ._types import (
    Alert,
    AlertSeverity,
    Device,
    DeviceHealth,
    DeviceStatus,
    DeviceType,
    Port,
    PortStatus,
    PortType,
    now_utc,
)

logger = logging.getLogger(__name__)


class InventoryStore:
    """
    Thread-safe in-memory store for the inventory.

    Lookups of unknown ids return None (or False for deletes) instead of
    raising; callers decide how to report a missing record.
    """

    def __init__(self, seed: bool = False):
        self._lock = threading.RLock()
        self._devices: dict[str, Device] = {}
        self._ports: dict[str, Port] = {}
        self._alerts: dict[str, Alert] = {}
        self._health: dict[str, DeviceHealth] = {}

        if seed:
            self.seed()

    def seed(self) -> None:
        """Load the demo network: a router, a switch and an access point."""
        router = self.create_device(Device(
            name="Main Building Router",
            type=DeviceType.ROUTER,
            model="Cisco ISR 4331",
            ip_address="192.168.1.1",
            mac_address="00:1A:2B:3C:4D:5E",
            location="Server Room A",
            status=DeviceStatus.ACTIVE,
            description="Primary router for main building network",
        ))
        switch = self.create_device(Device(
            name="Floor 2 Switch",
            type=DeviceType.SWITCH,
            model="Cisco Catalyst 2960",
            ip_address="192.168.1.10",
            mac_address="00:1A:2B:3C:4D:5F",
            location="Floor 2 Closet",
            status=DeviceStatus.ACTIVE,
            description="48-port switch for second floor",
        ))
        self.create_device(Device(
            name="Library Access Point",
            type=DeviceType.ACCESS_POINT,
            model="Ubiquiti UniFi AP",
            ip_address="192.168.1.20",
            location="Library",
            status=DeviceStatus.ACTIVE,
            description="WiFi access point for library area",
        ))

        for device_id, port_number, connected_to, description in [
            (router.id, "Gi0/0/0", "ISP Gateway", "WAN connection"),
            (router.id, "Gi0/0/1", "Floor 2 Switch", None),
            (switch.id, "Gi1/0/1", "Room 201 PC", None),
            (switch.id, "Gi1/0/2", "Room 202 PC", None),
        ]:
            self.create_port(Port(
                device_id=device_id,
                port_number=port_number,
                port_type=PortType.ETHERNET,
                status=PortStatus.ACTIVE,
                connected_to=connected_to,
                speed="1 Gbps",
                description=description,
            ))

        logger.info(f"Seeded {len(self._devices)} devices and {len(self._ports)} ports")

    # -------------------------------------------------------------------------
    # Devices
    # -------------------------------------------------------------------------

    def get_devices(
        self,
        device_type: Optional[DeviceType] = None,
        status: Optional[DeviceStatus] = None,
        location: Optional[str] = None,
    ) -> list[Device]:
        """Get devices with optional filtering."""
        with self._lock:
            devices = list(self._devices.values())

        if device_type:
            devices = [d for d in devices if d.type == device_type]
        if status:
            devices = [d for d in devices if d.status == status]
        if location:
            devices = [d for d in devices if d.location == location]
        return devices

    def get_device(self, device_id: str) -> Optional[Device]:
        with self._lock:
            return self._devices.get(device_id)

    def create_device(self, device: Device) -> Device:
        with self._lock:
            self._devices[device.id] = device
        return device

    def update_device(self, device_id: str, changes: dict[str, Any]) -> Optional[Device]:
        """Apply a partial update. Returns None if the device does not exist."""
        with self._lock:
            existing = self._devices.get(device_id)
            if existing is None:
                return None
            changes = {k: v for k, v in changes.items() if k != "id"}
            updated = replace(existing, **changes)
            self._devices[device_id] = updated
            return updated

    def delete_device(self, device_id: str) -> bool:
        """
        Delete a device together with its ports and health record.

        Alerts raised against the device are kept as history.
        """
        with self._lock:
            existed = self._devices.pop(device_id, None) is not None
            port_ids = [pid for pid, p in self._ports.items() if p.device_id == device_id]
            for port_id in port_ids:
                del self._ports[port_id]
            self._health.pop(device_id, None)

        if existed:
            logger.info(f"Deleted device {device_id} ({len(port_ids)} ports)")
        return existed

    # -------------------------------------------------------------------------
    # Ports
    # -------------------------------------------------------------------------

    def get_ports(self) -> list[Port]:
        with self._lock:
            return list(self._ports.values())

    def get_port(self, port_id: str) -> Optional[Port]:
        with self._lock:
            return self._ports.get(port_id)

    def get_ports_by_device(self, device_id: str) -> list[Port]:
        with self._lock:
            return [p for p in self._ports.values() if p.device_id == device_id]

    def create_port(self, port: Port) -> Port:
        with self._lock:
            self._ports[port.id] = port
        return port

    def update_port(self, port_id: str, changes: dict[str, Any]) -> Optional[Port]:
        with self._lock:
            existing = self._ports.get(port_id)
            if existing is None:
                return None
            changes = {k: v for k, v in changes.items() if k != "id"}
            updated = replace(existing, **changes)
            self._ports[port_id] = updated
            return updated

    def delete_port(self, port_id: str) -> bool:
        with self._lock:
            return self._ports.pop(port_id, None) is not None

    # -------------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------------

    def get_alerts(
        self,
        acknowledged: Optional[bool] = None,
        severity: Optional[AlertSeverity] = None,
    ) -> list[Alert]:
        """Get alerts, newest first."""
        with self._lock:
            alerts = list(self._alerts.values())

        if acknowledged is not None:
            alerts = [a for a in alerts if a.acknowledged == acknowledged]
        if severity:
            alerts = [a for a in alerts if a.severity == severity]
        return sorted(alerts, key=lambda a: a.timestamp, reverse=True)

    def get_alert(self, alert_id: str) -> Optional[Alert]:
        with self._lock:
            return self._alerts.get(alert_id)

    def get_alerts_by_device(self, device_id: str) -> list[Alert]:
        """Get alerts for one device, newest first."""
        with self._lock:
            alerts = [a for a in self._alerts.values() if a.device_id == device_id]
        return sorted(alerts, key=lambda a: a.timestamp, reverse=True)

    def create_alert(self, alert: Alert) -> Alert:
        """Store a new alert. Timestamp and acknowledgement state are reset."""
        alert = replace(
            alert,
            timestamp=now_utc(),
            acknowledged=False,
            acknowledged_by=None,
            acknowledged_at=None,
        )
        with self._lock:
            self._alerts[alert.id] = alert
        return alert

    def acknowledge_alert(self, alert_id: str, acknowledged_by: str) -> Optional[Alert]:
        with self._lock:
            alert = self._alerts.get(alert_id)
            if alert is None:
                return None
            updated = replace(
                alert,
                acknowledged=True,
                acknowledged_by=acknowledged_by,
                acknowledged_at=now_utc(),
            )
            self._alerts[alert_id] = updated
            return updated

    def delete_alert(self, alert_id: str) -> bool:
        with self._lock:
            return self._alerts.pop(alert_id, None) is not None

    # -------------------------------------------------------------------------
    # Device health
    # -------------------------------------------------------------------------

    def get_device_health(self, device_id: str) -> Optional[DeviceHealth]:
        with self._lock:
            return self._health.get(device_id)

    def get_all_device_health(self) -> list[DeviceHealth]:
        with self._lock:
            return list(self._health.values())

    def update_device_health(self, device_id: str, health: DeviceHealth) -> Optional[DeviceHealth]:
        """
        Replace the health record for a device, stamping last_checked.

        Returns None without writing if the device does not exist.
        """
        updated = replace(
            health,
            device_id=device_id,
            last_checked=now_utc(),
            uptime=health.uptime if health.uptime is not None else 0,
            consecutive_failures=health.consecutive_failures or 0,
        )
        with self._lock:
            if device_id not in self._devices:
                return None
            self._health[device_id] = updated
        return updated
