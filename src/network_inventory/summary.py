"""
Read-only views derived from the inventory.

Dashboard counters, devices grouped by location, and the topology graph
built from port connections.
"""

from __future__ import annotations

from collections import Counter

from ._types import DeviceStatus, PortStatus, now_utc
from .store import InventoryStore


def build_dashboard(store: InventoryStore) -> dict:
    """Aggregate counts for the dashboard view."""
    devices = store.get_devices()
    ports = store.get_ports()
    health = store.get_all_device_health()
    open_alerts = store.get_alerts(acknowledged=False)

    status_counts = Counter(d.status for d in devices)
    port_counts = Counter(p.status for p in ports)
    severity_counts = Counter(a.severity.value for a in open_alerts)

    return {
        "devices": {
            "total": len(devices),
            "active": status_counts[DeviceStatus.ACTIVE],
            "inactive": status_counts[DeviceStatus.INACTIVE],
            "maintenance": status_counts[DeviceStatus.MAINTENANCE],
            "error": status_counts[DeviceStatus.ERROR],
            "by_type": dict(Counter(d.type.value for d in devices)),
        },
        "ports": {
            "total": len(ports),
            "active": port_counts[PortStatus.ACTIVE],
            "inactive": port_counts[PortStatus.INACTIVE],
            "error": port_counts[PortStatus.ERROR],
        },
        "locations": len({d.location for d in devices}),
        "health": {
            "monitored": len(health),
            "online": sum(1 for h in health if h.is_online),
            "offline": sum(1 for h in health if not h.is_online),
        },
        "alerts": {
            "unacknowledged": len(open_alerts),
            "critical": severity_counts.get("critical", 0),
            "warning": severity_counts.get("warning", 0),
            "info": severity_counts.get("info", 0),
        },
        "generated_at": now_utc().isoformat(),
    }


def group_by_location(store: InventoryStore) -> list[dict]:
    """Devices grouped by location, locations sorted by name."""
    groups: dict[str, list[dict]] = {}
    for device in store.get_devices():
        groups.setdefault(device.location, []).append(device.to_dict())

    return [
        {"location": location, "device_count": len(devices), "devices": devices}
        for location, devices in sorted(groups.items())
    ]


def build_topology(store: InventoryStore) -> dict:
    """
    Build a device graph from port connections.

    A port links to another device when its connected_to matches that
    device's name (case-insensitive) or IP address. Other connections
    become external endpoints.
    """
    devices = store.get_devices()
    by_name = {d.name.lower(): d for d in devices}
    by_ip = {d.ip_address: d for d in devices}

    nodes = [
        {
            "id": d.id,
            "name": d.name,
            "type": d.type.value,
            "status": d.status.value,
            "ip_address": d.ip_address,
            "location": d.location,
        }
        for d in devices
    ]

    links = []
    external = []
    seen_pairs = set()

    for port in store.get_ports():
        if not port.connected_to:
            continue

        target = by_name.get(port.connected_to.lower()) or by_ip.get(port.connected_to)
        if target is None:
            external.append({
                "device_id": port.device_id,
                "port_id": port.id,
                "port_number": port.port_number,
                "connected_to": port.connected_to,
            })
            continue

        if target.id == port.device_id:
            continue

        pair = frozenset((port.device_id, target.id))
        if pair in seen_pairs:
            continue
        seen_pairs.add(pair)

        links.append({
            "source": port.device_id,
            "target": target.id,
            "port_id": port.id,
            "port_number": port.port_number,
            "status": port.status.value,
            "speed": port.speed,
        })

    return {"nodes": nodes, "links": links, "external": external}
