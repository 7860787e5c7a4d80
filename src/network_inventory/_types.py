"""
Type definitions for the network inventory.

These dataclasses define the core domain model for devices, their ports,
monitoring health records and alerts.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def now_utc() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class DeviceType(str, Enum):
    """Device classification types."""
    ROUTER = "router"
    SWITCH = "switch"
    ACCESS_POINT = "access-point"
    SERVER = "server"
    FIREWALL = "firewall"


class DeviceStatus(str, Enum):
    """Administrative device status (set by operators, not the monitor)."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"
    ERROR = "error"


class PortType(str, Enum):
    ETHERNET = "ethernet"
    FIBER = "fiber"
    SFP = "sfp"
    USB = "usb"
    CONSOLE = "console"


class PortStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"


class AlertType(str, Enum):
    OFFLINE = "offline"
    ONLINE = "online"
    ERROR = "error"
    WARNING = "warning"
    MAINTENANCE = "maintenance"
    PERFORMANCE = "performance"


class AlertSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class NotificationChannel(str, Enum):
    """Where a raised alert is delivered."""
    CONSOLE = "console"  # Logged at WARNING
    WEBHOOK = "webhook"  # POSTed to the configured webhook URL


@dataclass
class Device:
    """A network device tracked in the inventory."""
    name: str
    type: DeviceType
    model: str
    ip_address: str
    location: str
    status: DeviceStatus = DeviceStatus.ACTIVE
    mac_address: Optional[str] = None
    description: Optional[str] = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "model": self.model,
            "ip_address": self.ip_address,
            "mac_address": self.mac_address,
            "location": self.location,
            "status": self.status.value,
            "description": self.description,
        }


@dataclass
class Port:
    """A physical or logical port on a device."""
    device_id: str
    port_number: str  # Free text, e.g. "Gi0/0/1"
    port_type: PortType
    status: PortStatus = PortStatus.ACTIVE
    connected_to: Optional[str] = None  # Device name, IP or free text
    speed: Optional[str] = None
    description: Optional[str] = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "device_id": self.device_id,
            "port_number": self.port_number,
            "port_type": self.port_type.value,
            "status": self.status.value,
            "connected_to": self.connected_to,
            "speed": self.speed,
            "description": self.description,
        }


@dataclass
class Alert:
    """An alert raised against a device, manually or by the monitor."""
    device_id: str
    type: AlertType
    message: str
    severity: AlertSeverity
    timestamp: datetime = field(default_factory=now_utc)
    acknowledged: bool = False
    acknowledged_by: Optional[str] = None
    acknowledged_at: Optional[datetime] = None
    rule_id: Optional[str] = None  # Set when raised by an alert rule
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "device_id": self.device_id,
            "type": self.type.value,
            "message": self.message,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "acknowledged": self.acknowledged,
            "acknowledged_by": self.acknowledged_by,
            "acknowledged_at": _iso(self.acknowledged_at),
            "rule_id": self.rule_id,
        }


@dataclass
class DeviceHealth:
    """Latest reachability state for a device."""
    device_id: str
    is_online: bool = False
    response_time: Optional[int] = None  # milliseconds
    uptime: int = 0  # percentage, 0-100
    last_checked: Optional[datetime] = None
    last_online: Optional[datetime] = None
    last_offline: Optional[datetime] = None
    consecutive_failures: int = 0

    def to_dict(self) -> dict:
        return {
            "device_id": self.device_id,
            "last_checked": _iso(self.last_checked),
            "is_online": self.is_online,
            "response_time": self.response_time,
            "uptime": self.uptime,
            "last_online": _iso(self.last_online),
            "last_offline": _iso(self.last_offline),
            "consecutive_failures": self.consecutive_failures,
        }


@dataclass
class AlertConditions:
    """
    Trigger conditions for an alert rule.

    A condition left as None is not evaluated.
    """
    device_offline: Optional[bool] = None
    consecutive_failures: Optional[int] = None
    response_time_threshold: Optional[int] = None  # milliseconds

    def to_dict(self) -> dict:
        return {
            "device_offline": self.device_offline,
            "consecutive_failures": self.consecutive_failures,
            "response_time_threshold": self.response_time_threshold,
        }


@dataclass
class AlertRule:
    """A monitoring rule that turns health observations into alerts."""
    id: str
    name: str
    conditions: AlertConditions
    severity: AlertSeverity
    enabled: bool = True
    notification_channels: list[NotificationChannel] = field(
        default_factory=lambda: [NotificationChannel.CONSOLE]
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "enabled": self.enabled,
            "conditions": self.conditions.to_dict(),
            "severity": self.severity.value,
            "notification_channels": [c.value for c in self.notification_channels],
        }


@dataclass
class ProbeResult:
    """Outcome of a single reachability probe."""
    is_online: bool
    response_time: Optional[int] = None  # milliseconds
