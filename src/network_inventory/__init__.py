"""
Network Inventory - device inventory and health dashboard.

Tracks network devices, their ports and alerts, and polls every device's
reachability on a fixed interval. Alerts are raised from a small rule set
when a device stays offline or answers slowly.

Components:
    store       - in-memory devices, ports, alerts and health records
    routes      - REST API over the store (FastAPI)
    monitoring  - periodic reachability loop and alert rules
    web_*       - single-page browser client
"""

__version__ = "1.0.0"

from ._types import (
    Alert,
    AlertConditions,
    AlertRule,
    AlertSeverity,
    AlertType,
    Device,
    DeviceHealth,
    DeviceStatus,
    DeviceType,
    NotificationChannel,
    Port,
    PortStatus,
    PortType,
    ProbeResult,
)

__all__ = [
    "__version__",
    "Alert",
    "AlertConditions",
    "AlertRule",
    "AlertSeverity",
    "AlertType",
    "Device",
    "DeviceHealth",
    "DeviceStatus",
    "DeviceType",
    "NotificationChannel",
    "Port",
    "PortStatus",
    "PortType",
    "ProbeResult",
]
