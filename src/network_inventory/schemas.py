"""
Request models for the REST API.

Create models require every mandatory field; update models accept any
subset and are applied as partial updates.
"""

import ipaddress
import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ._types import (
    AlertConditions,
    AlertRule,
    AlertSeverity,
    AlertType,
    DeviceStatus,
    DeviceType,
    NotificationChannel,
    PortStatus,
    PortType,
)

_MAC_RE = re.compile(r"^([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}$")


def _check_ip(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    try:
        ipaddress.ip_address(value)
    except ValueError:
        raise ValueError(f"Invalid IP address: {value}")
    return value


def _check_mac(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    value = value.strip()
    if not _MAC_RE.match(value):
        raise ValueError(f"Invalid MAC address: {value}")
    return value


def _not_null(value):
    if value is None:
        raise ValueError("Field may not be null")
    return value


# ============================================================================
# Devices
# ============================================================================


class DeviceCreate(BaseModel):
    """Request to add a device."""

    name: str = Field(..., min_length=1, description="Display name")
    type: DeviceType
    model: str = Field(..., min_length=1, description="Hardware model")
    ip_address: str = Field(..., description="Management IPv4 or IPv6 address")
    mac_address: Optional[str] = None
    location: str = Field(..., min_length=1, description="Physical location")
    status: DeviceStatus = DeviceStatus.ACTIVE
    description: Optional[str] = None

    @field_validator("ip_address")
    @classmethod
    def valid_ip(cls, value: str) -> str:
        return _check_ip(value)

    @field_validator("mac_address")
    @classmethod
    def valid_mac(cls, value: Optional[str]) -> Optional[str]:
        return _check_mac(value)


class DeviceUpdate(BaseModel):
    """Partial device update."""

    name: Optional[str] = Field(None, min_length=1)
    type: Optional[DeviceType] = None
    model: Optional[str] = Field(None, min_length=1)
    ip_address: Optional[str] = None
    mac_address: Optional[str] = None
    location: Optional[str] = Field(None, min_length=1)
    status: Optional[DeviceStatus] = None
    description: Optional[str] = None

    @field_validator("name", "type", "model", "ip_address", "location", "status")
    @classmethod
    def required_not_null(cls, value):
        return _not_null(value)

    @field_validator("ip_address")
    @classmethod
    def valid_ip(cls, value: str) -> str:
        return _check_ip(value)

    @field_validator("mac_address")
    @classmethod
    def valid_mac(cls, value: Optional[str]) -> Optional[str]:
        return _check_mac(value)


# ============================================================================
# Ports
# ============================================================================


class PortCreate(BaseModel):
    """Request to add a port to a device."""

    device_id: str = Field(..., min_length=1)
    port_number: str = Field(..., min_length=1, description="Interface name, e.g. Gi0/0/1")
    port_type: PortType
    status: PortStatus = PortStatus.ACTIVE
    connected_to: Optional[str] = None
    speed: Optional[str] = None
    description: Optional[str] = None


class PortUpdate(BaseModel):
    """Partial port update."""

    device_id: Optional[str] = Field(None, min_length=1)
    port_number: Optional[str] = Field(None, min_length=1)
    port_type: Optional[PortType] = None
    status: Optional[PortStatus] = None
    connected_to: Optional[str] = None
    speed: Optional[str] = None
    description: Optional[str] = None

    @field_validator("device_id", "port_number", "port_type", "status")
    @classmethod
    def required_not_null(cls, value):
        return _not_null(value)


# ============================================================================
# Alerts
# ============================================================================


class AlertCreate(BaseModel):
    """Request to raise an alert manually."""

    device_id: str = Field(..., min_length=1)
    type: AlertType
    message: str = Field(..., min_length=1)
    severity: AlertSeverity


class AcknowledgeRequest(BaseModel):
    """Request to acknowledge an alert."""

    acknowledged_by: str = Field(..., description="Who acknowledged the alert")

    @field_validator("acknowledged_by")
    @classmethod
    def non_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("acknowledged_by is required")
        return value


# ============================================================================
# Device health
# ============================================================================


class DeviceHealthUpdate(BaseModel):
    """Full replacement of a device health record."""

    is_online: bool
    response_time: Optional[float] = Field(None, ge=0, description="Milliseconds")
    uptime: float = Field(0, ge=0, le=100, description="Percentage")
    consecutive_failures: int = Field(0, ge=0)
    last_online: Optional[datetime] = None
    last_offline: Optional[datetime] = None


# ============================================================================
# Alert rules
# ============================================================================


class AlertConditionsModel(BaseModel):
    device_offline: Optional[bool] = None
    consecutive_failures: Optional[int] = Field(None, ge=1)
    response_time_threshold: Optional[int] = Field(None, ge=1, description="Milliseconds")


class AlertRuleCreate(BaseModel):
    """Request to add an alert rule."""

    id: str = Field(..., min_length=1, pattern=r"^[a-z0-9][a-z0-9_-]*$")
    name: str = Field(..., min_length=1)
    enabled: bool = True
    conditions: AlertConditionsModel
    severity: AlertSeverity
    notification_channels: list[NotificationChannel] = Field(
        default_factory=lambda: [NotificationChannel.CONSOLE]
    )

    def to_rule(self) -> AlertRule:
        return AlertRule(
            id=self.id,
            name=self.name,
            enabled=self.enabled,
            conditions=AlertConditions(**self.conditions.model_dump()),
            severity=self.severity,
            notification_channels=list(self.notification_channels),
        )


class AlertRuleUpdate(BaseModel):
    """Partial alert rule update. Conditions are merged, not replaced."""

    name: Optional[str] = Field(None, min_length=1)
    enabled: Optional[bool] = None
    conditions: Optional[AlertConditionsModel] = None
    severity: Optional[AlertSeverity] = None
    notification_channels: Optional[list[NotificationChannel]] = None

    @field_validator("name", "enabled", "severity", "notification_channels")
    @classmethod
    def required_not_null(cls, value):
        return _not_null(value)
