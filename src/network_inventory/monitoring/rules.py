"""
Alert rules for the monitoring loop.

A rule fires on a health observation when one of its conditions holds:
- offline: device is down for at least N consecutive checks
- latency: response time above a threshold (takes precedence)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Optional

from .._types import (
    AlertConditions,
    AlertRule,
    AlertSeverity,
    AlertType,
    Device,
    NotificationChannel,
)

logger = logging.getLogger(__name__)


@dataclass
class HealthObservation:
    """What one monitoring check saw for a device."""
    is_online: bool
    response_time: Optional[int]
    consecutive_failures: int


def default_rules() -> list[AlertRule]:
    """The rules every monitor starts with."""
    return [
        AlertRule(
            id="device-offline",
            name="Device Offline Alert",
            conditions=AlertConditions(device_offline=True, consecutive_failures=3),
            severity=AlertSeverity.CRITICAL,
            notification_channels=[NotificationChannel.CONSOLE],
        ),
        AlertRule(
            id="high-latency",
            name="High Latency Warning",
            conditions=AlertConditions(response_time_threshold=500),
            severity=AlertSeverity.WARNING,
            notification_channels=[NotificationChannel.CONSOLE],
        ),
    ]


def evaluate_rule(
    rule: AlertRule,
    device: Device,
    observation: HealthObservation,
) -> Optional[str]:
    """
    Evaluate one rule against an observation.

    Returns the alert message if the rule fires, else None. Disabled rules
    never fire.
    """
    if not rule.enabled:
        return None

    conditions = rule.conditions
    message = None

    if conditions.device_offline and not observation.is_online:
        threshold = conditions.consecutive_failures
        if threshold and observation.consecutive_failures >= threshold:
            message = (
                f"Device {device.name} ({device.ip_address}) has been offline for "
                f"{observation.consecutive_failures} consecutive checks"
            )

    threshold_ms = conditions.response_time_threshold
    if (
        threshold_ms
        and observation.response_time
        and observation.response_time > threshold_ms
    ):
        message = (
            f"Device {device.name} ({device.ip_address}) has high latency: "
            f"{observation.response_time}ms"
        )

    return message


def alert_type_for(severity: AlertSeverity) -> AlertType:
    """Alert type recorded for a rule of the given severity."""
    return AlertType.OFFLINE if severity == AlertSeverity.CRITICAL else AlertType.WARNING


class AlertRuleSet:
    """Mutable, ordered collection of alert rules."""

    def __init__(self, rules: Optional[list[AlertRule]] = None):
        self._lock = threading.Lock()
        self._rules: list[AlertRule] = list(rules) if rules is not None else default_rules()

    def get_rules(self) -> list[AlertRule]:
        with self._lock:
            return list(self._rules)

    def get_rule(self, rule_id: str) -> Optional[AlertRule]:
        with self._lock:
            return next((r for r in self._rules if r.id == rule_id), None)

    def add_rule(self, rule: AlertRule) -> AlertRule:
        """Append a rule. Raises ValueError if the id is taken."""
        with self._lock:
            if any(r.id == rule.id for r in self._rules):
                raise ValueError(f"Alert rule already exists: {rule.id}")
            self._rules.append(rule)
        logger.info(f"Added alert rule {rule.id} ({rule.name})")
        return rule

    def update_rule(self, rule_id: str, updates: dict[str, Any]) -> Optional[AlertRule]:
        """
        Apply a partial update to a rule.

        `conditions` may be a partial dict; it is merged into the existing
        conditions. Returns None if no rule has that id.
        """
        with self._lock:
            index = next((i for i, r in enumerate(self._rules) if r.id == rule_id), None)
            if index is None:
                return None

            current = self._rules[index]
            changes = {k: v for k, v in updates.items() if k != "id"}
            if "conditions" in changes:
                condition_changes = changes["conditions"] or {}
                changes["conditions"] = replace(current.conditions, **condition_changes)

            updated = replace(current, **changes)
            self._rules[index] = updated

        logger.info(f"Updated alert rule {rule_id}: {sorted(changes)}")
        return updated
