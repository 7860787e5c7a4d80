"""
Network inventory configuration.

Settings come from environment variables (`from_env`) or a YAML file
(`from_yaml`). The deployment mode picks sensible defaults for the probe
and alerting; both can be overridden explicitly.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

VALID_MODES = ("development", "production")
VALID_PROBE_MODES = ("simulate", "ping")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class InventoryConfig:
    """Network inventory configuration."""

    # API server
    host: str = "0.0.0.0"
    port: int = 5000

    # Deployment mode: development simulates probes and suppresses alerts
    mode: str = "development"
    probe_mode: Optional[str] = None  # None = derived from mode
    alerts_enabled: Optional[bool] = None  # None = derived from mode

    # Monitoring loop
    monitoring_enabled: bool = True
    monitoring_interval_seconds: int = 60
    ping_timeout_ms: int = 5000
    alert_dedupe_window_seconds: int = 3600
    uptime_window: int = 60  # Checks per device kept for the uptime percentage

    # Store
    seed_data: bool = True

    # Notifications
    webhook_url: Optional[str] = None

    # Browser client
    site_name: str = "Network Inventory"
    ui_refresh_seconds: int = 30

    # Logging
    log_level: str = "INFO"

    @property
    def effective_probe_mode(self) -> str:
        if self.probe_mode:
            return self.probe_mode
        return "ping" if self.mode == "production" else "simulate"

    @property
    def effective_alerts_enabled(self) -> bool:
        if self.alerts_enabled is not None:
            return self.alerts_enabled
        return self.mode == "production"

    @classmethod
    def from_env(cls) -> "InventoryConfig":
        """Load configuration from environment variables."""
        config = cls()

        config.host = os.getenv("INVENTORY_HOST", config.host)
        config.port = int(os.getenv("INVENTORY_PORT", str(config.port)))
        config.mode = os.getenv("INVENTORY_MODE", config.mode).lower()

        if probe_mode := os.getenv("PROBE_MODE"):
            config.probe_mode = probe_mode.lower()
        if os.getenv("ALERTS_ENABLED") is not None:
            config.alerts_enabled = _env_bool("ALERTS_ENABLED", False)

        config.monitoring_enabled = _env_bool("MONITORING_ENABLED", True)
        config.monitoring_interval_seconds = int(os.getenv("MONITORING_INTERVAL", "60"))
        config.ping_timeout_ms = int(os.getenv("PING_TIMEOUT_MS", "5000"))
        config.alert_dedupe_window_seconds = int(os.getenv("ALERT_DEDUPE_WINDOW", "3600"))
        config.uptime_window = int(os.getenv("UPTIME_WINDOW", "60"))

        config.seed_data = _env_bool("SEED_DATA", True)
        config.webhook_url = os.getenv("ALERT_WEBHOOK_URL")

        config.site_name = os.getenv("SITE_NAME", config.site_name)
        config.ui_refresh_seconds = int(os.getenv("UI_REFRESH_SECONDS", "30"))

        config.log_level = os.getenv("LOG_LEVEL", "INFO")

        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "InventoryConfig":
        """Load configuration from YAML file."""
        if not path.exists():
            logger.warning(f"Config file not found: {path}, using defaults")
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        if "api" in data:
            a = data["api"]
            config.host = a.get("host", config.host)
            config.port = a.get("port", config.port)

        config.mode = str(data.get("mode", config.mode)).lower()

        if "monitoring" in data:
            m = data["monitoring"]
            config.monitoring_enabled = m.get("enabled", True)
            config.probe_mode = m.get("probe")
            config.alerts_enabled = m.get("alerts")
            config.monitoring_interval_seconds = m.get("interval_seconds", 60)
            config.ping_timeout_ms = m.get("ping_timeout_ms", 5000)
            config.alert_dedupe_window_seconds = m.get("dedupe_window_seconds", 3600)
            config.uptime_window = m.get("uptime_window", 60)

        if "notifications" in data:
            config.webhook_url = data["notifications"].get("webhook_url")

        if "ui" in data:
            u = data["ui"]
            config.site_name = u.get("site_name", config.site_name)
            config.ui_refresh_seconds = u.get("refresh_seconds", 30)

        config.seed_data = data.get("seed_data", True)
        config.log_level = data.get("log_level", "INFO")

        return config

    def validate(self) -> list[str]:
        """Validate configuration, returning list of errors."""
        errors = []

        if self.mode not in VALID_MODES:
            errors.append(f"Invalid mode: {self.mode} (expected one of {VALID_MODES})")

        if self.probe_mode and self.probe_mode not in VALID_PROBE_MODES:
            errors.append(
                f"Invalid probe mode: {self.probe_mode} (expected one of {VALID_PROBE_MODES})"
            )

        if self.monitoring_interval_seconds < 1:
            errors.append(f"Invalid monitoring interval: {self.monitoring_interval_seconds}")

        if self.ping_timeout_ms < 1:
            errors.append(f"Invalid ping timeout: {self.ping_timeout_ms}")

        if self.uptime_window < 1:
            errors.append(f"Invalid uptime window: {self.uptime_window}")

        if self.port < 1 or self.port > 65535:
            errors.append(f"Invalid port: {self.port}")

        return errors


# Example inventory.yaml:
"""
mode: production

api:
  host: "0.0.0.0"
  port: 5000

monitoring:
  enabled: true
  probe: ping
  alerts: true
  interval_seconds: 60
  ping_timeout_ms: 5000
  dedupe_window_seconds: 3600
  uptime_window: 60

notifications:
  webhook_url: "https://hooks.example.com/network-alerts"

ui:
  site_name: "Main Campus"
  refresh_seconds: 30

seed_data: false
log_level: "INFO"
"""
