"""
Monitoring Service - periodic reachability loop.

Probes every device once per interval, updates its health record and
evaluates the alert rules against what it saw.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from datetime import datetime, timedelta
from typing import Optional

from .._types import Alert, Device, DeviceHealth, now_utc
from ..config import InventoryConfig
from ..store import InventoryStore
from .notify import Notifier
from .probe import ReachabilityProbe, create_probe
from .rules import AlertRuleSet, HealthObservation, alert_type_for, evaluate_rule

logger = logging.getLogger(__name__)


class MonitoringService:
    """
    Device health monitor.

    One cycle runs immediately on start, then one every interval until
    stopped. Cycles never overlap; a manual run waits for a running one.
    """

    def __init__(
        self,
        store: InventoryStore,
        probe: ReachabilityProbe,
        rules: Optional[AlertRuleSet] = None,
        notifier: Optional[Notifier] = None,
        interval_seconds: int = 60,
        alerts_enabled: bool = True,
        dedupe_window_seconds: int = 3600,
        uptime_window: int = 60,
    ):
        """
        Initialize monitoring service.

        Args:
            store: Inventory store to read devices from and write health to
            probe: Reachability probe used for every device
            rules: Alert rules (defaults to the built-in rule set)
            notifier: Alert delivery (defaults to console only)
            interval_seconds: Seconds between cycles
            alerts_enabled: Evaluate alert rules after each check
            dedupe_window_seconds: Suppress repeat alerts from a rule for this long
            uptime_window: Number of recent checks used for the uptime percentage
        """
        self.store = store
        self.probe = probe
        self.rules = rules or AlertRuleSet()
        self.notifier = notifier or Notifier()
        self.interval_seconds = interval_seconds
        self.alerts_enabled = alerts_enabled
        self.dedupe_window = timedelta(seconds=dedupe_window_seconds)
        self.uptime_window = uptime_window

        self._running = False
        self._shutdown_event = asyncio.Event()
        self._cycle_lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self._history: dict[str, deque[bool]] = {}

        self.cycles_run = 0
        self.last_cycle_at: Optional[datetime] = None
        self.last_summary: Optional[dict] = None

    @classmethod
    def from_config(cls, config: InventoryConfig, store: InventoryStore) -> "MonitoringService":
        return cls(
            store=store,
            probe=create_probe(config.effective_probe_mode, config.ping_timeout_ms),
            notifier=Notifier(webhook_url=config.webhook_url),
            interval_seconds=config.monitoring_interval_seconds,
            alerts_enabled=config.effective_alerts_enabled,
            dedupe_window_seconds=config.alert_dedupe_window_seconds,
            uptime_window=config.uptime_window,
        )

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Run an initial cycle, then keep cycling in the background."""
        if self._running:
            logger.info("Monitoring service already running")
            return

        logger.info(
            f"Starting monitoring service (probe={self.probe.name}, "
            f"interval={self.interval_seconds}s, alerts={self.alerts_enabled})"
        )
        self._running = True
        self._shutdown_event.clear()

        # Populate baseline health before the first interval elapses
        await self.run_cycle()

        self._task = asyncio.create_task(self._main_loop())

    async def stop(self) -> None:
        """Stop the loop and wait for it to exit."""
        if not self._running:
            return

        self._running = False
        self._shutdown_event.set()

        if self._task:
            await self._task
            self._task = None

        logger.info("Monitoring service stopped")

    async def _main_loop(self) -> None:
        while self._running:
            try:
                await asyncio.wait_for(
                    self._shutdown_event.wait(),
                    timeout=self.interval_seconds,
                )
                # Shutdown requested
                break
            except asyncio.TimeoutError:
                pass

            try:
                await self.run_cycle()
            except Exception as e:
                logger.error(f"Error in monitoring cycle: {e}")

    async def run_cycle(self) -> dict:
        """
        Check every device once.

        Returns a summary with devices checked, online/offline counts and
        the number of alerts raised.
        """
        async with self._cycle_lock:
            devices = self.store.get_devices()
            logger.info(f"Checking {len(devices)} devices")

            # Forget history for devices that no longer exist
            known = {d.id for d in devices}
            for device_id in list(self._history):
                if device_id not in known:
                    del self._history[device_id]

            online = 0
            offline = 0
            alerts_raised = 0
            errors = 0

            for device in devices:
                try:
                    health, alerts = await self.check_device_health(device)
                except Exception as e:
                    logger.error(f"Error checking device {device.name}: {e}")
                    errors += 1
                    continue

                if health is None:
                    continue
                if health.is_online:
                    online += 1
                else:
                    offline += 1
                alerts_raised += len(alerts)

            self.cycles_run += 1
            self.last_cycle_at = now_utc()
            self.last_summary = {
                "devices_checked": len(devices),
                "online": online,
                "offline": offline,
                "errors": errors,
                "alerts_raised": alerts_raised,
                "completed_at": self.last_cycle_at.isoformat(),
            }

            logger.info(
                f"Monitoring cycle complete: {online} online, {offline} offline, "
                f"{alerts_raised} alerts raised"
            )
            return self.last_summary

    async def check_device_health(
        self, device: Device
    ) -> tuple[Optional[DeviceHealth], list[Alert]]:
        """
        Probe one device, store its health and evaluate alert rules.

        Returns (None, []) if the device was deleted while being probed.
        """
        result = await self.probe.probe(device.ip_address)
        previous = self.store.get_device_health(device.id)
        now = now_utc()

        if result.is_online:
            consecutive_failures = 0
        else:
            consecutive_failures = (previous.consecutive_failures if previous else 0) + 1

        health = self.store.update_device_health(device.id, DeviceHealth(
            device_id=device.id,
            is_online=result.is_online,
            response_time=result.response_time,
            uptime=self._record_uptime(device.id, result.is_online),
            last_online=now if result.is_online else (previous.last_online if previous else None),
            last_offline=now if not result.is_online else (previous.last_offline if previous else None),
            consecutive_failures=consecutive_failures,
        ))
        if health is None:
            # Deleted while the probe was running
            logger.debug(f"Device {device.name} removed during check, discarding result")
            self._history.pop(device.id, None)
            return None, []

        alerts: list[Alert] = []
        if self.alerts_enabled:
            alerts = await self._evaluate_alert_rules(device, HealthObservation(
                is_online=result.is_online,
                response_time=result.response_time,
                consecutive_failures=consecutive_failures,
            ))

        return health, alerts

    def _record_uptime(self, device_id: str, is_online: bool) -> int:
        """Add a check result and return the rolling uptime percentage."""
        history = self._history.get(device_id)
        if history is None or history.maxlen != self.uptime_window:
            history = deque(history or (), maxlen=self.uptime_window)
            self._history[device_id] = history
        history.append(is_online)
        return round(100 * sum(history) / len(history))

    async def _evaluate_alert_rules(
        self,
        device: Device,
        observation: HealthObservation,
    ) -> list[Alert]:
        raised = []
        for rule in self.rules.get_rules():
            message = evaluate_rule(rule, device, observation)
            if not message:
                continue

            if self._has_recent_alert(device.id, rule.id):
                logger.debug(f"Suppressing duplicate {rule.id} alert for {device.name}")
                continue

            alert = self.store.create_alert(Alert(
                device_id=device.id,
                type=alert_type_for(rule.severity),
                message=message,
                severity=rule.severity,
                rule_id=rule.id,
            ))
            raised.append(alert)
            await self.notifier.send(alert, rule.notification_channels, device=device)

        return raised

    def _has_recent_alert(self, device_id: str, rule_id: str) -> bool:
        """True if the rule already has an open alert for the device in the window."""
        cutoff = now_utc() - self.dedupe_window
        return any(
            not a.acknowledged and a.rule_id == rule_id and a.timestamp > cutoff
            for a in self.store.get_alerts_by_device(device_id)
        )

    def status(self) -> dict:
        return {
            "running": self._running,
            "probe": self.probe.name,
            "interval_seconds": self.interval_seconds,
            "alerts_enabled": self.alerts_enabled,
            "cycles_run": self.cycles_run,
            "last_cycle_at": self.last_cycle_at.isoformat() if self.last_cycle_at else None,
            "last_summary": self.last_summary,
        }
