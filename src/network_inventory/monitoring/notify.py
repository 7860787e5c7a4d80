"""
Alert notification delivery.

Delivers newly raised alerts to the channels named by the rule that raised
them. Delivery failures are logged and never propagate into the monitor.
"""

from __future__ import annotations

import logging
from typing import Optional

import aiohttp

from .._types import Alert, Device, NotificationChannel

logger = logging.getLogger(__name__)


class Notifier:
    """Sends alerts to console and webhook channels."""

    def __init__(self, webhook_url: Optional[str] = None, timeout_seconds: int = 10):
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds

    async def send(
        self,
        alert: Alert,
        channels: list[NotificationChannel],
        device: Optional[Device] = None,
    ) -> dict[str, bool]:
        """
        Deliver an alert to each channel.

        Returns a mapping of channel name to delivery success.
        """
        results = {}
        for channel in channels:
            if channel == NotificationChannel.CONSOLE:
                results[channel.value] = self._send_console(alert)
            elif channel == NotificationChannel.WEBHOOK:
                results[channel.value] = await self._send_webhook(alert, device)
            else:
                logger.warning(f"Unsupported notification channel: {channel}")
                results[str(channel)] = False
        return results

    def _send_console(self, alert: Alert) -> bool:
        logger.warning(f"[Alert] {alert.severity.value.upper()}: {alert.message}")
        return True

    async def _send_webhook(self, alert: Alert, device: Optional[Device]) -> bool:
        if not self.webhook_url:
            logger.warning(f"Webhook channel requested for alert {alert.id} but no webhook_url set")
            return False

        payload = alert.to_dict()
        if device:
            payload["device_name"] = device.name
            payload["device_ip_address"] = device.ip_address

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.webhook_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                ) as resp:
                    if 200 <= resp.status < 300:
                        logger.debug(f"Webhook delivered alert {alert.id}")
                        return True
                    error_text = await resp.text()
                    logger.error(f"Webhook delivery failed: {resp.status} - {error_text}")
                    return False
        except aiohttp.ClientError as e:
            logger.error(f"Webhook connection error: {e}")
            return False
        except Exception as e:
            logger.error(f"Webhook delivery error: {e}")
            return False
