"""Tests for alert notification delivery."""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from network_inventory._types import (
    Alert,
    AlertSeverity,
    AlertType,
    Device,
    DeviceType,
    NotificationChannel,
)
from network_inventory.monitoring.notify import Notifier

WEBHOOK_URL = "https://hooks.example.com/network-alerts"


@pytest.fixture
def alert():
    return Alert(
        device_id="dev-1",
        type=AlertType.OFFLINE,
        message="Device Core (10.0.0.1) has been offline for 3 consecutive checks",
        severity=AlertSeverity.CRITICAL,
        rule_id="device-offline",
    )


@pytest.fixture
def device():
    return Device(
        id="dev-1",
        name="Core",
        type=DeviceType.ROUTER,
        model="ISR",
        ip_address="10.0.0.1",
        location="Server Room A",
    )


def mock_session(status: int = 200, post_side_effect=None):
    """Build a ClientSession mock usable with nested `async with`."""
    response = MagicMock()
    response.status = status
    response.text = AsyncMock(return_value="error body")

    post_ctx = MagicMock()
    post_ctx.__aenter__ = AsyncMock(return_value=response)
    post_ctx.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    if post_side_effect is not None:
        session.post = MagicMock(side_effect=post_side_effect)
    else:
        session.post = MagicMock(return_value=post_ctx)

    session_ctx = MagicMock()
    session_ctx.__aenter__ = AsyncMock(return_value=session)
    session_ctx.__aexit__ = AsyncMock(return_value=False)
    return session_ctx, session


class TestConsole:
    @pytest.mark.asyncio
    async def test_console_logs_warning(self, alert, caplog):
        results = await Notifier().send(alert, [NotificationChannel.CONSOLE])

        assert results == {"console": True}
        assert "[Alert] CRITICAL" in caplog.text


class TestWebhook:
    """Tests for webhook delivery."""

    @pytest.mark.asyncio
    async def test_no_url_fails(self, alert):
        results = await Notifier().send(alert, [NotificationChannel.WEBHOOK])
        assert results == {"webhook": False}

    @pytest.mark.asyncio
    async def test_delivers_payload(self, alert, device):
        session_ctx, session = mock_session(status=200)

        with patch("network_inventory.monitoring.notify.aiohttp.ClientSession", return_value=session_ctx):
            results = await Notifier(webhook_url=WEBHOOK_URL).send(
                alert, [NotificationChannel.WEBHOOK], device=device
            )

        assert results == {"webhook": True}
        args, kwargs = session.post.call_args
        assert args[0] == WEBHOOK_URL
        body = kwargs["json"]
        assert body["id"] == alert.id
        assert body["severity"] == "critical"
        assert body["rule_id"] == "device-offline"
        assert body["device_name"] == "Core"
        assert body["device_ip_address"] == "10.0.0.1"

    @pytest.mark.asyncio
    async def test_payload_without_device(self, alert):
        """Body is the alert JSON itself when the device is not known."""
        session_ctx, session = mock_session(status=204)

        with patch("network_inventory.monitoring.notify.aiohttp.ClientSession", return_value=session_ctx):
            results = await Notifier(webhook_url=WEBHOOK_URL).send(alert, [NotificationChannel.WEBHOOK])

        assert results == {"webhook": True}
        assert session.post.call_args.kwargs["json"] == alert.to_dict()

    @pytest.mark.asyncio
    async def test_error_status_fails(self, alert):
        session_ctx, _ = mock_session(status=500)

        with patch("network_inventory.monitoring.notify.aiohttp.ClientSession", return_value=session_ctx):
            results = await Notifier(webhook_url=WEBHOOK_URL).send(alert, [NotificationChannel.WEBHOOK])

        assert results == {"webhook": False}

    @pytest.mark.asyncio
    async def test_connection_error_fails(self, alert):
        session_ctx, _ = mock_session(post_side_effect=aiohttp.ClientConnectionError("refused"))

        with patch("network_inventory.monitoring.notify.aiohttp.ClientSession", return_value=session_ctx):
            results = await Notifier(webhook_url=WEBHOOK_URL).send(alert, [NotificationChannel.WEBHOOK])

        assert results == {"webhook": False}

    @pytest.mark.asyncio
    async def test_multiple_channels(self, alert):
        results = await Notifier().send(
            alert, [NotificationChannel.CONSOLE, NotificationChannel.WEBHOOK]
        )
        assert results == {"console": True, "webhook": False}
