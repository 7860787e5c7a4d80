"""Tests for the in-memory inventory store."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from network_inventory._types import (
    Alert,
    AlertSeverity,
    AlertType,
    Device,
    DeviceHealth,
    DeviceStatus,
    DeviceType,
    Port,
    PortType,
)
from network_inventory.store import InventoryStore


@pytest.fixture
def store():
    """Create an empty store."""
    return InventoryStore()


@pytest.fixture
def seeded_store():
    """Create a store with the demo network."""
    return InventoryStore(seed=True)


def make_device(**overrides) -> Device:
    fields = dict(
        name="Core Switch",
        type=DeviceType.SWITCH,
        model="Catalyst 9300",
        ip_address="10.0.0.2",
        location="Data Center",
    )
    fields.update(overrides)
    return Device(**fields)


class TestSeedData:
    """Tests for the demo network."""

    def test_seed_devices(self, seeded_store):
        """Should seed three devices."""
        devices = seeded_store.get_devices()

        assert len(devices) == 3
        names = {d.name for d in devices}
        assert names == {"Main Building Router", "Floor 2 Switch", "Library Access Point"}

    def test_seed_ports(self, seeded_store):
        """Should seed four ports on the router and switch."""
        ports = seeded_store.get_ports()
        assert len(ports) == 4

        router = next(d for d in seeded_store.get_devices() if d.type == DeviceType.ROUTER)
        router_ports = seeded_store.get_ports_by_device(router.id)
        assert {p.port_number for p in router_ports} == {"Gi0/0/0", "Gi0/0/1"}

    def test_access_point_has_no_mac(self, seeded_store):
        """Access point is seeded without a MAC address."""
        ap = next(d for d in seeded_store.get_devices() if d.type == DeviceType.ACCESS_POINT)
        assert ap.mac_address is None

    def test_empty_by_default(self, store):
        """Store without seed should be empty."""
        assert store.get_devices() == []
        assert store.get_ports() == []


class TestDeviceCRUD:
    """Tests for device operations."""

    def test_create_and_get(self, store):
        """Should store and return a device by id."""
        device = store.create_device(make_device())

        assert store.get_device(device.id) == device

    def test_get_unknown_returns_none(self, store):
        assert store.get_device("missing") is None

    def test_filter_by_type_and_location(self, store):
        """Should filter devices."""
        store.create_device(make_device())
        store.create_device(make_device(name="Edge FW", type=DeviceType.FIREWALL, location="DMZ"))

        assert len(store.get_devices(device_type=DeviceType.FIREWALL)) == 1
        assert len(store.get_devices(location="Data Center")) == 1
        assert len(store.get_devices(status=DeviceStatus.ACTIVE)) == 2

    def test_partial_update(self, store):
        """Should change only the given fields."""
        device = store.create_device(make_device())

        updated = store.update_device(device.id, {"status": DeviceStatus.MAINTENANCE})

        assert updated.status == DeviceStatus.MAINTENANCE
        assert updated.name == "Core Switch"
        assert updated.id == device.id

    def test_update_ignores_id(self, store):
        """Update should never change the id."""
        device = store.create_device(make_device())

        updated = store.update_device(device.id, {"id": "other", "name": "Renamed"})

        assert updated.id == device.id
        assert store.get_device("other") is None

    def test_update_unknown_returns_none(self, store):
        assert store.update_device("missing", {"name": "x"}) is None

    def test_delete_cascades_ports_and_health(self, store):
        """Deleting a device should remove its ports and health record."""
        device = store.create_device(make_device())
        other = store.create_device(make_device(name="Other", ip_address="10.0.0.3"))
        store.create_port(Port(device_id=device.id, port_number="Gi1/0/1", port_type=PortType.ETHERNET))
        store.create_port(Port(device_id=other.id, port_number="Gi1/0/1", port_type=PortType.ETHERNET))
        store.update_device_health(device.id, DeviceHealth(device_id=device.id, is_online=True))

        assert store.delete_device(device.id) is True

        assert store.get_device(device.id) is None
        assert store.get_ports_by_device(device.id) == []
        assert len(store.get_ports()) == 1
        assert store.get_device_health(device.id) is None

    def test_delete_keeps_alerts(self, store):
        """Alerts are kept as history after the device is gone."""
        device = store.create_device(make_device())
        store.create_alert(Alert(
            device_id=device.id,
            type=AlertType.ERROR,
            message="Fan failure",
            severity=AlertSeverity.WARNING,
        ))

        store.delete_device(device.id)

        assert len(store.get_alerts_by_device(device.id)) == 1

    def test_delete_unknown_returns_false(self, store):
        assert store.delete_device("missing") is False


class TestPorts:
    """Tests for port operations."""

    def test_update_port(self, store):
        device = store.create_device(make_device())
        port = store.create_port(Port(device_id=device.id, port_number="Te1/1/1", port_type=PortType.SFP))

        updated = store.update_port(port.id, {"connected_to": "Core Router", "speed": "10 Gbps"})

        assert updated.connected_to == "Core Router"
        assert updated.port_type == PortType.SFP

    def test_delete_port(self, store):
        device = store.create_device(make_device())
        port = store.create_port(Port(device_id=device.id, port_number="Te1/1/1", port_type=PortType.SFP))

        assert store.delete_port(port.id) is True
        assert store.delete_port(port.id) is False


class TestAlerts:
    """Tests for alert operations."""

    def _alert(self, device_id: str, message: str = "Link down") -> Alert:
        return Alert(
            device_id=device_id,
            type=AlertType.ERROR,
            message=message,
            severity=AlertSeverity.CRITICAL,
        )

    def test_create_resets_acknowledgement(self, store):
        """New alerts always start unacknowledged."""
        alert = self._alert("dev-1")
        alert.acknowledged = True
        alert.acknowledged_by = "someone"

        created = store.create_alert(alert)

        assert created.acknowledged is False
        assert created.acknowledged_by is None
        assert created.acknowledged_at is None

    def test_alerts_newest_first(self, store):
        """Alerts should be ordered by timestamp, newest first."""
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        times = [base, base + timedelta(minutes=1), base + timedelta(minutes=2)]

        with patch("network_inventory.store.now_utc", side_effect=times):
            first = store.create_alert(self._alert("dev-1", "first"))
            second = store.create_alert(self._alert("dev-2", "second"))
            third = store.create_alert(self._alert("dev-1", "third"))

        assert [a.id for a in store.get_alerts()] == [third.id, second.id, first.id]
        assert [a.id for a in store.get_alerts_by_device("dev-1")] == [third.id, first.id]

    def test_acknowledge(self, store):
        alert = store.create_alert(self._alert("dev-1"))

        acked = store.acknowledge_alert(alert.id, "Admin User")

        assert acked.acknowledged is True
        assert acked.acknowledged_by == "Admin User"
        assert acked.acknowledged_at is not None

    def test_acknowledge_twice_overwrites(self, store):
        """A second acknowledgement replaces who and when."""
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        times = [base, base + timedelta(minutes=5), base + timedelta(minutes=10)]

        with patch("network_inventory.store.now_utc", side_effect=times):
            alert = store.create_alert(self._alert("dev-1"))
            first = store.acknowledge_alert(alert.id, "Night Shift")
            second = store.acknowledge_alert(alert.id, "Admin User")

        assert second.acknowledged is True
        assert second.acknowledged_by == "Admin User"
        assert second.acknowledged_at > first.acknowledged_at
        assert store.get_alert(alert.id).acknowledged_by == "Admin User"

    def test_acknowledge_unknown(self, store):
        assert store.acknowledge_alert("missing", "Admin User") is None

    def test_filter_alerts(self, store):
        """Should filter by acknowledgement and severity."""
        a = store.create_alert(self._alert("dev-1"))
        store.create_alert(Alert(
            device_id="dev-1",
            type=AlertType.WARNING,
            message="Slow",
            severity=AlertSeverity.WARNING,
        ))
        store.acknowledge_alert(a.id, "ops")

        assert len(store.get_alerts(acknowledged=False)) == 1
        assert len(store.get_alerts(severity=AlertSeverity.CRITICAL)) == 1
        assert store.get_alerts(acknowledged=False, severity=AlertSeverity.CRITICAL) == []

    def test_delete_alert(self, store):
        alert = store.create_alert(self._alert("dev-1"))

        assert store.delete_alert(alert.id) is True
        assert store.get_alert(alert.id) is None


class TestDeviceHealth:
    """Tests for health records."""

    def test_update_stamps_last_checked(self, store):
        """Every write sets last_checked."""
        device = store.create_device(make_device())

        health = store.update_device_health(device.id, DeviceHealth(device_id=device.id, is_online=True))

        assert health.last_checked is not None
        assert store.get_device_health(device.id) == health

    def test_update_uses_path_device_id(self, store):
        """The device id argument wins over the record's own id."""
        device = store.create_device(make_device())

        health = store.update_device_health(device.id, DeviceHealth(device_id="other"))

        assert health.device_id == device.id

    def test_update_unknown_device(self, store):
        """No health record is written for a device that does not exist."""
        assert store.update_device_health("missing", DeviceHealth(device_id="missing")) is None
        assert store.get_all_device_health() == []

    def test_update_after_delete(self, store):
        """A late write for a deleted device does not resurrect its record."""
        device = store.create_device(make_device())
        store.update_device_health(device.id, DeviceHealth(device_id=device.id))
        store.delete_device(device.id)

        assert store.update_device_health(device.id, DeviceHealth(device_id=device.id)) is None
        assert store.get_device_health(device.id) is None

    def test_defaults_normalized(self, store):
        device = store.create_device(make_device())

        health = store.update_device_health(
            device.id,
            DeviceHealth(device_id=device.id, uptime=None, consecutive_failures=None),
        )

        assert health.uptime == 0
        assert health.consecutive_failures == 0
        assert health.response_time is None

    def test_get_all(self, store):
        a = store.create_device(make_device())
        b = store.create_device(make_device(name="Other", ip_address="10.0.0.3"))
        store.update_device_health(a.id, DeviceHealth(device_id=a.id))
        store.update_device_health(b.id, DeviceHealth(device_id=b.id))

        assert {h.device_id for h in store.get_all_device_health()} == {a.id, b.id}
