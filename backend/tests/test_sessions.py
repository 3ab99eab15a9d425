from datetime import datetime, timedelta, timezone

import pytest

from campusnet.core import sessions as lifecycle
from campusnet.core.usage import as_utc
from campusnet.db.models import Device, NetworkUser, WifiSession
from campusnet.errors import ConflictError, NotFoundError

START = datetime(2026, 5, 4, 8, 0, tzinfo=timezone.utc)


def test_connect_marks_device_online_and_user_seen(db, network_user, device):
    session = lifecycle.connect(
        db,
        network_user_id=network_user.id,
        device_id=device.id,
        zone_id=device.zone_id,
        ip_address="10.0.0.15",
        now=START,
    )

    assert session.is_active is True
    assert session.bytes_downloaded == 0
    assert session.bytes_uploaded == 0
    assert as_utc(session.connected_at) == START
    assert session.network_user.username == "jdoe"
    assert session.zone.name == "Library"

    db.expire_all()
    assert db.get(Device, device.id).status == "online"
    assert as_utc(db.get(Device, device.id).last_seen) == START
    assert as_utc(db.get(NetworkUser, network_user.id).last_seen) == START


def test_connect_without_device_only_touches_user(db, network_user):
    session = lifecycle.connect(db, network_user_id=network_user.id, now=START)

    assert session.device_id is None
    assert session.zone_id is None
    assert as_utc(db.get(NetworkUser, network_user.id).last_seen) == START


def test_connect_unknown_user(db):
    with pytest.raises(NotFoundError):
        lifecycle.connect(db, network_user_id="missing")


def test_connect_unknown_device_does_not_open_a_session(db, network_user):
    with pytest.raises(NotFoundError):
        lifecycle.connect(db, network_user_id=network_user.id, device_id="missing")

    assert db.query(WifiSession).count() == 0


def test_disconnect_accumulates_bytes_and_sets_duration(db, network_user, device):
    opened = lifecycle.connect(db, network_user.id, device_id=device.id, now=START)
    lifecycle.update_bandwidth(db, opened.id, bytes_downloaded=1000, bytes_uploaded=300)

    closed = lifecycle.disconnect(
        db,
        opened.id,
        bytes_downloaded=500,
        bytes_uploaded=20,
        now=START + timedelta(minutes=95, seconds=59),
    )

    assert closed.is_active is False
    assert closed.duration_minutes == 95
    assert closed.bytes_downloaded == 1500
    assert closed.bytes_uploaded == 320
    assert as_utc(closed.disconnected_at) == START + timedelta(minutes=95, seconds=59)

    db.expire_all()
    assert db.get(Device, device.id).status == "offline"


def test_disconnect_twice_is_a_conflict(db, network_user):
    opened = lifecycle.connect(db, network_user.id, now=START)
    lifecycle.disconnect(db, opened.id, now=START + timedelta(minutes=1))

    with pytest.raises(ConflictError):
        lifecycle.disconnect(db, opened.id)


def test_disconnect_unknown_session(db):
    with pytest.raises(NotFoundError):
        lifecycle.disconnect(db, "missing")


def test_update_bandwidth_overwrites_counters(db, network_user):
    opened = lifecycle.connect(db, network_user.id, now=START)
    lifecycle.update_bandwidth(db, opened.id, 10, 10)

    updated = lifecycle.update_bandwidth(db, opened.id, 7, 3)

    assert (updated.bytes_downloaded, updated.bytes_uploaded) == (7, 3)


def test_listings(db, network_user, zone):
    other = NetworkUser(username="bob", full_name="Bob Smith")
    db.add(other)
    db.commit()

    first = lifecycle.connect(db, network_user.id, zone_id=zone.id, now=START)
    second = lifecycle.connect(db, other.id, now=START + timedelta(hours=1))
    lifecycle.disconnect(db, first.id, now=START + timedelta(minutes=10))

    assert [s.id for s in lifecycle.list_sessions(db)] == [second.id, first.id]
    assert [s.id for s in lifecycle.list_active_sessions(db)] == [second.id]
    assert [s.id for s in lifecycle.list_user_sessions(db, network_user.id)] == [first.id]
    assert lifecycle.list_sessions(db, limit=1)[0].id == second.id


def test_connect_unknown_zone(db, network_user):
    with pytest.raises(NotFoundError):
        lifecycle.connect(db, network_user.id, zone_id="missing")

    assert db.query(WifiSession).count() == 0
