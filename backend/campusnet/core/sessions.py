import logging
from datetime import datetime, timezone

from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload

from campusnet.config import SESSION_LIST_LIMIT, USER_SESSION_LIST_LIMIT
from campusnet.core.usage import elapsed_minutes
from campusnet.database import commit_or_conflict
from campusnet.db.models import Device, NetworkUser, WifiSession, Zone
from campusnet.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def _with_relations(query):
    return query.options(
        joinedload(WifiSession.network_user),
        joinedload(WifiSession.device),
        joinedload(WifiSession.zone),
    )


def list_sessions(db: Session, limit: int = SESSION_LIST_LIMIT) -> list[WifiSession]:
    return (
        _with_relations(db.query(WifiSession))
        .order_by(desc(WifiSession.connected_at))
        .limit(limit)
        .all()
    )


def list_active_sessions(db: Session) -> list[WifiSession]:
    return (
        _with_relations(db.query(WifiSession))
        .filter(WifiSession.is_active.is_(True))
        .order_by(desc(WifiSession.connected_at))
        .all()
    )


def list_user_sessions(db: Session, network_user_id: str,
                       limit: int = USER_SESSION_LIST_LIMIT) -> list[WifiSession]:
    return (
        _with_relations(db.query(WifiSession))
        .filter(WifiSession.network_user_id == network_user_id)
        .order_by(desc(WifiSession.connected_at))
        .limit(limit)
        .all()
    )


def get_session(db: Session, session_id: str) -> WifiSession:
    session = (
        _with_relations(db.query(WifiSession))
        .filter(WifiSession.id == session_id)
        .first()
    )
    if session is None:
        raise NotFoundError("Session", session_id)
    return session


# ==============================
# Lifecycle
# ==============================

def connect(
    db: Session,
    network_user_id: str,
    device_id: str | None = None,
    zone_id: str | None = None,
    ip_address: str | None = None,
    now: datetime | None = None,
) -> WifiSession:
    """Open a session and mark the device online and the user as seen."""
    now = now or datetime.now(timezone.utc)

    user = db.get(NetworkUser, network_user_id)
    if user is None:
        raise NotFoundError("Network user", network_user_id)

    device = None
    if device_id:
        device = db.get(Device, device_id)
        if device is None:
            raise NotFoundError("Device", device_id)

    if zone_id and db.get(Zone, zone_id) is None:
        raise NotFoundError("Zone", zone_id)

    session = WifiSession(
        network_user_id=network_user_id,
        device_id=device_id or None,
        zone_id=zone_id or None,
        ip_address=ip_address or None,
        connected_at=now,
        bytes_downloaded=0,
        bytes_uploaded=0,
        is_active=True,
    )
    db.add(session)

    if device is not None:
        device.status = "online"
        device.last_seen = now

    user.last_seen = now

    commit_or_conflict(db, "Could not open session")
    session = get_session(db, session.id)
    logger.info("[SESSIONS] Connected user=%s device=%s zone=%s", network_user_id, device_id, zone_id)
    return session


def disconnect(
    db: Session,
    session_id: str,
    bytes_downloaded: int = 0,
    bytes_uploaded: int = 0,
    now: datetime | None = None,
) -> WifiSession:
    """Close an open session.

    The byte counts passed in are added to what the session already holds.
    The device that carried the session is set offline.
    """
    now = now or datetime.now(timezone.utc)
    session = get_session(db, session_id)
    if not session.is_active:
        raise ConflictError(f"Session {session_id} is already disconnected")

    session.disconnected_at = now
    session.is_active = False
    session.duration_minutes = max(0, elapsed_minutes(session.connected_at, now))
    session.bytes_downloaded = (session.bytes_downloaded or 0) + bytes_downloaded
    session.bytes_uploaded = (session.bytes_uploaded or 0) + bytes_uploaded

    if session.device_id:
        device = db.get(Device, session.device_id)
        if device is not None:
            device.status = "offline"

    commit_or_conflict(db, "Could not close session")
    session = get_session(db, session_id)
    logger.info(
        "[SESSIONS] Disconnected session=%s after %s min (down=%s up=%s)",
        session_id, session.duration_minutes, session.bytes_downloaded, session.bytes_uploaded,
    )
    return session


def update_bandwidth(db: Session, session_id: str, bytes_downloaded: int, bytes_uploaded: int) -> WifiSession:
    session = get_session(db, session_id)
    session.bytes_downloaded = bytes_downloaded
    session.bytes_uploaded = bytes_uploaded
    commit_or_conflict(db)
    return get_session(db, session_id)
