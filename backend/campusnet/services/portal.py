"""Self-service "connect to WiFi" flow for students and staff.

Nothing here touches a real network. MAC and IP addresses are random
strings and the bandwidth recorded on disconnect is simulated.
"""
import logging
import random
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campusnet.config import PORTAL_IP_PREFIX
from campusnet.core import sessions as session_lifecycle
from campusnet.core.usage import elapsed_minutes, format_duration
from campusnet.db.models import Device, NetworkUser, WifiSession, Zone
from campusnet.errors import ConflictError, NotFoundError, PortalAccessDenied, ValidationFailed

logger = logging.getLogger(__name__)

MAX_SIMULATED_DOWNLOAD = 500_000_000
MAX_SIMULATED_UPLOAD = 100_000_000
MAC_REGISTRATION_ATTEMPTS = 3


def random_mac(rng=random) -> str:
    return ":".join(f"{rng.randrange(256):02X}" for _ in range(6))


def random_ip(rng=random) -> str:
    return f"{PORTAL_IP_PREFIX}.{rng.randrange(255)}.{rng.randrange(255)}"


def list_zones(db: Session) -> list[Zone]:
    return db.query(Zone).order_by(Zone.name).all()


def session_view(session: WifiSession, now: datetime | None = None) -> dict:
    user = session.network_user
    device = session.device
    view = {
        "id": session.id,
        "network_user": {
            "id":        user.id,
            "username":  user.username,
            "full_name": user.full_name,
        },
        "zone": {"name": session.zone.name} if session.zone is not None else None,
        "device": (
            {"device_name": device.device_name, "device_type": device.device_type}
            if device is not None else None
        ),
        "connected_at":     session.connected_at,
        "bytes_downloaded": session.bytes_downloaded or 0,
        "bytes_uploaded":   session.bytes_uploaded or 0,
    }
    if now is not None:
        view["duration"] = format_duration(max(0, elapsed_minutes(session.connected_at, now)))
    return view


def _register_device(db: Session, user: NetworkUser, device_name: str | None,
                     device_type: str, zone_id: str | None) -> Device:
    name = device_name or f"{user.full_name}'s {device_type}"
    for attempt in range(MAC_REGISTRATION_ATTEMPTS):
        mac = random_mac()
        if db.query(Device).filter(Device.mac_address == mac).first() is None:
            break
        logger.debug("[PORTAL] MAC collision on attempt %d", attempt + 1)
    device = Device(
        mac_address=mac,
        device_name=name,
        device_type=device_type,
        network_user_id=user.id,
        zone_id=zone_id,
        status="online",
        ip_address=random_ip(),
    )
    db.add(device)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError("Could not register device") from e
    return device


def connect(
    db: Session,
    username: str,
    device_name: str | None = None,
    device_type: str = "laptop",
    zone_id: str | None = None,
) -> dict:
    username = (username or "").strip()
    if not username:
        raise ValidationFailed("Please enter your username")

    user = db.query(NetworkUser).filter(NetworkUser.username == username).first()
    if user is None:
        raise NotFoundError("Network user", detail="User not found. Please contact IT support.")
    if user.status == "blocked":
        logger.warning("[PORTAL] Blocked user %s tried to connect", username)
        raise PortalAccessDenied("Your account has been blocked. Please contact IT support.")

    zone_id = zone_id or None
    if zone_id is not None and db.get(Zone, zone_id) is None:
        raise NotFoundError("Zone", zone_id)

    # device and session are committed together by the lifecycle
    device = _register_device(db, user, device_name, device_type, zone_id)
    try:
        session = session_lifecycle.connect(
            db,
            network_user_id=user.id,
            device_id=device.id,
            zone_id=zone_id,
            ip_address=device.ip_address,
        )
    except Exception:
        db.rollback()
        raise
    logger.info("[PORTAL] %s connected on %s (%s)", user.username, device.mac_address, device.ip_address)
    return session_view(session)


def _active_session(db: Session, session_id: str) -> WifiSession:
    session = db.get(WifiSession, session_id)
    if session is None or not session.is_active:
        raise NotFoundError("Active session", session_id)
    return session


def status(db: Session, session_id: str, now: datetime | None = None) -> dict:
    session = _active_session(db, session_id)
    return session_view(session, now or datetime.now(timezone.utc))


def disconnect(db: Session, session_id: str, rng=random) -> WifiSession:
    _active_session(db, session_id)
    session = session_lifecycle.disconnect(
        db,
        session_id,
        bytes_downloaded=rng.randrange(MAX_SIMULATED_DOWNLOAD),
        bytes_uploaded=rng.randrange(MAX_SIMULATED_UPLOAD),
    )
    logger.info("[PORTAL] Session %s disconnected", session_id)
    return session
