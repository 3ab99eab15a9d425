from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campusnet.auth import get_current_user, get_db, require_admin
from campusnet.core import sessions as lifecycle
from campusnet.core.usage import matches_search
from campusnet.database import get_or_raise
from campusnet.db.models import NetworkUser
from campusnet.schemas.schemas import BandwidthUpdate, ConnectRequest, DisconnectRequest, WifiSessionRead

router = APIRouter(prefix="/sessions", tags=["WiFi Sessions"])


def _search(sessions, q: str | None):
    def fields(s):
        user = s.network_user
        return (
            user.full_name if user else None,
            user.username if user else None,
            s.zone.name if s.zone else None,
            s.device.mac_address if s.device else None,
        )
    return [s for s in sessions if matches_search(q, *fields(s))]


@router.get("", response_model=list[WifiSessionRead])
def list_sessions(q: str | None = None, _current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    return _search(lifecycle.list_sessions(db), q)


@router.get("/active", response_model=list[WifiSessionRead])
def list_active_sessions(q: str | None = None, _current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    return _search(lifecycle.list_active_sessions(db), q)


@router.get("/user/{network_user_id}", response_model=list[WifiSessionRead])
def list_user_sessions(network_user_id: str, _current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    get_or_raise(db, NetworkUser, network_user_id, "Network user")
    return lifecycle.list_user_sessions(db, network_user_id)


@router.post("/connect", response_model=WifiSessionRead, status_code=201)
def connect(payload: ConnectRequest, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    return lifecycle.connect(
        db,
        network_user_id=payload.network_user_id,
        device_id=payload.device_id,
        zone_id=payload.zone_id,
        ip_address=payload.ip_address,
    )


@router.post("/{session_id}/disconnect", response_model=WifiSessionRead)
def disconnect(
    session_id: str,
    payload: DisconnectRequest | None = None,
    _admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    payload = payload or DisconnectRequest()
    return lifecycle.disconnect(
        db,
        session_id,
        bytes_downloaded=payload.bytes_downloaded,
        bytes_uploaded=payload.bytes_uploaded,
    )


@router.put("/{session_id}/bandwidth", response_model=WifiSessionRead)
def update_bandwidth(
    session_id: str,
    payload: BandwidthUpdate,
    _admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    return lifecycle.update_bandwidth(db, session_id, payload.bytes_downloaded, payload.bytes_uploaded)
