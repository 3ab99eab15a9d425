from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campusnet.auth import get_db
from campusnet.services import portal
from campusnet.schemas.schemas import PortalConnectRequest, PortalSession, PortalZone

router = APIRouter(prefix="/portal", tags=["WiFi Portal"])


@router.get("/zones", response_model=list[PortalZone])
def portal_zones(db: Session = Depends(get_db)):
    return portal.list_zones(db)


@router.post("/connect", response_model=PortalSession, status_code=201)
def portal_connect(payload: PortalConnectRequest, db: Session = Depends(get_db)):
    return portal.connect(
        db,
        username=payload.username,
        device_name=payload.device_name,
        device_type=payload.device_type,
        zone_id=payload.zone_id,
    )


@router.get("/sessions/{session_id}", response_model=PortalSession)
def portal_status(session_id: str, db: Session = Depends(get_db)):
    return portal.status(db, session_id)


@router.post("/sessions/{session_id}/disconnect")
def portal_disconnect(session_id: str, db: Session = Depends(get_db)):
    portal.disconnect(db, session_id)
    return {"message": "Disconnected from WiFi"}
