from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campusnet.auth import get_current_user, get_db, require_admin
from campusnet.core.usage import matches_search
from campusnet.database import apply_updates, commit_or_conflict, get_or_raise
from campusnet.db.models import Zone
from campusnet.schemas.schemas import ZoneCreate, ZoneRead, ZoneStatusUpdate, ZoneUpdate

router = APIRouter(prefix="/zones", tags=["Zones"])


@router.get("", response_model=list[ZoneRead])
def list_zones(
    q: str | None = None,
    _current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    zones = db.query(Zone).order_by(Zone.name).all()
    return [z for z in zones if matches_search(q, z.name, z.location)]


@router.get("/{zone_id}", response_model=ZoneRead)
def get_zone(zone_id: str, _current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    return get_or_raise(db, Zone, zone_id)


@router.post("", response_model=ZoneRead, status_code=201)
def create_zone(payload: ZoneCreate, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    zone = Zone(**payload.model_dump())
    db.add(zone)
    commit_or_conflict(db)
    db.refresh(zone)
    return zone


@router.patch("/{zone_id}", response_model=ZoneRead)
def update_zone(
    zone_id: str,
    payload: ZoneUpdate,
    _admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    zone = get_or_raise(db, Zone, zone_id)
    apply_updates(zone, payload.model_dump(exclude_unset=True))
    commit_or_conflict(db)
    db.refresh(zone)
    return zone


@router.put("/{zone_id}/status", response_model=ZoneRead)
def set_zone_status(
    zone_id: str,
    payload: ZoneStatusUpdate,
    _admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    zone = get_or_raise(db, Zone, zone_id)
    zone.status = payload.status
    db.commit()
    db.refresh(zone)
    return zone


@router.post("/{zone_id}/toggle-maintenance", response_model=ZoneRead)
def toggle_maintenance(zone_id: str, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    zone = get_or_raise(db, Zone, zone_id)
    zone.status = "maintenance" if zone.status == "active" else "active"
    db.commit()
    db.refresh(zone)
    return zone


@router.delete("/{zone_id}", status_code=204)
def delete_zone(zone_id: str, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    zone = get_or_raise(db, Zone, zone_id)
    db.delete(zone)
    commit_or_conflict(db)
