from fastapi import APIRouter, Depends
from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload

from campusnet.auth import get_current_user, get_db, require_admin
from campusnet.core.usage import matches_search
from campusnet.database import apply_updates, commit_or_conflict, get_or_raise
from campusnet.db.models import Device
from campusnet.schemas.schemas import DeviceCreate, DeviceRead, DeviceUpdate

router = APIRouter(prefix="/devices", tags=["Devices"])


def recent_devices(db: Session, limit: int | None = None) -> list[Device]:
    query = (
        db.query(Device)
        .options(joinedload(Device.network_user), joinedload(Device.zone))
        .order_by(desc(Device.last_seen).nulls_last(), desc(Device.created_at))
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()


@router.get("", response_model=list[DeviceRead])
def list_devices(
    q: str | None = None,
    _current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        d for d in recent_devices(db)
        if matches_search(q, d.mac_address, d.device_name, d.ip_address)
    ]


@router.get("/{device_id}", response_model=DeviceRead)
def get_device(device_id: str, _current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    return get_or_raise(db, Device, device_id)


@router.post("", response_model=DeviceRead, status_code=201)
def create_device(payload: DeviceCreate, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    device = Device(**payload.model_dump())
    db.add(device)
    commit_or_conflict(db, f"MAC address {payload.mac_address} is already registered")
    db.refresh(device)
    return device


@router.patch("/{device_id}", response_model=DeviceRead)
def update_device(
    device_id: str,
    payload: DeviceUpdate,
    _admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    device = get_or_raise(db, Device, device_id)
    apply_updates(device, payload.model_dump(exclude_unset=True))
    commit_or_conflict(db)
    db.refresh(device)
    return device


@router.post("/{device_id}/toggle-block", response_model=DeviceRead)
def toggle_block(device_id: str, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    device = get_or_raise(db, Device, device_id)
    device.status = "offline" if device.status == "blocked" else "blocked"
    db.commit()
    db.refresh(device)
    return device


@router.delete("/{device_id}", status_code=204)
def delete_device(device_id: str, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    device = get_or_raise(db, Device, device_id)
    db.delete(device)
    commit_or_conflict(db)
