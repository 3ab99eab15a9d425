from fastapi import APIRouter, Depends
from sqlalchemy import desc
from sqlalchemy.orm import Session

from campusnet.auth import get_current_user, get_db, require_admin
from campusnet.core.usage import matches_search
from campusnet.database import apply_updates, commit_or_conflict, get_or_raise
from campusnet.db.models import NetworkUser
from campusnet.schemas.schemas import NetworkUserCreate, NetworkUserRead, NetworkUserUpdate

router = APIRouter(prefix="/network-users", tags=["Network Users"])


@router.get("", response_model=list[NetworkUserRead])
def list_network_users(
    q: str | None = None,
    _current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    users = db.query(NetworkUser).order_by(desc(NetworkUser.created_at)).all()
    return [u for u in users if matches_search(q, u.username, u.full_name, u.email)]


@router.get("/{user_id}", response_model=NetworkUserRead)
def get_network_user(user_id: str, _current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    return get_or_raise(db, NetworkUser, user_id, "Network user")


@router.post("", response_model=NetworkUserRead, status_code=201)
def create_network_user(payload: NetworkUserCreate, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    user = NetworkUser(**payload.model_dump())
    db.add(user)
    commit_or_conflict(db, f"Username {payload.username} is already taken")
    db.refresh(user)
    return user


@router.patch("/{user_id}", response_model=NetworkUserRead)
def update_network_user(
    user_id: str,
    payload: NetworkUserUpdate,
    _admin=Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = get_or_raise(db, NetworkUser, user_id, "Network user")
    apply_updates(user, payload.model_dump(exclude_unset=True))
    commit_or_conflict(db)
    db.refresh(user)
    return user


@router.post("/{user_id}/toggle-block", response_model=NetworkUserRead)
def toggle_block(user_id: str, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    user = get_or_raise(db, NetworkUser, user_id, "Network user")
    user.status = "active" if user.status == "blocked" else "blocked"
    db.commit()
    db.refresh(user)
    return user


@router.delete("/{user_id}", status_code=204)
def delete_network_user(user_id: str, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    user = get_or_raise(db, NetworkUser, user_id, "Network user")
    db.delete(user)
    commit_or_conflict(db)
