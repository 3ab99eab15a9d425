from fastapi import APIRouter, Depends
from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload

from campusnet.auth import get_current_user, get_db, require_admin
from campusnet.core.usage import matches_search
from campusnet.database import commit_or_conflict, get_or_raise
from campusnet.db.models import IntrusionAlert
from campusnet.schemas.schemas import AlertFilter, AlertList, IntrusionAlertCreate, IntrusionAlertRead

router = APIRouter(prefix="/alerts", tags=["Intrusion Alerts"])


def all_alerts(db: Session) -> list[IntrusionAlert]:
    return (
        db.query(IntrusionAlert)
        .options(joinedload(IntrusionAlert.device))
        .order_by(desc(IntrusionAlert.created_at))
        .all()
    )


def filter_alerts(alerts, status: str = "all", q: str | None = None) -> list[IntrusionAlert]:
    def keep(alert) -> bool:
        mac = alert.device.mac_address if alert.device is not None else None
        if not matches_search(q, alert.alert_type, alert.description, mac):
            return False
        if status == "active":
            return not alert.resolved
        if status == "resolved":
            return bool(alert.resolved)
        return True

    return [a for a in alerts if keep(a)]


@router.get("", response_model=AlertList)
def list_alerts(
    status: AlertFilter = "all",
    q: str | None = None,
    _current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    alerts = all_alerts(db)
    return {
        "alerts":       filter_alerts(alerts, status, q),
        "active_count": sum(1 for a in alerts if not a.resolved),
    }


@router.post("", response_model=IntrusionAlertRead, status_code=201)
def create_alert(payload: IntrusionAlertCreate, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    alert = IntrusionAlert(**payload.model_dump())
    db.add(alert)
    commit_or_conflict(db, "Unknown device")
    db.refresh(alert)
    return alert


@router.post("/{alert_id}/resolve", response_model=IntrusionAlertRead)
def resolve_alert(alert_id: str, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    alert = get_or_raise(db, IntrusionAlert, alert_id, "Alert")
    alert.resolved = True
    db.commit()
    db.refresh(alert)
    return alert
