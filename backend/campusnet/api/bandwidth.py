from fastapi import APIRouter, Depends
from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload

from campusnet.auth import get_current_user, get_db, require_admin
from campusnet.config import BANDWIDTH_LOG_LIMIT
from campusnet.core.usage import bandwidth_chart, bandwidth_stats
from campusnet.database import commit_or_conflict
from campusnet.db.models import BandwidthLog
from campusnet.schemas.schemas import BandwidthLogCreate, BandwidthLogRead, BandwidthOverview
from campusnet.services.simulator import generate_sample_logs

router = APIRouter(prefix="/bandwidth", tags=["Bandwidth"])


def latest_logs(db: Session, zone_id: str | None = None) -> list[BandwidthLog]:
    logs = (
        db.query(BandwidthLog)
        .options(joinedload(BandwidthLog.zone))
        .order_by(desc(BandwidthLog.recorded_at))
        .limit(BANDWIDTH_LOG_LIMIT)
        .all()
    )
    if zone_id and zone_id != "all":
        logs = [l for l in logs if l.zone_id == zone_id]
    return logs


@router.get("", response_model=BandwidthOverview)
def bandwidth_overview(
    zone_id: str | None = None,
    _current_user=Depends(get_current_user),
    db: Session = Depends(get_db),
):
    logs = latest_logs(db, zone_id)
    return {
        "logs":  logs,
        "stats": bandwidth_stats(logs),
        "chart": bandwidth_chart(logs),
    }


@router.post("", response_model=BandwidthLogRead, status_code=201)
def add_bandwidth_log(payload: BandwidthLogCreate, _admin=Depends(require_admin), db: Session = Depends(get_db)):
    log = BandwidthLog(**payload.model_dump())
    db.add(log)
    commit_or_conflict(db, "Unknown zone")
    db.refresh(log)
    return log


@router.post("/sample", response_model=list[BandwidthLogRead], status_code=201)
def generate_sample_data(_admin=Depends(require_admin), db: Session = Depends(get_db)):
    return generate_sample_logs(db)
