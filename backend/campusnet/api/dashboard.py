from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campusnet.api.alerts import all_alerts
from campusnet.api.devices import recent_devices
from campusnet.api.usage import load_usage_stats
from campusnet.auth import get_current_user, get_db
from campusnet.db.models import Device, NetworkUser, WifiSession, Zone
from campusnet.schemas.schemas import DashboardStats

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

RECENT_LIMIT = 5


@router.get("", response_model=DashboardStats)
def dashboard_stats(_current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    usage = load_usage_stats(db)
    unresolved = [a for a in all_alerts(db) if not a.resolved]
    return {
        "total_users":            db.query(NetworkUser).count(),
        "total_devices":          db.query(Device).count(),
        "online_devices":         db.query(Device).filter(Device.status == "online").count(),
        "total_zones":            db.query(Zone).count(),
        "unresolved_alerts":      len(unresolved),
        "active_sessions":        db.query(WifiSession).filter(WifiSession.is_active.is_(True)).count(),
        "total_time_minutes":     sum(s["total_time_minutes"] for s in usage),
        "total_bytes_downloaded": sum(s["total_bytes_downloaded"] for s in usage),
        "recent_devices":         recent_devices(db, limit=RECENT_LIMIT),
        "recent_alerts":          unresolved[:RECENT_LIMIT],
    }
