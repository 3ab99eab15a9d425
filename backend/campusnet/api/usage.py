from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campusnet.auth import get_current_user, get_db
from campusnet.core.usage import compute_user_usage_stats, matches_search, usage_summary
from campusnet.db.models import NetworkUser, WifiSession
from campusnet.schemas.schemas import UsageOverview

router = APIRouter(prefix="/usage", tags=["Usage Tracking"])


def load_usage_stats(db: Session, now: datetime | None = None) -> list[dict]:
    users = db.query(NetworkUser).all()
    sessions = db.query(WifiSession).all()
    return compute_user_usage_stats(users, sessions, now or datetime.now(timezone.utc))


@router.get("", response_model=UsageOverview)
def usage_overview(q: str | None = None, _current_user=Depends(get_current_user), db: Session = Depends(get_db)):
    stats = load_usage_stats(db)
    return {
        "stats": [s for s in stats if matches_search(q, s["full_name"], s["username"], s["department"])],
        "summary": usage_summary(stats),
    }
