import math
from datetime import datetime, timezone


BYTE_UNITS = ["B", "KB", "MB", "GB", "TB"]
BYTE_BASE = 1024

CHART_POINTS = 24


def as_utc(ts: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if ts is None:
        return None
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def elapsed_minutes(start: datetime, end: datetime) -> int:
    return math.floor((as_utc(end) - as_utc(start)).total_seconds() / 60)


def matches_search(needle: str | None, *fields: str | None) -> bool:
    if not needle:
        return True
    needle = needle.lower()
    return any(f is not None and needle in f.lower() for f in fields)


def format_bytes(num: int | float) -> str:
    if num <= 0:
        return "0 B"
    value = float(num)
    i = 0
    while value >= BYTE_BASE and i < len(BYTE_UNITS) - 1:
        value /= BYTE_BASE
        i += 1
    text = f"{round(value, 2):.2f}".rstrip("0").rstrip(".")
    return f"{text} {BYTE_UNITS[i]}"


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def format_duration(minutes: int | float) -> str:
    if minutes < 60:
        return f"{_round_half_up(minutes)} min"
    hours = math.floor(minutes / 60)
    remaining_minutes = _round_half_up(minutes % 60)
    if hours < 24:
        return f"{hours}h {remaining_minutes}m"
    days = hours // 24
    return f"{days}d {hours % 24}h"


# ==============================
# Per-user usage aggregation
# ==============================

def session_minutes(session, now: datetime) -> int:
    if session.duration_minutes:
        return session.duration_minutes
    if session.is_active:
        return elapsed_minutes(session.connected_at, now)
    return 0


def compute_user_usage_stats(users, sessions, now: datetime | None = None) -> list[dict]:
    """Join network users with their WiFi sessions.

    ``users`` and ``sessions`` are fully loaded rows (or anything with the
    same attributes). Open sessions without a recorded duration count the
    minutes elapsed up to ``now``. One record is returned per user, in the
    order the users were given.
    """
    now = now or datetime.now(timezone.utc)

    by_user: dict[str, list] = {}
    for s in sessions:
        by_user.setdefault(s.network_user_id, []).append(s)

    stats = []
    for user in users:
        user_sessions = by_user.get(user.id, [])
        last = max(
            (as_utc(s.connected_at) for s in user_sessions),
            default=None,
        )
        stats.append({
            "network_user_id":        user.id,
            "full_name":              user.full_name,
            "username":               user.username,
            "department":             user.department,
            "total_sessions":         len(user_sessions),
            "total_time_minutes":     sum(session_minutes(s, now) for s in user_sessions),
            "total_bytes_downloaded": sum(s.bytes_downloaded or 0 for s in user_sessions),
            "total_bytes_uploaded":   sum(s.bytes_uploaded or 0 for s in user_sessions),
            "active_sessions":        sum(1 for s in user_sessions if s.is_active),
            "last_connected":         last,
        })
    return stats


def usage_summary(stats: list[dict]) -> dict:
    total_time = sum(s["total_time_minutes"] for s in stats)
    total_down = sum(s["total_bytes_downloaded"] for s in stats)
    return {
        "users_online":             sum(1 for s in stats if s["active_sessions"] > 0),
        "total_time_minutes":       total_time,
        "total_bytes_downloaded":   total_down,
        "total_bytes_uploaded":     sum(s["total_bytes_uploaded"] for s in stats),
        "total_time_display":       format_duration(total_time),
        "total_downloaded_display": format_bytes(total_down),
    }


# ==============================
# Bandwidth analytics
# ==============================

def bandwidth_stats(logs) -> dict:
    if not logs:
        return {"avg_download": 0.0, "avg_upload": 0.0, "peak_download": 0.0, "peak_devices": 0}

    downloads = [float(l.download_mbps or 0) for l in logs]
    uploads = [float(l.upload_mbps or 0) for l in logs]
    devices = [l.active_devices or 0 for l in logs]
    return {
        "avg_download":  round(sum(downloads) / len(downloads), 2),
        "avg_upload":    round(sum(uploads) / len(uploads), 2),
        "peak_download": round(max(downloads), 2),
        "peak_devices":  max(devices),
    }


def bandwidth_chart(logs) -> list[dict]:
    """``logs`` arrive newest first; the chart reads oldest to newest."""
    points = []
    for l in reversed(logs[:CHART_POINTS]):
        points.append({
            "time":     as_utc(l.recorded_at).strftime("%H:%M"),
            "download": float(l.download_mbps or 0),
            "upload":   float(l.upload_mbps or 0),
            "devices":  l.active_devices or 0,
            "zone":     l.zone.name if l.zone is not None else "Unknown",
        })
    return points
