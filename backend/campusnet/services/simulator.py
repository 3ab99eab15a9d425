import logging
import random
import threading

from sqlalchemy.orm import Session

from campusnet.database import SessionLocal
from campusnet.db.models import BandwidthLog, Zone
from campusnet.errors import ValidationFailed

logger = logging.getLogger(__name__)

MIN_INTERVAL = 30.0
MAX_INTERVAL = 90.0

DOWNLOAD_RANGE = (50.0, 150.0)
UPLOAD_RANGE = (20.0, 70.0)
DEVICE_RANGE = (5, 34)

SIMULATOR_THREAD_NAME = "bandwidth-simulator"
STOP_TIMEOUT = 10.0

_stop_event = threading.Event()
_lock = threading.Lock()
_simulator_thread: threading.Thread | None = None
_logs_generated = 0


def _sample(zone_id: str, rng=random) -> BandwidthLog:
    return BandwidthLog(
        zone_id=zone_id,
        download_mbps=round(rng.uniform(*DOWNLOAD_RANGE), 2),
        upload_mbps=round(rng.uniform(*UPLOAD_RANGE), 2),
        active_devices=rng.randint(*DEVICE_RANGE),
    )


def generate_sample_logs(db: Session, rng=random) -> list[BandwidthLog]:
    """Record one synthetic bandwidth reading for every zone."""
    zones = db.query(Zone).order_by(Zone.name).all()
    if not zones:
        raise ValidationFailed("Please add some zones first")

    logs = [_sample(zone.id, rng) for zone in zones]
    db.add_all(logs)
    db.commit()
    for log in logs:
        db.refresh(log)
    return logs


def _simulator_loop():
    global _logs_generated

    logger.info("[SIMULATOR] Bandwidth simulation started.")

    while True:
        db = SessionLocal()
        try:
            logs = generate_sample_logs(db)
            _logs_generated += len(logs)
            logger.debug("[SIMULATOR] Recorded %d readings (total %d)", len(logs), _logs_generated)
        except ValidationFailed:
            logger.info("[SIMULATOR] No zones yet, waiting.")
        except Exception:
            logger.exception("[SIMULATOR] Sampling failed")
            db.rollback()
        finally:
            db.close()

        if _stop_event.wait(random.uniform(MIN_INTERVAL, MAX_INTERVAL)):
            break

    logger.info("[SIMULATOR] Bandwidth simulation stopped.")


def _is_running() -> bool:
    return _simulator_thread is not None and _simulator_thread.is_alive() and not _stop_event.is_set()


def start_simulator():
    global _simulator_thread
    with _lock:
        if _simulator_thread is not None and _simulator_thread.is_alive():
            # a stopped loop that has not exited yet still counts
            return False
        _stop_event.clear()
        _simulator_thread = threading.Thread(target=_simulator_loop, name=SIMULATOR_THREAD_NAME, daemon=True)
        _simulator_thread.start()
        return True


def stop_simulator():
    global _simulator_thread
    with _lock:
        _stop_event.set()
        thread = _simulator_thread
        if thread is not None:
            thread.join(STOP_TIMEOUT)
            if thread.is_alive():
                logger.warning("[SIMULATOR] Loop did not exit within %.0fs", STOP_TIMEOUT)
                return False
        _simulator_thread = None
        return True


def simulator_status():
    return {
        "running":        _is_running(),
        "logs_generated": _logs_generated,
        "interval_range": f"{MIN_INTERVAL}-{MAX_INTERVAL}s",
    }
