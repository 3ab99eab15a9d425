from fastapi import APIRouter, Depends

from campusnet.auth import get_current_user, require_admin
from campusnet.services.simulator import simulator_status, start_simulator, stop_simulator

router = APIRouter(prefix="/simulator", tags=["Simulator"])


@router.post("/start")
def sim_start(_admin=Depends(require_admin)):
    started = start_simulator()
    return {"message": "Simulator started" if started else "Already running"}


@router.post("/stop")
def sim_stop(_admin=Depends(require_admin)):
    stopped = stop_simulator()
    return {"message": "Simulator stopped" if stopped else "Simulator is still shutting down"}


@router.get("/status")
def sim_status(_current_user=Depends(get_current_user)):
    return simulator_status()
