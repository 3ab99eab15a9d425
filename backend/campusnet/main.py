import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campusnet.config import CORS_ORIGINS, LOG_LEVEL, SIMULATOR_AUTOSTART
from campusnet.database import engine as db_engine, Base, SessionLocal
from campusnet.errors import CampusNetError
from campusnet.logging_setup import configure_logging
from campusnet.auth import create_default_admin
from campusnet.services.simulator import start_simulator, stop_simulator

from campusnet.api import (
    alerts,
    auth_routes,
    bandwidth,
    dashboard,
    devices,
    network_users,
    portal,
    sessions,
    simulator,
    usage,
    zones,
)

configure_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)


def init_database():
    Base.metadata.create_all(bind=db_engine)
    db = SessionLocal()
    try:
        create_default_admin(db)
    except Exception:
        logger.exception("[AUTH] Could not create default admin")
        db.rollback()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_database()
    logger.info("[STARTUP] Database ready.")
    if SIMULATOR_AUTOSTART:
        start_simulator()
        logger.info("[STARTUP] Bandwidth simulator started.")
    yield
    stop_simulator()
    logger.info("[SHUTDOWN] FastAPI shutting down.")


app = FastAPI(
    title="CampusNet",
    description="Campus WiFi administration: users, devices, zones, sessions and usage tracking",
    version="1.0.0",
    lifespan=lifespan,
)
__all__ = ["app"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CampusNetError)
async def campusnet_error_handler(request: Request, exc: CampusNetError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/", tags=["General"])
def root():
    return {"message": "CampusNet WiFi administration API is running"}


@app.get("/health", tags=["General"])
def health():
    return {"status": "ok"}


for module in (
    auth_routes,
    network_users,
    devices,
    zones,
    bandwidth,
    alerts,
    sessions,
    usage,
    dashboard,
    portal,
    simulator,
):
    app.include_router(module.router)
