import os

from dotenv import load_dotenv
load_dotenv()


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./campusnet.db")

SECRET_KEY                  = os.getenv("SECRET_KEY", "change-me-campusnet-secret")
ALGORITHM                   = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

DEFAULT_ADMIN_EMAIL    = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@campus.edu")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")
DEFAULT_ADMIN_NAME     = os.getenv("DEFAULT_ADMIN_NAME", "Network Administrator")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://127.0.0.1:5173,http://localhost:5173,"
        "http://127.0.0.1:3000,http://localhost:3000",
    ).split(",")
    if origin.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SESSION_LIST_LIMIT      = int(os.getenv("SESSION_LIST_LIMIT", "200"))
USER_SESSION_LIST_LIMIT = int(os.getenv("USER_SESSION_LIST_LIMIT", "50"))
BANDWIDTH_LOG_LIMIT     = int(os.getenv("BANDWIDTH_LOG_LIMIT", "100"))

PORTAL_IP_PREFIX = os.getenv("PORTAL_IP_PREFIX", "192.168")
SIMULATOR_AUTOSTART = os.getenv("SIMULATOR_AUTOSTART", "false").lower() in ("1", "true", "yes")
