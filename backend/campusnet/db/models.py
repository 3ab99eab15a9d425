import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, BigInteger, ForeignKey
from sqlalchemy.orm import relationship

from campusnet.database import Base


def _uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


DEVICE_STATUSES = ("online", "offline", "blocked", "suspicious")
ZONE_STATUSES = ("active", "inactive", "maintenance")
ALERT_SEVERITIES = ("low", "medium", "high", "critical")
APP_ROLES = ("admin", "moderator", "user")


# ==============================
# Network inventory
# ==============================

class Zone(Base):
    __tablename__ = "zones"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String(100), nullable=False)
    location = Column(String(255), nullable=False)
    ap_count = Column(Integer, default=1)
    max_capacity = Column(Integer, default=100)
    current_devices = Column(Integer, default=0)
    status = Column(String(20), default="active")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    @property
    def usage_percent(self) -> float:
        if not self.max_capacity:
            return 0.0
        return round((self.current_devices or 0) / self.max_capacity * 100, 2)


class NetworkUser(Base):
    __tablename__ = "network_users"

    id = Column(String(36), primary_key=True, default=_uuid)
    username = Column(String(100), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255))
    department = Column(String(255))
    user_type = Column(String(50), default="student")
    status = Column(String(20), default="active")
    default_zone_id = Column(String(36), ForeignKey("zones.id", ondelete="SET NULL"))
    password_hash = Column(String(255))
    total_bandwidth_used = Column(BigInteger, default=0)
    last_seen = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    default_zone = relationship("Zone")
    sessions = relationship(
        "WifiSession",
        back_populates="network_user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Device(Base):
    __tablename__ = "devices"

    id = Column(String(36), primary_key=True, default=_uuid)
    mac_address = Column(String(17), unique=True, index=True, nullable=False)
    ip_address = Column(String(45))
    device_name = Column(String(255))
    device_type = Column(String(50))
    network_user_id = Column(String(36), ForeignKey("network_users.id", ondelete="SET NULL"))
    zone_id = Column(String(36), ForeignKey("zones.id", ondelete="SET NULL"))
    status = Column(String(20), default="offline")
    bandwidth_used = Column(BigInteger, default=0)
    last_seen = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    network_user = relationship("NetworkUser")
    zone = relationship("Zone")


# ==============================
# Monitoring
# ==============================

class BandwidthLog(Base):
    __tablename__ = "bandwidth_logs"

    id = Column(String(36), primary_key=True, default=_uuid)
    zone_id = Column(String(36), ForeignKey("zones.id", ondelete="SET NULL"))
    download_mbps = Column(Float)
    upload_mbps = Column(Float)
    active_devices = Column(Integer)
    recorded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    zone = relationship("Zone")


class IntrusionAlert(Base):
    __tablename__ = "intrusion_alerts"

    id = Column(String(36), primary_key=True, default=_uuid)
    device_id = Column(String(36), ForeignKey("devices.id", ondelete="SET NULL"))
    alert_type = Column(String(100), nullable=False)
    severity = Column(String(20), default="medium")
    description = Column(String(1000))
    resolved = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    device = relationship("Device")


class WifiSession(Base):
    __tablename__ = "wifi_sessions"

    id = Column(String(36), primary_key=True, default=_uuid)
    network_user_id = Column(
        String(36),
        ForeignKey("network_users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    device_id = Column(String(36), ForeignKey("devices.id", ondelete="SET NULL"))
    zone_id = Column(String(36), ForeignKey("zones.id", ondelete="SET NULL"))
    connected_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    disconnected_at = Column(DateTime(timezone=True))
    duration_minutes = Column(Integer)
    bytes_downloaded = Column(BigInteger, default=0)
    bytes_uploaded = Column(BigInteger, default=0)
    ip_address = Column(String(45))
    is_active = Column(Boolean, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    network_user = relationship("NetworkUser", back_populates="sessions")
    device = relationship("Device")
    zone = relationship("Zone")


# ==============================
# Admin accounts
# ==============================

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    profile = relationship("Profile", uselist=False, back_populates="user", cascade="all, delete-orphan")
    roles = relationship("UserRole", back_populates="user", cascade="all, delete-orphan")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    department = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="profile")


class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(20), default="user", nullable=False)

    user = relationship("User", back_populates="roles")
