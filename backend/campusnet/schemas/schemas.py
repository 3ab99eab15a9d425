from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


DeviceStatus = Literal["online", "offline", "blocked", "suspicious"]
ZoneStatus = Literal["active", "inactive", "maintenance"]
Severity = Literal["low", "medium", "high", "critical"]
AlertFilter = Literal["all", "active", "resolved"]


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ==============================
# Auth
# ==============================

class SignupRequest(BaseModel):
    email: str
    password: str = Field(min_length=6)
    full_name: str
    department: str | None = None

class LoginJSON(BaseModel):
    email: str
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

class MeResponse(BaseModel):
    email: str
    full_name: str | None
    role: str | None


# ==============================
# Embedded relations
# ==============================

class ZoneRef(ORMModel):
    name: str

class OwnerRef(ORMModel):
    username: str
    full_name: str

class SessionUserRef(ORMModel):
    username: str
    full_name: str
    department: str | None = None

class SessionDeviceRef(ORMModel):
    mac_address: str
    device_name: str | None = None
    device_type: str | None = None

class AlertDeviceRef(ORMModel):
    mac_address: str
    device_name: str | None = None
    ip_address: str | None = None


# ==============================
# Zones
# ==============================

class ZoneCreate(BaseModel):
    name: str
    location: str
    ap_count: int = 1
    max_capacity: int = 100
    status: ZoneStatus = "active"

class ZoneUpdate(BaseModel):
    name: str | None = None
    location: str | None = None
    ap_count: int | None = None
    max_capacity: int | None = None
    status: ZoneStatus | None = None

class ZoneStatusUpdate(BaseModel):
    status: ZoneStatus

class ZoneRead(ORMModel):
    id: str
    name: str
    location: str
    ap_count: int | None
    max_capacity: int | None
    current_devices: int | None
    status: ZoneStatus | None
    usage_percent: float
    created_at: datetime

class PortalZone(ORMModel):
    id: str
    name: str


# ==============================
# Network users
# ==============================

class NetworkUserCreate(BaseModel):
    username: str
    full_name: str
    email: str | None = None
    department: str | None = None
    user_type: str = "student"
    status: str = "active"
    default_zone_id: str | None = None

class NetworkUserUpdate(BaseModel):
    username: str | None = None
    full_name: str | None = None
    email: str | None = None
    department: str | None = None
    user_type: str | None = None
    status: str | None = None
    default_zone_id: str | None = None

class NetworkUserRead(ORMModel):
    id: str
    username: str
    full_name: str
    email: str | None
    department: str | None
    user_type: str | None
    status: str | None
    default_zone_id: str | None
    total_bandwidth_used: int | None
    last_seen: datetime | None
    created_at: datetime


# ==============================
# Devices
# ==============================

class DeviceCreate(BaseModel):
    mac_address: str
    ip_address: str | None = None
    device_name: str | None = None
    device_type: str | None = "laptop"
    network_user_id: str | None = None
    zone_id: str | None = None
    status: DeviceStatus = "offline"

class DeviceUpdate(BaseModel):
    mac_address: str | None = None
    ip_address: str | None = None
    device_name: str | None = None
    device_type: str | None = None
    network_user_id: str | None = None
    zone_id: str | None = None
    status: DeviceStatus | None = None

class DeviceRead(ORMModel):
    id: str
    mac_address: str
    ip_address: str | None
    device_name: str | None
    device_type: str | None
    network_user_id: str | None
    zone_id: str | None
    status: DeviceStatus | None
    bandwidth_used: int | None
    last_seen: datetime | None
    created_at: datetime
    network_user: OwnerRef | None = None
    zone: ZoneRef | None = None


# ==============================
# Bandwidth
# ==============================

class BandwidthLogCreate(BaseModel):
    zone_id: str | None = None
    download_mbps: float | None = None
    upload_mbps: float | None = None
    active_devices: int | None = None

class BandwidthLogRead(ORMModel):
    id: str
    zone_id: str | None
    download_mbps: float | None
    upload_mbps: float | None
    active_devices: int | None
    recorded_at: datetime
    zone: ZoneRef | None = None

class BandwidthStats(BaseModel):
    avg_download: float
    avg_upload: float
    peak_download: float
    peak_devices: int

class ChartPoint(BaseModel):
    time: str
    download: float
    upload: float
    devices: int
    zone: str

class BandwidthOverview(BaseModel):
    logs: list[BandwidthLogRead]
    stats: BandwidthStats
    chart: list[ChartPoint]


# ==============================
# Intrusion alerts
# ==============================

class IntrusionAlertCreate(BaseModel):
    alert_type: str
    device_id: str | None = None
    severity: Severity = "medium"
    description: str | None = None
    resolved: bool = False

class IntrusionAlertRead(ORMModel):
    id: str
    device_id: str | None
    alert_type: str
    severity: Severity | None
    description: str | None
    resolved: bool | None
    created_at: datetime
    device: AlertDeviceRef | None = None

class AlertList(BaseModel):
    alerts: list[IntrusionAlertRead]
    active_count: int


# ==============================
# WiFi sessions
# ==============================

class ConnectRequest(BaseModel):
    network_user_id: str
    device_id: str | None = None
    zone_id: str | None = None
    ip_address: str | None = None

class DisconnectRequest(BaseModel):
    bytes_downloaded: int = Field(default=0, ge=0)
    bytes_uploaded: int = Field(default=0, ge=0)

class BandwidthUpdate(BaseModel):
    bytes_downloaded: int = Field(ge=0)
    bytes_uploaded: int = Field(ge=0)

class WifiSessionRead(ORMModel):
    id: str
    network_user_id: str
    device_id: str | None
    zone_id: str | None
    connected_at: datetime
    disconnected_at: datetime | None
    duration_minutes: int | None
    bytes_downloaded: int | None
    bytes_uploaded: int | None
    ip_address: str | None
    is_active: bool | None
    created_at: datetime
    network_user: SessionUserRef | None = None
    device: SessionDeviceRef | None = None
    zone: ZoneRef | None = None


# ==============================
# Usage tracking
# ==============================

class UserUsageStats(BaseModel):
    network_user_id: str
    full_name: str
    username: str
    department: str | None
    total_sessions: int
    total_time_minutes: int
    total_bytes_downloaded: int
    total_bytes_uploaded: int
    active_sessions: int
    last_connected: datetime | None

class UsageSummary(BaseModel):
    users_online: int
    total_time_minutes: int
    total_bytes_downloaded: int
    total_bytes_uploaded: int
    total_time_display: str
    total_downloaded_display: str

class UsageOverview(BaseModel):
    stats: list[UserUsageStats]
    summary: UsageSummary


# ==============================
# Dashboard
# ==============================

class DashboardStats(BaseModel):
    total_users: int
    total_devices: int
    online_devices: int
    total_zones: int
    unresolved_alerts: int
    active_sessions: int
    total_time_minutes: int
    total_bytes_downloaded: int
    recent_devices: list[DeviceRead]
    recent_alerts: list[IntrusionAlertRead]


# ==============================
# Portal
# ==============================

class PortalConnectRequest(BaseModel):
    username: str
    device_name: str | None = None
    device_type: str = "laptop"
    zone_id: str | None = None

class PortalUser(BaseModel):
    id: str
    username: str
    full_name: str

class PortalDevice(BaseModel):
    device_name: str | None
    device_type: str | None

class PortalSession(BaseModel):
    id: str
    network_user: PortalUser
    zone: ZoneRef | None
    device: PortalDevice | None
    connected_at: datetime
    bytes_downloaded: int
    bytes_uploaded: int
    duration: str | None = None
