from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ConnectionStatus(BaseModel):
    connection_state: str
    pairing_artifact: Optional[str] = None
    reconnect_attempts: int = 0
    last_disconnect_cause: Optional[str] = None
    heartbeat_running: bool = False


class HealthResponse(BaseModel):
    status: str
    business: str
    timestamp: datetime
    uptime_seconds: float


class ServiceSummary(BaseModel):
    business: str
    category: str
    phone: str
    connection_state: str
    active_sessions: int
    server_time: datetime
