from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    gateway_url: str = "http://localhost:8080"
    gateway_token: Optional[str] = None
    gateway_timeout_seconds: float = 30.0

    auth_state_path: str = "auth_info_multi/creds.json"
    catalog_path: Optional[str] = None

    # Connection timings. The gateway owns the 60s QR/connect timeout.
    keepalive_interval_seconds: float = 30.0
    reconnect_delay_seconds: float = 5.0
    connect_retry_delay_seconds: float = 10.0

    max_native_buttons: int = 3

    alert_bot_token: Optional[str] = None
    alert_chat_id: Optional[str] = None

    log_level: str = "INFO"
    debug: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
