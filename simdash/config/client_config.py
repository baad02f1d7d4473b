# simdash/config/client_config.py
from pydantic import BaseModel, field_validator


class ClientConfig(BaseModel):
    base_url: str = "http://localhost:8080"
    live_path: str = "/data/live"
    poll_interval: float = 30.0
    request_timeout: float = 10.0
    initial_capital: float = 200_000.0

    @field_validator("poll_interval")
    @classmethod
    def _positive_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("poll_interval must be > 0")
        return v

    @property
    def live_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.live_path.strip('/')}"
