# simdash/config/server_config.py
from pydantic import BaseModel


class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    live_prefix: str = "/data/"     # served with no-cache
    entry_point: str = "/web/out/"  # "/" redirects here
    max_age: int = 3600
