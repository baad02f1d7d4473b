#!filepath: simdash/config/app_config.py
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .log_config import LogConfig
from .scheduler_config import SchedulerConfig
from .server_config import ServerConfig
from .client_config import ClientConfig
from simdash.utils.errors import ConfigError
from simdash.utils.logger import logs


def project_root() -> str:
    """
    simdash/config/app_config.py -> simdash/config -> simdash -> project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


class AppConfig(BaseModel):
    log: LogConfig = Field(default_factory=LogConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    client: ClientConfig = Field(default_factory=ClientConfig)

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        Load YAML config + .env
        - default: simdash/config/base.yml
        - independent of the current working directory
        """
        root = project_root()

        # 1) .env at project root
        load_dotenv(os.path.join(root, ".env"))

        # 2) config file path
        if path is None:
            path = os.path.join(root, "simdash/config/base.yml")

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            raise ConfigError(f"invalid config {path}: top level must be a mapping")

        # empty sections ("scheduler:" with no body) fall back to defaults
        raw = {k: ({} if v is None else v) for k, v in raw.items()}

        # 4) env overrides
        sim_bin = os.getenv("SIMDASH_SIMULATION_BIN")
        scheduler = raw.get("scheduler") or {}
        if sim_bin and isinstance(scheduler, dict):
            simulation = scheduler.get("simulation") or {"name": "live.ua", "args": ["run", "live.ua"]}
            if isinstance(simulation, dict):
                simulation["command"] = sim_bin
            scheduler["simulation"] = simulation
            raw["scheduler"] = scheduler

        try:
            cfg = cls(**raw)
        except ValidationError as e:
            raise ConfigError(f"invalid config {path}: {e}") from e

        logs.debug(f"[AppConfig] loaded {path}")
        return cfg
