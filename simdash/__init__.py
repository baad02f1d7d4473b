#!filepath: simdash/__init__.py

from .utils.logger import Logging, logs
from .utils.path import PathManager
from .config.app_config import AppConfig

path = PathManager

__all__ = [
    "logs", "Logging",
    "path",
    "AppConfig",
]
