#!filepath: simdash/utils/path.py
import os
from pathlib import Path
from typing import Optional

from simdash.utils.logger import logs


class PathManager:
    """
    Project layout (root = directory the simulation runs in):

    <root>
     ├── simdash/config/base.yml
     ├── data/live/        <- snapshot store written by the simulation
     ├── web/out/          <- built dashboard assets
     └── logs/

    root resolution:
      1) set_root(...)
      2) $SIMDASH_PROJECT_ROOT
      3) parents[2] of this file
    """

    _root: Optional[Path] = None

    # ---------------------------------------------------------
    # root detection
    # ---------------------------------------------------------
    @classmethod
    def detect_root(cls) -> Path:
        env_root = os.getenv("SIMDASH_PROJECT_ROOT")
        if env_root:
            root = Path(env_root).expanduser().resolve()
            logs.debug(f"[PathManager] root from env = {root}")
            return root

        # simdash/utils/path.py -> parents[2] = <root>
        root = Path(__file__).resolve().parents[2]
        logs.debug(f"[PathManager] detect_root = {root}")
        return root

    @classmethod
    def root(cls) -> Path:
        if cls._root is None:
            cls._root = cls.detect_root()
        return cls._root

    @classmethod
    def set_root(cls, new_root: Path | str | None):
        if new_root is None:
            cls._root = None
        else:
            cls._root = Path(new_root).resolve()
        logs.debug(f"[PathManager] set_root = {cls._root}")

    # ---------------------------------------------------------
    # data/
    # ---------------------------------------------------------
    @classmethod
    def data_dir(cls) -> Path:
        return cls.root() / "data"

    @classmethod
    def live_dir(cls) -> Path:
        return cls.data_dir() / "live"

    @classmethod
    def snapshot_file(cls, name: str) -> Path:
        return cls.live_dir() / name

    # ---------------------------------------------------------
    # web/ + logs/
    # ---------------------------------------------------------
    @classmethod
    def web_dir(cls) -> Path:
        return cls.root() / "web" / "out"

    @classmethod
    def logs_dir(cls) -> Path:
        return cls.root() / "logs"

    # ---------------------------------------------------------
    # config
    # ---------------------------------------------------------
    @classmethod
    def config_dir(cls) -> Path:
        """Package config dir: simdash/config/ (independent of root)."""
        return Path(__file__).resolve().parents[1] / "config"

    @classmethod
    def config_file(cls, name: str = "base.yml") -> Path:
        return cls.config_dir() / name

    # ---------------------------------------------------------
    # static serving
    # ---------------------------------------------------------
    @classmethod
    def resolve_static(cls, url_path: str, root: Path | None = None) -> Optional[Path]:
        """
        Map a URL path onto a file under root.

        Returns None when the path escapes root.
        """
        root = Path(root).resolve() if root is not None else cls.root()
        candidate = (root / url_path.lstrip("/")).resolve()
        try:
            candidate.relative_to(root)
        except ValueError:
            logs.warning(f"[PathManager] path escapes root: {url_path}")
            return None
        return candidate
