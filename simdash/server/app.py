# simdash/server/app.py
from __future__ import annotations

from pathlib import Path

from flask import Flask, jsonify, redirect, send_file

from simdash.utils.logger import logs
from simdash.utils.path import PathManager
from simdash.config.server_config import ServerConfig
from simdash.orchestrator.scheduler import Orchestrator
from simdash.server.decorators import cycle_lookup


def cache_control(url_path: str, cfg: ServerConfig) -> str:
    """
    Live snapshot files must always be revalidated; assets can be cached.
    """
    if url_path.startswith(cfg.live_prefix):
        return "no-cache"
    return f"max-age={cfg.max_age}"


def create_app(
    cfg: ServerConfig | None = None,
    orchestrator: Orchestrator | None = None,
    root: Path | str | None = None,
) -> Flask:
    """
    Static/telemetry server.

    - "/"              -> 302 to the dashboard entry point
    - "/.../"          -> ".../index.html"
    - live_prefix/*    -> no-cache
    - /health, /cycles -> read-only status (no endpoint triggers a cycle)
    """
    cfg = cfg if cfg is not None else ServerConfig()
    static_root = Path(root).resolve() if root is not None else PathManager.root()

    app = Flask(__name__)

    @app.get("/")
    def index():
        return redirect(cfg.entry_point, code=302)

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    @app.get("/cycles")
    def list_cycles():
        if orchestrator is None:
            return jsonify({"running": False, "cycles": []})
        return jsonify({
            "running": orchestrator.running,
            "executions": orchestrator.executions,
            "cycles": [c.to_dict() for c in orchestrator.registry.list()],
        })

    @app.get("/cycles/<int:cycle_id>")
    @cycle_lookup
    def get_cycle(cycle_id: int):
        if orchestrator is None:
            raise KeyError(cycle_id)
        return jsonify(orchestrator.registry.get(cycle_id).to_dict())

    @app.get("/<path:subpath>")
    def static_file(subpath: str):
        url_path = "/" + subpath
        if url_path.endswith("/"):
            url_path += "index.html"

        file_path = PathManager.resolve_static(url_path, root=static_root)
        if file_path is None or not file_path.is_file():
            return "Not Found", 404

        resp = send_file(file_path, conditional=True)
        resp.headers["Cache-Control"] = cache_control(url_path, cfg)
        return resp

    logs.info(f"[Server] serving {static_root} (live prefix {cfg.live_prefix})")
    return app
