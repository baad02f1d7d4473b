# tests/conftest.py
from __future__ import annotations

import json
import threading
from collections import Counter
from pathlib import Path
from typing import Any, Callable

import pytest
import requests
from loguru import logger

from simdash.client.fetcher import SnapshotFetcher
from simdash.orchestrator.stage import PipelineStage, StageResult

LIVE_URL = "http://testserver/data/live"


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)  # or sys.stderr
    yield


# =============================================================================
# Orchestrator helpers
# =============================================================================

@pytest.fixture
def make_stage() -> Callable[..., PipelineStage]:
    def _make(name: str, *args: str, command: str = "bun") -> PipelineStage:
        return PipelineStage(name=name, command=command, args=tuple(args) or ("run", name))

    return _make


class RecordingRunner:
    """
    Stand-in for run_stage: no processes, records call order.

    outcomes: stage name -> exit code | Exception (spawn failure)
    """

    def __init__(self, outcomes: dict[str, Any] | None = None, delay: threading.Event | None = None):
        self.outcomes = outcomes or {}
        self.calls: list[str] = []
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self, stage: PipelineStage, cwd: Path, timeout: float | None) -> StageResult:
        with self._lock:
            self.calls.append(stage.name)

        if self.delay is not None:
            self.delay.wait(5)

        outcome = self.outcomes.get(stage.name, 0)
        if isinstance(outcome, Exception):
            return StageResult(name=stage.name, error=repr(outcome), cmd=stage.argv)
        return StageResult(
            name=stage.name,
            exit_code=outcome,
            stdout=f"{stage.name} done",
            stderr="" if outcome == 0 else "boom",
            cmd=stage.argv,
        )


@pytest.fixture
def recording_runner() -> Callable[..., RecordingRunner]:
    return RecordingRunner


# =============================================================================
# Fake HTTP transport (no real server)
# =============================================================================

class FakeResponse:
    def __init__(self, status: int, body: str):
        self.status_code = status
        self._body = body
        self.encoding = None

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        return json.loads(self._body)

    @property
    def text(self) -> str:
        return self._body


class FakeSession:
    """
    requests.Session stand-in serving an in-memory live dir.

    files: name -> body (str) | int (HTTP status) | Exception (raised)
    """

    def __init__(self, files: dict[str, Any]):
        self.files = dict(files)
        self.hits: Counter[str] = Counter()
        self.headers_seen: list[dict] = []
        self._lock = threading.Lock()

    def get(self, url: str, headers: dict | None = None, timeout: float | None = None) -> FakeResponse:
        name = url.rsplit("/", 1)[-1]
        with self._lock:
            self.hits[name] += 1
            self.headers_seen.append(dict(headers or {}))

        body = self.files.get(name, 404)
        if isinstance(body, Exception):
            raise body
        if isinstance(body, int):
            return FakeResponse(body, "Not Found")
        return FakeResponse(200, body)


def snapshot_files(commit: int = 1, **overrides: Any) -> dict[str, Any]:
    files: dict[str, Any] = {
        "commit": f"{commit}\n",
        "state.json": json.dumps([201500.5, 42, 2024, 3, 1]),
        "strat_one.json": json.dumps([1, 0.2, 120.0, 38.5, 4, 40120.0]),
        "strat_two.json": json.dumps([0, 3.9, 0.2, -80.0, 3.6, 2, 39920.0, 1]),
        "strat_three.json": json.dumps([1, 0.2, 300.0, 18000.0, 6, 40300.0]),
        "strat_four.json": json.dumps([-1, 0.15, 50.0, 45.2, 3, 30050.0]),
        "strat_five.json": json.dumps([0, 0.15, 0.0, 18010.0, 0, 30000.0]),
        "strat_six.json": json.dumps([1, 0.1, 10.5, 190.2, 1, 20010.5]),
        "equity.json": json.dumps([200000.0, 200400.0, 201500.5]),
        "equity_strats.json": json.dumps({
            "s1": [40000.0, 40050.0, 40120.0],
            "s2": [40000.0, 39950.0, 39920.0],
            "s3": [40000.0, 40200.0, 40300.0],
            "s4": [30000.0, 30010.0, 30050.0],
            "s5": [30000.0, 30000.0, 30000.0],
            "s6": [20000.0, 20005.0, 20010.5],
        }),
        "events.log": (
            "41|2024-02-29|PRICE|NQ=18000|GLD=190.2\n"
            "42|2024-03-01|TRADE|1|ENTRY|38.50\n"
            "42|2024-03-01|STRAT|1|pos=1|eq=40120.00\n"
            "42|2024-03-01|EQUITY|201500.50\n"
        ),
        "benchmark.json": json.dumps([200000.0, 200100.0, 200900.0]),
    }
    files.update(overrides)
    return files


@pytest.fixture
def make_snapshot_files() -> Callable[..., dict[str, Any]]:
    return snapshot_files


@pytest.fixture
def make_fetcher() -> Callable[..., tuple[SnapshotFetcher, FakeSession]]:
    def _make(files: dict[str, Any] | None = None) -> tuple[SnapshotFetcher, FakeSession]:
        session = FakeSession(files if files is not None else snapshot_files())
        return SnapshotFetcher(LIVE_URL, timeout=1.0, session=session), session

    return _make


@pytest.fixture
def live_root(tmp_path: Path) -> Path:
    """
    <root>/data/live/*  +  <root>/web/out/index.html
    """
    live = tmp_path / "data" / "live"
    live.mkdir(parents=True)
    for name, body in snapshot_files().items():
        (live / name).write_text(body, encoding="utf-8")

    web = tmp_path / "web" / "out"
    web.mkdir(parents=True)
    (web / "index.html").write_text("<html>dashboard</html>", encoding="utf-8")
    (web / "app.js").write_text("console.log(1)", encoding="utf-8")
    return tmp_path
