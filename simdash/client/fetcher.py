# simdash/client/fetcher.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

import requests

from simdash.utils.errors import SnapshotFetchError
from simdash.utils.logger import logs
from simdash.client import parser
from simdash.client.types import STRATEGIES, STRATEGY_IDS, AppData

NO_CACHE = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class SnapshotFetcher:
    """
    Reads the live snapshot store over HTTP.

    Every request bypasses caches. Parts are independent read-only files,
    so the full batch is fetched in parallel.

    Error policy:
      - any required part fails (HTTP / network / decode) -> SnapshotFetchError
      - benchmark fails for any reason                    -> empty series
    """

    def __init__(
        self,
        live_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
        max_workers: int = 12,
    ):
        self.live_url = live_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.max_workers = max_workers

    # --------------------------------------------------
    # transport
    # --------------------------------------------------
    def _get(self, name: str) -> requests.Response:
        resp = self.session.get(f"{self.live_url}/{name}", headers=NO_CACHE, timeout=self.timeout)
        resp.raise_for_status()
        return resp

    def _get_json(self, name: str) -> Any:
        return self._get(name).json()

    def _get_text(self, name: str) -> str:
        resp = self._get(name)
        resp.encoding = "utf-8"
        return resp.text

    def _required(self, part: str, load: Callable[[], Any]) -> Any:
        try:
            return load()
        except SnapshotFetchError:
            raise
        except Exception as e:
            raise SnapshotFetchError(part, repr(e)) from e

    # --------------------------------------------------
    # parts
    # --------------------------------------------------
    def fetch_commit(self) -> int:
        def load() -> int:
            text = self._get_text("commit").strip()
            return int(text)

        return self._required("commit", load)

    def fetch_benchmark(self) -> tuple[float, ...]:
        """
        Best-effort: missing and malformed are both treated as absent.
        """
        try:
            return parser.parse_series(self._get_json("benchmark.json"), "benchmark")
        except Exception as e:
            logs.debug(f"[Fetcher] benchmark unavailable: {e!r}")
            return ()

    def fetch_app_data(self) -> AppData:
        jobs: dict[str, Callable[[], Any]] = {
            "state": lambda: parser.parse_state(self._get_json("state.json")),
            "equity": lambda: parser.parse_series(self._get_json("equity.json"), "equity"),
            "equity_strats": lambda: parser.parse_strategy_equities(self._get_json("equity_strats.json")),
            "events": lambda: parser.parse_events(self._get_text("events.log")),
            "commit": self.fetch_commit,
        }
        for sid in STRATEGY_IDS:
            spec = STRATEGIES[sid]
            jobs[sid] = (lambda s=sid, f=spec.filename: parser.parse_strategy(s, self._get_json(f)))

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {
                part: pool.submit(self._required, part, load)
                for part, load in jobs.items()
            }
            benchmark_future = pool.submit(self.fetch_benchmark)

            # wait for every part before deciding; first failure wins
            results: dict[str, Any] = {}
            failure: SnapshotFetchError | None = None
            for part, fut in futures.items():
                try:
                    results[part] = fut.result()
                except SnapshotFetchError as e:
                    if failure is None:
                        failure = e
            benchmark = benchmark_future.result()

        if failure is not None:
            raise failure

        return AppData(
            state=results["state"],
            strategies={sid: results[sid] for sid in STRATEGY_IDS},
            equity=results["equity"],
            strategy_equities=results["equity_strats"],
            events=results["events"],
            benchmark=benchmark,
            commit=results["commit"],
        )
