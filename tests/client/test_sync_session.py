# tests/client/test_sync_session.py
import threading

import pytest

from simdash.client.sync import SyncSession


def test_full_fetch_only_when_commit_changes(make_fetcher):
    fetcher, session = make_fetcher()
    sync = SyncSession(fetcher, poll_interval=30)

    installed = []
    for commit in [1, 1, 2, 2, 3]:
        session.files["commit"] = f"{commit}\n"
        installed.append(sync.poll())

    assert installed == [True, False, True, False, True]
    assert session.hits["state.json"] == 3
    assert sync.last_commit == 3


def test_first_poll_always_fetches(make_fetcher, make_snapshot_files):
    # commit 0 is a valid first value
    fetcher, session = make_fetcher(make_snapshot_files(commit=0))
    sync = SyncSession(fetcher)

    assert sync.data is None
    assert sync.poll() is True
    assert sync.data.commit == 0
    assert sync.error is None


def test_failed_refresh_keeps_previous_snapshot(make_fetcher):
    fetcher, session = make_fetcher()
    sync = SyncSession(fetcher)
    sync.poll()
    before = sync.data

    session.files["commit"] = "2\n"
    session.files["strat_two.json"] = 500

    assert sync.poll() is False
    assert sync.data is before
    assert sync.error == "Failed to fetch data"
    assert sync.stale
    # commit not remembered, so the next poll retries
    assert sync.last_commit == 1

    session.files["strat_two.json"] = "[0, 3.9, 0.2, -80.0, 3.6, 2, 39920.0, 1]"
    assert sync.poll() is True
    assert sync.error is None
    assert sync.data.commit == 2


def test_commit_failure_sets_error(make_fetcher, make_snapshot_files):
    fetcher, _ = make_fetcher(make_snapshot_files(commit="garbage"))
    sync = SyncSession(fetcher)

    assert sync.poll() is False
    assert sync.data is None
    assert sync.error == "Failed to fetch data"


def test_missing_benchmark_does_not_discard(make_fetcher, make_snapshot_files):
    fetcher, _ = make_fetcher(make_snapshot_files(**{"benchmark.json": 404}))
    sync = SyncSession(fetcher)

    assert sync.poll() is True
    assert sync.data.benchmark == ()
    assert sync.error is None


def test_listener_called_per_new_snapshot(make_fetcher):
    fetcher, session = make_fetcher()
    seen = []
    sync = SyncSession(fetcher, on_change=lambda d: seen.append(d.commit))

    sync.poll()
    sync.poll()
    session.files["commit"] = "5\n"
    sync.poll()

    assert seen == [1, 5]


def test_listener_error_does_not_break_sync(make_fetcher):
    fetcher, _ = make_fetcher()

    def bad_listener(data):
        raise RuntimeError("render failed")

    sync = SyncSession(fetcher, on_change=bad_listener)

    assert sync.poll() is True
    assert sync.data is not None


def test_background_loop_polls_immediately(make_fetcher):
    fetcher, _ = make_fetcher()
    got = threading.Event()
    sync = SyncSession(fetcher, poll_interval=60, on_change=lambda d: got.set())

    sync.start()
    try:
        assert got.wait(3)
    finally:
        sync.stop(timeout=2)


def test_rejects_bad_interval(make_fetcher):
    fetcher, _ = make_fetcher()
    with pytest.raises(ValueError):
        SyncSession(fetcher, poll_interval=0)
