# tests/test_cli.py
import pytest
from typer.testing import CliRunner

from simdash import cli, logs
from simdash.orchestrator import Orchestrator, RefreshPipeline, SimulationInvoker

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_config(monkeypatch):
    # keep the CLI from re-adding file/console sinks
    monkeypatch.setattr(logs, "configure", lambda cfg: logs)
    monkeypatch.delenv("SIMDASH_SIMULATION_BIN", raising=False)


@pytest.fixture
def fake_fetcher(monkeypatch, make_fetcher):
    def _install(files=None):
        fetcher, session = make_fetcher(files)
        monkeypatch.setattr("simdash.client.SnapshotFetcher", lambda *a, **k: fetcher)
        return session

    return _install


def test_version():
    result = runner.invoke(cli.app, ["version"])

    assert result.exit_code == 0
    assert cli.__version__ in result.output


def test_chart_writes_svg(tmp_path, fake_fetcher):
    fake_fetcher()
    out = tmp_path / "eq.svg"

    result = runner.invoke(cli.app, ["chart", "--out", str(out), "--strategies", "s1,s4"])

    assert result.exit_code == 0, result.output
    svg = out.read_text(encoding="utf-8")
    assert svg.startswith("<svg")
    assert svg.count("<polyline") == 4  # benchmark + 2 overlays + portfolio
    assert "#ef4444" in svg and "#a855f7" in svg


def test_chart_rejects_unknown_strategy(tmp_path, fake_fetcher):
    fake_fetcher()

    result = runner.invoke(cli.app, ["chart", "--out", str(tmp_path / "x.svg"), "--strategies", "s9"])

    assert result.exit_code == 2


def test_chart_fetch_failure(tmp_path, fake_fetcher, make_snapshot_files):
    fake_fetcher(make_snapshot_files(**{"state.json": 503}))

    result = runner.invoke(cli.app, ["chart", "--out", str(tmp_path / "x.svg")])

    assert result.exit_code == 1


def test_watch_once_prints_summary(fake_fetcher):
    fake_fetcher()

    result = runner.invoke(cli.app, ["watch", "--once", "--events", "3"])

    assert result.exit_code == 0, result.output
    assert "2024-03-01" in result.output
    assert "Pelosi entered long @ 38.50" in result.output


def test_watch_once_reports_failure(fake_fetcher, make_snapshot_files):
    fake_fetcher(make_snapshot_files(commit="x"))

    result = runner.invoke(cli.app, ["watch", "--once"])

    assert result.exit_code == 1
    assert "Failed to fetch data" in result.output


@pytest.mark.parametrize("sim_exit, code", [(0, 0), (1, 1)])
def test_cycle_exit_code(monkeypatch, tmp_path, make_stage, recording_runner, sim_exit, code):
    rr = recording_runner({"live.ua": sim_exit})
    orch = Orchestrator(
        RefreshPipeline([make_stage("A")], cwd=tmp_path, runner=rr),
        SimulationInvoker(make_stage("live.ua"), cwd=tmp_path, runner=rr),
    )
    monkeypatch.setattr(Orchestrator, "from_config", classmethod(lambda cls, cfg, root=None: orch))

    result = runner.invoke(cli.app, ["cycle"])

    assert result.exit_code == code
    assert rr.calls == ["A", "live.ua"]


def test_bad_config_exits_2(tmp_path):
    f = tmp_path / "bad.yml"
    f.write_text("scheduler:\n  interval_minutes: -5\n", encoding="utf-8")

    result = runner.invoke(cli.app, ["cycle", "--config", str(f)])

    assert result.exit_code == 2


def test_chart_svg_waits_for_data():
    svg = cli.render_chart_svg([100.0], [], [])

    assert "Waiting for data..." in svg
    assert "<polyline" not in svg


def test_watch_zero_events_hides_log(fake_fetcher):
    fake_fetcher()

    result = runner.invoke(cli.app, ["watch", "--once", "--events", "0"])

    assert result.exit_code == 0, result.output
    assert "NQ=18000" not in result.output
    assert "EQUITY " not in result.output
    # trade ticker is independent of the event log length
    assert "Recent trades: Pelosi entered long @ 38.50" in result.output
