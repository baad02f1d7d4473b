# tests/orchestrator/test_simulation_invoker.py
from simdash.orchestrator.simulation import SimulationInvoker
from simdash.orchestrator.stage import StageResult


def test_invoker_runs_in_project_root(tmp_path, make_stage):
    seen = {}

    def runner(stage, cwd, timeout):
        seen.update(stage=stage, cwd=cwd, timeout=timeout)
        return StageResult(name=stage.name, exit_code=0, stdout="day 42 done")

    stage = make_stage("live.ua", "run", "live.ua", command="uiua")
    result = SimulationInvoker(stage, cwd=tmp_path, timeout=300, runner=runner).run()

    assert result.ok
    assert seen["cwd"] == tmp_path
    assert seen["timeout"] == 300
    assert seen["stage"].argv == ["uiua", "run", "live.ua"]


def test_invoker_reports_nonzero_exit(tmp_path, make_stage, recording_runner):
    runner = recording_runner({"live.ua": 3})
    result = SimulationInvoker(make_stage("live.ua"), cwd=tmp_path, runner=runner).run()

    assert not result.ok
    assert result.exit_code == 3
    assert result.stderr == "boom"


def test_invoker_spawn_failure_is_a_result(tmp_path, make_stage, recording_runner):
    runner = recording_runner({"live.ua": FileNotFoundError("uiua")})
    result = SimulationInvoker(make_stage("live.ua"), cwd=tmp_path, runner=runner).run()

    assert not result.ok
    assert result.exit_code is None
    assert "FileNotFoundError" in result.error
