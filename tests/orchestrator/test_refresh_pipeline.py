# tests/orchestrator/test_refresh_pipeline.py
from __future__ import annotations

from simdash.orchestrator.pipeline import RefreshPipeline
from simdash.orchestrator.stage import StageResult


def test_failed_stage_does_not_short_circuit(tmp_path, make_stage, recording_runner):
    runner = recording_runner({"A": 1})
    pipeline = RefreshPipeline(
        [make_stage("A"), make_stage("B"), make_stage("C")],
        cwd=tmp_path,
        runner=runner,
    )

    results = pipeline.run()

    assert runner.calls == ["A", "B", "C"]
    assert [r.ok for r in results] == [False, True, True]


def test_spawn_error_is_skipped(tmp_path, make_stage, recording_runner):
    runner = recording_runner({"B": OSError("no such file")})
    pipeline = RefreshPipeline(
        [make_stage("A"), make_stage("B"), make_stage("C")],
        cwd=tmp_path,
        runner=runner,
    )

    results = pipeline.run()

    assert runner.calls == ["A", "B", "C"]
    assert results[1].error is not None
    assert results[2].ok


def test_empty_pipeline(tmp_path, recording_runner):
    runner = recording_runner()
    assert RefreshPipeline([], cwd=tmp_path, runner=runner).run() == []
    assert runner.calls == []


def test_timeout_is_passed_to_runner(tmp_path, make_stage):
    seen = []

    def runner(stage, cwd, timeout):
        seen.append((stage.name, cwd, timeout))
        return StageResult(name=stage.name, exit_code=0)

    RefreshPipeline([make_stage("A")], cwd=tmp_path, timeout=12.0, runner=runner).run()

    assert seen == [("A", tmp_path, 12.0)]
