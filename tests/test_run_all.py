"""命令行入口测试：裁决、退出码与报告输出"""

import json

import pytest

import run_all
from runall import RunOrchestrator

from conftest import FakeUI, SessionLostUI


@pytest.mark.asyncio
async def test_execute_passed(fast_config):
    report, error = await run_all.execute(RunOrchestrator(FakeUI(["✔", "3", "⛔", "0"]), fast_config))

    assert error is None
    assert report.passed
    assert run_all.exit_code_for(report, error) == run_all.EXIT_PASSED


@pytest.mark.asyncio
async def test_execute_test_failures_are_not_errors(fast_config):
    report, error = await run_all.execute(RunOrchestrator(FakeUI(["✔", "3", "⛔", "2"]), fast_config))

    assert error is None
    assert not report.passed
    assert run_all.exit_code_for(report, error) == run_all.EXIT_TEST_FAILURES


@pytest.mark.asyncio
@pytest.mark.parametrize("ui_kwargs, summary, kind, code", [
    ({"run_label": None}, ["✔", "1", "⛔", "0"], "ControlNotFound", 2),
    ({"busy_polls": None}, ["✔", "1", "⛔", "0"], "RunTimedOut", 3),
    ({}, ["✔", "x", "⛔", "0"], "OutcomeParseError", 4),
    ({"options": ["All"]}, ["✔", "1", "⛔", "1"], "OptionNotFound", 5),
])
async def test_execute_orchestration_errors(fast_config, ui_kwargs, summary, kind, code):
    report, error = await run_all.execute(RunOrchestrator(FakeUI(summary, **ui_kwargs), fast_config))

    assert error is not None
    assert report.error == kind
    assert run_all.exit_code_for(report, error) == code


@pytest.mark.asyncio
async def test_write_report(fast_config, tmp_path):
    report, _ = await run_all.execute(
        RunOrchestrator(FakeUI(["⛔", "1", "✔", "4"], failure_texts=["TestX failed"]), fast_config)
    )
    path = tmp_path / "report.json"

    run_all.write_report(report, path)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["passed"] is False
    assert data["failedCount"] == 1
    assert data["diagnostics"] == ["TestX failed"]


def test_print_verdict_distinguishes_outcomes(capsys):
    from runall import ControlNotFound, VerdictReport

    run_all.print_verdict(VerdictReport(passed=False, passed_count=4, failed_count=1, diagnostics=["boom"]), None)
    failures = capsys.readouterr().out
    assert "失败 1" in failures
    assert "boom" in failures

    run_all.print_verdict(
        VerdictReport(passed=False, passed_count=-1, failed_count=-1, error="ControlNotFound"),
        ControlNotFound("//Button", "Run All", "trigger"),
    )
    error = capsys.readouterr().out
    assert "ControlNotFound" in error
    assert "无法判定" in error


@pytest.mark.parametrize("argv", [
    ["--backend", "playwright"],
    ["--backend", "appium"],
])
def test_main_requires_target(argv):
    assert run_all.main(argv) == run_all.EXIT_CONFIG_ERROR


def test_main_rejects_bad_timeout(clean_env):
    assert run_all.main(["--url", "http://localhost", "--timeout", "0"]) == run_all.EXIT_CONFIG_ERROR


@pytest.mark.asyncio
async def test_execute_driver_error_is_not_test_failure(fast_config):
    report, error = await run_all.execute(RunOrchestrator(SessionLostUI(["✔", "1", "⛔", "0"]), fast_config))

    assert error is not None
    assert report.error == "OrchestrationError"
    assert run_all.exit_code_for(report, error) == 7
    assert run_all.exit_code_for(report, error) != run_all.EXIT_TEST_FAILURES


def test_main_session_error_exit_code(clean_env, monkeypatch, tmp_path):
    async def broken(*args, **kwargs):
        raise RuntimeError("session lost")

    monkeypatch.setattr(run_all, "run_with_playwright", broken)
    path = tmp_path / "report.json"

    code = run_all.main(["--url", "http://localhost", "--report", str(path)])

    assert code == 7
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["error"] == "OrchestrationError"
    assert data["state"] == "failed"
