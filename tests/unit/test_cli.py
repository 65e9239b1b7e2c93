"""Tests for CLI entry point."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from boostsec.test_report_recorder.cli import app, parse_build_timestamp
from boostsec.test_report_recorder.errors import (
    ConfigurationError,
    NoReportsFoundError,
    OperationInterruptedError,
)
from boostsec.test_report_recorder.models.aggregate_result import AggregateResult
from boostsec.test_report_recorder.models.build_state import (
    BuildResult,
    RecordOutcome,
    Verdict,
)
from boostsec.test_report_recorder.models.test_outcome import TestOutcome

runner = CliRunner()

STARTED = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def _outcome(verdict: Verdict, build_result: BuildResult) -> RecordOutcome:
    aggregate = AggregateResult(baseline_timestamp=STARTED)
    aggregate.record(TestOutcome(suite="Ns.A", name="passes", status="passed"))
    if verdict == Verdict.UNSTABLE:
        aggregate.record(
            TestOutcome(suite="Ns.A", name="breaks", status="failed", message="boom")
        )
    return RecordOutcome(
        verdict=verdict, build_result=build_result, report_count=1, aggregate=aggregate
    )


def _invoke(tmp_path: Path, *extra: str, outcome: object = None) -> Any:
    mock_orchestrator = AsyncMock()
    if isinstance(outcome, BaseException):
        mock_orchestrator.record = AsyncMock(side_effect=outcome)
    else:
        mock_orchestrator.record = AsyncMock(return_value=outcome)

    with patch(
        "boostsec.test_report_recorder.cli.ReportOrchestrator",
        return_value=mock_orchestrator,
    ):
        return runner.invoke(
            app,
            [
                "--workspace",
                str(tmp_path),
                "--build-record",
                str(tmp_path / "build.json"),
                "--report-pattern",
                "**/*.trx",
                *extra,
            ],
        )


def test_main_success(tmp_path: Path) -> None:
    """Main prints the summary and saves the build record."""
    result = _invoke(
        tmp_path, outcome=_outcome(Verdict.SUCCESS, BuildResult.SUCCESS)
    )

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["verdict"] == "success"
    assert output["build_result"] == "success"
    assert output["total"] == 1
    assert output["passed"] == 1
    assert output["failures"] == []
    assert (tmp_path / "build.json").exists()


def test_main_unstable_exits_zero(tmp_path: Path) -> None:
    """Main succeeds for unstable builds and lists the failures."""
    result = _invoke(
        tmp_path, outcome=_outcome(Verdict.UNSTABLE, BuildResult.UNSTABLE)
    )

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["failed"] == 1
    assert output["failures"] == [
        {"suite": "Ns.A", "name": "breaks", "status": "failed", "message": "boom"}
    ]


def test_main_unstable_fails_when_requested(tmp_path: Path) -> None:
    """Main exits with an error for unstable builds with --fail-on-unstable."""
    result = _invoke(
        tmp_path,
        "--fail-on-unstable",
        outcome=_outcome(Verdict.UNSTABLE, BuildResult.UNSTABLE),
    )
    assert result.exit_code == 1


def test_main_failure_exits_with_error(tmp_path: Path) -> None:
    """Main exits with an error when the build failed."""
    result = _invoke(
        tmp_path, outcome=_outcome(Verdict.FAILURE, BuildResult.FAILURE)
    )

    assert result.exit_code == 1
    assert (tmp_path / "build.json").exists()


def test_main_aborted(tmp_path: Path) -> None:
    """Main reports aborted runs and leaves the build record alone."""
    result = _invoke(tmp_path, outcome=NoReportsFoundError())

    assert result.exit_code == 1
    assert "No test report files were found" in result.output
    assert not (tmp_path / "build.json").exists()


def test_main_interrupted(tmp_path: Path) -> None:
    """Main exits with 130 when interrupted."""
    result = _invoke(tmp_path, outcome=OperationInterruptedError("stopped"))
    assert result.exit_code == 130


def test_main_unexpected_error(tmp_path: Path) -> None:
    """Main reports unexpected errors."""
    result = _invoke(tmp_path, outcome=RuntimeError("kaboom"))

    assert result.exit_code == 1
    assert "kaboom" in result.output


def test_main_requires_pattern(tmp_path: Path) -> None:
    """Main rejects runs without a report pattern."""
    result = runner.invoke(
        app,
        ["--workspace", str(tmp_path), "--build-record", str(tmp_path / "b.json")],
    )

    assert result.exit_code == 1
    assert "report_pattern" in result.output


def test_main_reads_config_file(tmp_path: Path) -> None:
    """Main reads options from the configuration file."""
    config_file = tmp_path / "recorder.yaml"
    config_file.write_text('report_pattern: "out/*.trx"\nignore_if_no_file: true\n')
    mock_orchestrator = AsyncMock()
    mock_orchestrator.record = AsyncMock(
        return_value=_outcome(Verdict.SUCCESS, BuildResult.SUCCESS)
    )

    with patch(
        "boostsec.test_report_recorder.cli.ReportOrchestrator",
        return_value=mock_orchestrator,
    ) as mock_class:
        result = runner.invoke(
            app,
            [
                "--workspace",
                str(tmp_path),
                "--build-record",
                str(tmp_path / "build.json"),
                "--config",
                str(config_file),
            ],
        )

    assert result.exit_code == 0
    config = mock_class.call_args.args[0]
    assert config.report_pattern == "out/*.trx"
    assert config.ignore_if_no_file is True


def test_main_invalid_build_timestamp(tmp_path: Path) -> None:
    """Main rejects invalid build timestamps."""
    result = _invoke(tmp_path, "--build-timestamp", "yesterday")

    assert result.exit_code == 1
    assert "Invalid build timestamp" in result.output


def test_parse_build_timestamp() -> None:
    """parse_build_timestamp reads ISO 8601 values."""
    assert parse_build_timestamp("2024-05-01T12:00:00+00:00") == STARTED
    assert parse_build_timestamp(None) is None


def test_parse_build_timestamp_invalid() -> None:
    """parse_build_timestamp raises ConfigurationError for invalid values."""
    with pytest.raises(ConfigurationError):
        parse_build_timestamp("soon")
