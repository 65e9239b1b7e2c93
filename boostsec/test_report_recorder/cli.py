"""CLI entry point for the test report recorder."""

import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

import typer

from boostsec.test_report_recorder.build.file import FileBuildRecord
from boostsec.test_report_recorder.config_loader import build_recorder_config
from boostsec.test_report_recorder.errors import (
    ConfigurationError,
    OperationInterruptedError,
    RecorderError,
)
from boostsec.test_report_recorder.models.build_state import (
    BuildResult,
    RecordOutcome,
)
from boostsec.test_report_recorder.orchestrator import ReportOrchestrator
from boostsec.test_report_recorder.workspace.local import LocalWorkspace

# Configure logging - force reconfiguration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
    force=True,  # Force reconfiguration even if already set up
)
logger = logging.getLogger(__name__)

app = typer.Typer()

EXIT_INTERRUPTED = 130


def parse_build_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 build start time.

    Raises:
        ConfigurationError: If the value is not an ISO 8601 timestamp

    """
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ConfigurationError(f"Invalid build timestamp: {value}") from e


@app.command()
def main(  # noqa: C901
    workspace: Path = typer.Option(..., help="Workspace directory holding the reports"),  # noqa: B008
    build_record: Path = typer.Option(..., help="JSON file recording the build state"),  # noqa: B008
    report_pattern: str | None = typer.Option(
        None, help="Ant-style pattern of report files (e.g., '**/*.trx')"
    ),
    ignore_if_no_file: bool | None = typer.Option(
        None,
        "--ignore-if-no-file/--fail-if-no-file",
        help="Succeed silently when no report file or no test is found",
    ),
    report_format: str | None = typer.Option(
        None, help="Format of the report files (trx, junit)"
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None, help="YAML file with recorder options"
    ),
    build_timestamp: str | None = typer.Option(
        None, help="Start time of a new build (ISO 8601, default: now)"
    ),
    fail_on_unstable: bool = typer.Option(
        False, help="Exit with an error when tests failed"
    ),
    verbose: bool = typer.Option(False, help="Enable debug logging"),
) -> None:
    """Record test reports from a workspace into a build."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    logger.info("=" * 80)
    logger.info("Test Report Recorder - Starting")
    logger.info("=" * 80)
    logger.info(f"Workspace: {workspace}")
    logger.info(f"Build record: {build_record}")

    try:
        recorder_config = build_recorder_config(
            config,
            {
                "report_pattern": report_pattern,
                "ignore_if_no_file": ignore_if_no_file,
                "report_format": report_format,
            },
        )
        build = FileBuildRecord.load(
            build_record, parse_build_timestamp(build_timestamp)
        )
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    orchestrator = ReportOrchestrator(recorder_config, LocalWorkspace(workspace))

    try:
        outcome = asyncio.run(orchestrator.record(build))
    except (KeyboardInterrupt, asyncio.CancelledError, OperationInterruptedError):
        typer.echo("Interrupted", err=True)
        raise typer.Exit(code=EXIT_INTERRUPTED)
    except RecorderError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except Exception as e:
        logger.exception("Test report recording failed")
        typer.echo(f"Error recording test reports: {e}", err=True)
        raise typer.Exit(code=1)

    build.save()
    typer.echo(json.dumps(_summarize(outcome), indent=2))

    if outcome.build_result == BuildResult.FAILURE:
        logger.error("Build result: failure")
        raise typer.Exit(code=1)
    if outcome.build_result == BuildResult.UNSTABLE and fail_on_unstable:
        logger.error("Build result: unstable")
        raise typer.Exit(code=1)
    logger.info(f"Build result: {outcome.build_result.value}")


def _summarize(outcome: RecordOutcome) -> dict[str, object]:
    """Build the JSON summary printed on stdout."""
    aggregate = outcome.aggregate
    summary: dict[str, object] = {
        "verdict": outcome.verdict.value,
        "build_result": outcome.build_result.value,
        "report_files": outcome.report_count,
        "total": aggregate.total_count if aggregate else 0,
        "passed": aggregate.pass_count if aggregate else 0,
        "failed": aggregate.fail_count if aggregate else 0,
        "skipped": aggregate.skip_count if aggregate else 0,
        "warning": outcome.warning,
        "failures": [
            {
                "suite": failure.suite,
                "name": failure.name,
                "status": failure.status,
                "message": failure.message,
            }
            for failure in (aggregate.failures() if aggregate else [])
        ],
    }
    return summary


if __name__ == "__main__":  # pragma: no cover
    app()
