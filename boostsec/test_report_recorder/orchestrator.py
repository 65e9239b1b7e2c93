"""Orchestrates recording of test reports into a single build."""

import asyncio
import logging
from enum import Enum
from functools import partial

from boostsec.test_report_recorder.aggregator import (
    Aggregate,
    EmptyAggregate,
    ExistingAggregate,
    accumulate,
    read_canonical_documents,
)
from boostsec.test_report_recorder.build.base import BuildRecord
from boostsec.test_report_recorder.conversion import (
    JUNIT_REPORTS_PATH,
    convert_reports,
    locate_reports,
    remove_converted_reports,
)
from boostsec.test_report_recorder.converters.factory import create_converter
from boostsec.test_report_recorder.errors import (
    NoReportsFoundError,
    NoUsableDataError,
    OperationInterruptedError,
    RecorderError,
    ReportConversionFailedError,
    SchemaError,
    TransformUnavailableError,
    WorkspaceIOError,
)
from boostsec.test_report_recorder.models.aggregate_result import AggregateResult
from boostsec.test_report_recorder.models.build_state import (
    BuildResult,
    RecordOutcome,
    Verdict,
)
from boostsec.test_report_recorder.models.recorder_config import RecorderConfig
from boostsec.test_report_recorder.verdict import (
    EMPTY_RESULT_WARNING,
    derive_verdict,
    is_empty_result,
)
from boostsec.test_report_recorder.workspace.base import Workspace

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    """Stages of one recording run."""

    START = "start"
    LOCATED = "located"
    NO_FILES = "no_files"
    CONVERTED = "converted"
    AGGREGATED = "aggregated"
    VERDICT_COMPUTED = "verdict_computed"
    DONE = "done"
    ABORTED = "aborted"


class ReportOrchestrator:
    """Locates, converts and aggregates test reports for one build."""

    def __init__(self, config: RecorderConfig, workspace: Workspace) -> None:
        """Initialize orchestrator for a recording step and its workspace."""
        self.config = config
        self.workspace = workspace
        self.state = PipelineState.START

    async def record(self, build: BuildRecord) -> RecordOutcome:
        """Record the test reports found in the workspace into the build.

        Args:
            build: Record of the build being processed

        Returns:
            The verdict and the state of the build after recording

        Raises:
            NoReportsFoundError: If no report matched and missing files are
                not ignored
            ReportConversionFailedError: If a report could not be converted
            WorkspaceIOError: If reading or writing the workspace failed
            OperationInterruptedError: If a workspace operation was interrupted

        """
        self._enter(PipelineState.START)
        logger.info(f"Processing tests results in file(s) {self.config.report_pattern}")
        try:
            return await self._record(build)
        except (asyncio.CancelledError, OperationInterruptedError):
            self._enter(PipelineState.ABORTED)
            logger.warning("Test report recording was interrupted")
            raise
        except RecorderError as e:
            self._enter(PipelineState.ABORTED)
            logger.error(f"Test report recording aborted: {e}")
            raise

    async def _record(self, build: BuildRecord) -> RecordOutcome:
        report_files = await self.workspace.act(
            partial(locate_reports, pattern=self.config.report_pattern)
        )
        self._enter(PipelineState.LOCATED)
        logger.info(f"Found {len(report_files)} test report file(s)")

        if not report_files:
            self._enter(PipelineState.NO_FILES)
            if not self.config.ignore_if_no_file:
                raise NoReportsFoundError()
            logger.info("No test report files were found, ignoring as configured")
            return self._skipped(build, 0)

        try:
            converter = create_converter(self.config.report_format)
            converted = await self.workspace.act(
                partial(convert_reports, report_files=report_files, converter=converter)
            )
        except TransformUnavailableError as e:
            raise ReportConversionFailedError(
                f"Could not load the report converter: {e}"
            ) from e
        except SchemaError as e:
            raise ReportConversionFailedError(
                f"Could not convert test reports: {e}"
            ) from e
        self._enter(PipelineState.CONVERTED)

        documents = await self.workspace.act(
            partial(read_canonical_documents, paths=converted)
        )
        existing = build.get_aggregate()
        target: Aggregate = (
            EmptyAggregate() if existing is None else ExistingAggregate(existing)
        )
        logger.info(
            f"{'Merging' if existing is not None else 'Parsing'} "
            f"{len(documents)} converted report(s)"
        )
        parsed = True
        try:
            aggregate = accumulate(target, documents, build.get_timestamp())
        except SchemaError as e:
            raise ReportConversionFailedError(
                f"Could not read converted reports: {e}"
            ) from e
        except NoUsableDataError as e:
            if self.config.ignore_if_no_file:
                logger.info(f"{e}, ignoring as configured")
                await self._cleanup()
                return self._skipped(build, len(report_files))
            logger.warning(str(e))
            parsed = False
            aggregate = (
                existing
                if existing is not None
                else AggregateResult(baseline_timestamp=build.get_timestamp())
            )
        self._enter(PipelineState.AGGREGATED)
        await self._cleanup()

        verdict = derive_verdict(aggregate, build.get_result())
        self._enter(PipelineState.VERDICT_COMPUTED)
        warning = self._apply_verdict(build, aggregate, verdict)

        # A merge already updated the attached results in place. The empty
        # placeholder built when no report held test cases is not attached.
        if existing is None and parsed:
            build.add_aggregate(aggregate)

        self._enter(PipelineState.DONE)
        return RecordOutcome(
            verdict=verdict,
            build_result=build.get_result(),
            report_count=len(report_files),
            aggregate=build.get_aggregate(),
            warning=warning,
        )

    def _apply_verdict(
        self, build: BuildRecord, aggregate: AggregateResult, verdict: Verdict
    ) -> str | None:
        if is_empty_result(aggregate):
            if verdict == Verdict.SUCCESS:
                logger.info(
                    f"{EMPTY_RESULT_WARNING}; the build has already failed, "
                    "not reporting it again"
                )
                return None
            logger.error(EMPTY_RESULT_WARNING)
            build.set_result(BuildResult.FAILURE)
            return EMPTY_RESULT_WARNING

        logger.info(
            f"Tests: {aggregate.total_count} total, {aggregate.pass_count} passed, "
            f"{aggregate.fail_count} failed, {aggregate.skip_count} skipped"
        )
        if verdict == Verdict.UNSTABLE:
            logger.warning(
                f"{aggregate.fail_count} test(s) failed, marking build unstable"
            )
            build.set_result(BuildResult.UNSTABLE)
        return None

    def _skipped(self, build: BuildRecord, report_count: int) -> RecordOutcome:
        self._enter(PipelineState.DONE)
        return RecordOutcome(
            verdict=Verdict.SKIPPED,
            build_result=build.get_result(),
            report_count=report_count,
            aggregate=build.get_aggregate(),
        )

    async def _cleanup(self) -> None:
        try:
            await self.workspace.act(remove_converted_reports)
        except WorkspaceIOError as e:
            logger.warning(f"Could not remove {JUNIT_REPORTS_PATH}: {e}")

    def _enter(self, state: PipelineState) -> None:
        logger.debug(f"Recorder state: {self.state.value} -> {state.value}")
        self.state = state
