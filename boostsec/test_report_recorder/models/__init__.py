"""Data models for test outcomes, aggregates, configuration and builds."""

from boostsec.test_report_recorder.models.aggregate_result import AggregateResult
from boostsec.test_report_recorder.models.build_state import (
    BuildResult,
    BuildState,
    RecordOutcome,
    Verdict,
)
from boostsec.test_report_recorder.models.canonical_document import (
    CanonicalDocument,
)
from boostsec.test_report_recorder.models.recorder_config import RecorderConfig
from boostsec.test_report_recorder.models.test_outcome import TestOutcome

__all__ = [
    "AggregateResult",
    "BuildResult",
    "BuildState",
    "CanonicalDocument",
    "RecordOutcome",
    "RecorderConfig",
    "TestOutcome",
    "Verdict",
]
