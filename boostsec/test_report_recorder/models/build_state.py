"""Models describing the state of a build and the outcome of a recording."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from boostsec.test_report_recorder.models.aggregate_result import AggregateResult


class BuildResult(str, Enum):
    """Result of a build, ordered from best to worst."""

    SUCCESS = "success"
    UNSTABLE = "unstable"
    FAILURE = "failure"

    @property
    def severity(self) -> int:
        """Rank of the result; higher is worse."""
        return _SEVERITY[self]

    def combine(self, other: "BuildResult") -> "BuildResult":
        """Return the worse of the two results."""
        return other if other.severity > self.severity else self


_SEVERITY = {
    BuildResult.SUCCESS: 0,
    BuildResult.UNSTABLE: 1,
    BuildResult.FAILURE: 2,
}


class Verdict(str, Enum):
    """Decision taken by a recording step."""

    SUCCESS = "success"
    UNSTABLE = "unstable"
    FAILURE = "failure"
    SKIPPED = "skipped"


class BuildState(BaseModel):
    """Serialized form of a build record."""

    result: BuildResult = Field(
        default=BuildResult.SUCCESS, description="Current build result"
    )
    timestamp: datetime = Field(..., description="Build start time")
    aggregate: AggregateResult | None = Field(
        default=None, description="Test results attached to the build"
    )


class RecordOutcome(BaseModel):
    """Outcome of one run of the recording pipeline."""

    verdict: Verdict = Field(..., description="Decision taken for the step")
    build_result: BuildResult = Field(..., description="Build result after the step")
    report_count: int = Field(default=0, description="Number of located report files")
    aggregate: AggregateResult | None = Field(
        default=None, description="Aggregate attached to the build, if any"
    )
    warning: str | None = Field(default=None, description="Non-fatal condition")
