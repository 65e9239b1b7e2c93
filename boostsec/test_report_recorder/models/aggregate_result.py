"""Aggregate of all test outcomes recorded for one build."""

from datetime import datetime

from pydantic import BaseModel, Field, computed_field

from boostsec.test_report_recorder.models.test_outcome import TestOutcome


class AggregateResult(BaseModel):
    """Accumulated test outcomes for a build.

    Counts are computed from ``outcomes`` on every access so they can never
    drift from the outcome set.
    """

    baseline_timestamp: datetime = Field(..., description="Build start time")
    outcomes: dict[str, TestOutcome] = Field(
        default_factory=dict, description="Outcomes keyed by suite and test name"
    )

    def record(self, outcome: TestOutcome) -> None:
        """Add an outcome, superseding any previous one with the same key."""
        self.outcomes[outcome.key] = outcome

    @computed_field  # type: ignore[prop-decorator]
    @property
    def pass_count(self) -> int:
        """Number of passing tests."""
        return self._count("passed")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def fail_count(self) -> int:
        """Number of failed tests, errors included."""
        return self._count("failed", "error")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def skip_count(self) -> int:
        """Number of skipped tests."""
        return self._count("skipped")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_count(self) -> int:
        """Number of distinct tests."""
        return len(self.outcomes)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration(self) -> float:
        """Sum of all test durations in seconds."""
        return sum(outcome.duration for outcome in self.outcomes.values())

    def failures(self) -> list[TestOutcome]:
        """Failed and errored outcomes, in recording order."""
        return [
            outcome
            for outcome in self.outcomes.values()
            if outcome.status in {"failed", "error"}
        ]

    def _count(self, *statuses: str) -> int:
        return sum(1 for outcome in self.outcomes.values() if outcome.status in statuses)
