"""Abstract base class for the record of the build being processed."""

from abc import ABC, abstractmethod
from datetime import datetime

from boostsec.test_report_recorder.models.aggregate_result import AggregateResult
from boostsec.test_report_recorder.models.build_state import BuildResult


class BuildRecord(ABC):
    """Read and write access to the current build's state.

    Only one recording step may work on a given build at a time; the host
    running the steps is responsible for that.
    """

    @abstractmethod
    def get_result(self) -> BuildResult:
        """Return the current build result."""

    @abstractmethod
    def get_timestamp(self) -> datetime:
        """Return the build start time."""

    @abstractmethod
    def get_aggregate(self) -> AggregateResult | None:
        """Return the test results attached to the build, if any."""

    @abstractmethod
    def add_aggregate(self, aggregate: AggregateResult) -> None:
        """Attach test results to the build."""

    @abstractmethod
    def _store_result(self, result: BuildResult) -> None:
        """Persist a new build result."""

    def set_result(self, result: BuildResult) -> BuildResult:
        """Degrade the build result; a result never improves.

        Args:
            result: Requested build result

        Returns:
            The build result after the update

        """
        combined = self.get_result().combine(result)
        self._store_result(combined)
        return combined
