"""Build record persisted as a JSON file."""

import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from boostsec.test_report_recorder.build.base import BuildRecord
from boostsec.test_report_recorder.errors import ConfigurationError
from boostsec.test_report_recorder.models.aggregate_result import AggregateResult
from boostsec.test_report_recorder.models.build_state import BuildResult, BuildState

logger = logging.getLogger(__name__)


class FileBuildRecord(BuildRecord):
    """Build record kept in memory and saved to a JSON file."""

    def __init__(self, path: Path, state: BuildState) -> None:
        """Initialize record backed by path with the given state."""
        self.path = path
        self.state = state

    @classmethod
    def load(cls, path: Path, timestamp: datetime | None = None) -> "FileBuildRecord":
        """Load the record at path, or start a new build if it does not exist.

        Args:
            path: JSON file holding the build state
            timestamp: Start time for a new build (default: now)

        Returns:
            The build record

        Raises:
            ConfigurationError: If the file exists but is not a valid build state

        """
        if path.exists():
            try:
                state = BuildState.model_validate_json(path.read_bytes())
            except ValidationError as e:
                raise ConfigurationError(f"Invalid build record {path}: {e}") from e
            logger.info(f"Loaded build record {path} (result: {state.result.value})")
            return cls(path, state)

        if timestamp is None:
            timestamp = datetime.now(UTC)
        elif timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=UTC)
        logger.info(f"Starting new build record {path}")
        return cls(path, BuildState(timestamp=timestamp))

    def save(self) -> None:
        """Write the build state to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.state.model_dump_json(indent=2))
        logger.info(f"Saved build record {self.path}")

    def get_result(self) -> BuildResult:
        """Return the current build result."""
        return self.state.result

    def get_timestamp(self) -> datetime:
        """Return the build start time."""
        return self.state.timestamp

    def get_aggregate(self) -> AggregateResult | None:
        """Return the attached test results."""
        return self.state.aggregate

    def add_aggregate(self, aggregate: AggregateResult) -> None:
        """Attach test results to the build."""
        self.state.aggregate = aggregate

    def _store_result(self, result: BuildResult) -> None:
        self.state.result = result
