"""Exceptions raised while recording test reports."""


class RecorderError(Exception):
    """Base class for test report recorder errors."""


class ConfigurationError(RecorderError):
    """Recorder configuration is missing or invalid."""


class NoReportsFoundError(RecorderError):
    """No report file matched the configured pattern."""

    def __init__(
        self, message: str = "No test report files were found. Configuration error?"
    ) -> None:
        """Initialize with the default user-facing message."""
        super().__init__(message)


class SchemaError(RecorderError):
    """A report document does not follow its expected schema."""


class TransformUnavailableError(RecorderError):
    """The conversion engine for a report format cannot be obtained."""


class ReportConversionFailedError(RecorderError):
    """Converting the located reports failed; nothing was recorded."""


class NoUsableDataError(RecorderError):
    """None of the canonical documents contained a test case."""


class WorkspaceIOError(RecorderError):
    """An I/O operation inside the workspace failed."""


class OperationInterruptedError(RecorderError):
    """A workspace operation was interrupted before completing."""
