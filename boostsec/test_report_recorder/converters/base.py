"""Abstract base class for report format converters."""

from abc import ABC, abstractmethod


class ReportConverter(ABC):
    """Converts one foreign-format report into a canonical JUnit XML document."""

    format_name: str

    @abstractmethod
    def convert(self, data: bytes) -> bytes:
        """Convert one report document.

        Implementations must be pure: the same input bytes always produce the
        same output bytes.

        Args:
            data: Raw bytes of the foreign-format report

        Returns:
            JUnit XML document bytes

        Raises:
            SchemaError: If the input is not a well-formed report of this format

        """
