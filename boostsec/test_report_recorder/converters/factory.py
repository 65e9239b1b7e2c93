"""Lookup of report converters by format name."""

from boostsec.test_report_recorder.converters.base import ReportConverter
from boostsec.test_report_recorder.converters.junit import JUnitReportConverter
from boostsec.test_report_recorder.converters.trx import TrxReportConverter
from boostsec.test_report_recorder.errors import TransformUnavailableError

CONVERTERS: dict[str, type[ReportConverter]] = {
    "trx": TrxReportConverter,
    "mstest": TrxReportConverter,
    "junit": JUnitReportConverter,
}


def create_converter(report_format: str) -> ReportConverter:
    """Create the converter for a report format.

    Raises:
        TransformUnavailableError: If no converter exists for the format

    """
    converter_class = CONVERTERS.get(report_format.lower())
    if converter_class is None:
        raise TransformUnavailableError(
            f"No converter available for report format: {report_format}. "
            f"Must be one of: {', '.join(sorted(CONVERTERS))}"
        )
    return converter_class()
