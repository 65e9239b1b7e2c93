"""Pass-through converter for reports already in JUnit XML format."""

import xml.etree.ElementTree as ET

from boostsec.test_report_recorder.converters.base import ReportConverter
from boostsec.test_report_recorder.errors import SchemaError

JUNIT_ROOT_TAGS = frozenset({"testsuite", "testsuites"})


class JUnitReportConverter(ReportConverter):
    """Validate JUnit XML reports and hand them on unchanged."""

    format_name = "junit"

    def convert(self, data: bytes) -> bytes:
        """Return data unchanged once it is known to be a JUnit document."""
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise SchemaError(f"Invalid JUnit XML: {e}") from e

        if root.tag not in JUNIT_ROOT_TAGS:
            raise SchemaError(
                f"Unexpected JUnit root element <{root.tag}>, "
                "expected <testsuites> or <testsuite>"
            )
        return data
