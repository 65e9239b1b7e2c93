"""MSTest TRX to JUnit XML converter."""

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass

from boostsec.test_report_recorder.converters.base import ReportConverter
from boostsec.test_report_recorder.errors import SchemaError

logger = logging.getLogger(__name__)

ROOT_SUITE = "(root)"

PASSED_OUTCOMES = frozenset({"Passed", "PassedButRunAborted", "Warning", "Completed"})
FAILED_OUTCOMES = frozenset({"Failed", "Timeout", "Aborted", "Disconnected"})
ERROR_OUTCOMES = frozenset({"Error"})

_DURATION = re.compile(r"^(?:(\d+)\.)?(\d+):(\d+):(\d+(?:\.\d+)?)$")


@dataclass
class _TrxCase:
    suite: str
    name: str
    outcome: str
    duration: float
    message: str | None
    stack_trace: str | None
    stdout: str | None


class TrxReportConverter(ReportConverter):
    """Convert Visual Studio test result (.trx) files to JUnit XML."""

    format_name = "trx"

    def convert(self, data: bytes) -> bytes:
        """Convert a TRX document into a ``<testsuites>`` JUnit document."""
        try:
            root = ET.fromstring(data)
        except ET.ParseError as e:
            raise SchemaError(f"Invalid TRX XML: {e}") from e

        _strip_namespaces(root)
        if root.tag != "TestRun":
            raise SchemaError(
                f"Unexpected TRX root element <{root.tag}>, expected <TestRun>"
            )

        class_names = _read_class_names(root)
        cases: list[_TrxCase] = []
        results = root.find("Results")
        if results is not None:
            for result in results:
                cases.extend(_read_results(result, class_names))

        logger.debug(f"Read {len(cases)} test results from TRX document")
        return _write_junit(cases)


def parse_duration(value: str | None) -> float:
    """Parse a TRX ``[d.]hh:mm:ss[.fffffff]`` duration into seconds.

    Raises:
        SchemaError: If the value is not a TRX duration

    """
    if not value:
        return 0.0
    match = _DURATION.match(value.strip())
    if match is None:
        raise SchemaError(f"Invalid TRX duration: {value}")
    days, hours, minutes, seconds = match.groups()
    return (
        int(days or 0) * 86400 + int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    )


def junit_status(outcome: str) -> str:
    """Map a TRX outcome to a JUnit test case status."""
    if outcome in PASSED_OUTCOMES:
        return "passed"
    if outcome in FAILED_OUTCOMES:
        return "failed"
    if outcome in ERROR_OUTCOMES:
        return "error"
    return "skipped"


def _strip_namespaces(root: ET.Element) -> None:
    # TRX files use either the 2006 or the 2010 TeamTest namespace.
    for element in root.iter():
        if isinstance(element.tag, str) and "}" in element.tag:
            element.tag = element.tag.split("}", 1)[1]


def _read_class_names(root: ET.Element) -> dict[str, str]:
    class_names: dict[str, str] = {}
    definitions = root.find("TestDefinitions")
    if definitions is None:
        return class_names

    for definition in definitions:
        test_id = definition.get("id")
        method = definition.find("TestMethod")
        if test_id is None or method is None:
            continue
        class_name = method.get("className", "").split(",")[0].strip()
        if class_name:
            class_names[test_id] = class_name
    return class_names


def _read_results(result: ET.Element, class_names: dict[str, str]) -> list[_TrxCase]:
    inner = result.find("InnerResults")
    if inner is not None and len(inner):
        # Data-driven tests: every row is reported, the parent summary is not.
        cases: list[_TrxCase] = []
        for child in inner:
            cases.extend(_read_results(child, class_names))
        return cases

    name = result.get("testName")
    if name is None:
        raise SchemaError(f"TRX result <{result.tag}> has no testName")

    error_info = result.find("Output/ErrorInfo")
    stdout = result.findtext("Output/StdOut")
    return [
        _TrxCase(
            suite=class_names.get(result.get("testId", ""), ROOT_SUITE),
            name=name,
            outcome=result.get("outcome", ""),
            duration=parse_duration(result.get("duration")),
            message=error_info.findtext("Message") if error_info is not None else None,
            stack_trace=(
                error_info.findtext("StackTrace") if error_info is not None else None
            ),
            stdout=stdout,
        )
    ]


def _write_junit(cases: list[_TrxCase]) -> bytes:
    suites: dict[str, list[_TrxCase]] = {}
    for case in cases:
        suites.setdefault(case.suite, []).append(case)

    root = ET.Element("testsuites")
    totals = {"tests": 0, "failures": 0, "errors": 0, "skipped": 0}
    total_time = 0.0

    for suite_name in sorted(suites):
        suite_cases = suites[suite_name]
        statuses = [junit_status(case.outcome) for case in suite_cases]
        counts = {
            "tests": len(suite_cases),
            "failures": statuses.count("failed"),
            "errors": statuses.count("error"),
            "skipped": statuses.count("skipped"),
        }
        suite_time = sum(case.duration for case in suite_cases)
        suite = ET.SubElement(
            root,
            "testsuite",
            {
                "name": suite_name,
                **{key: str(value) for key, value in counts.items()},
                "time": _format_time(suite_time),
            },
        )
        for case, status in zip(suite_cases, statuses):
            _write_case(suite, case, status)

        for key, value in counts.items():
            totals[key] += value
        total_time += suite_time

    for key, value in totals.items():
        root.set(key, str(value))
    root.set("time", _format_time(total_time))
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def _write_case(suite: ET.Element, case: _TrxCase, status: str) -> None:
    testcase = ET.SubElement(
        suite,
        "testcase",
        {
            "classname": case.suite,
            "name": case.name,
            "time": _format_time(case.duration),
        },
    )
    if status in {"failed", "error"}:
        tag = "failure" if status == "failed" else "error"
        detail = ET.SubElement(testcase, tag, {"type": case.outcome})
        if case.message:
            detail.set("message", case.message)
        detail.text = case.stack_trace or case.message
    elif status == "skipped":
        ET.SubElement(
            testcase,
            "skipped",
            {"message": case.message or f"Outcome: {case.outcome or 'unknown'}"},
        )
    if case.stdout:
        ET.SubElement(testcase, "system-out").text = case.stdout


def _format_time(seconds: float) -> str:
    return f"{seconds:.6f}"
