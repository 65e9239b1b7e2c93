"""Aggregate canonical JUnit documents into a build's test results."""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from boostsec.test_report_recorder.conversion import (
    JUNIT_REPORTS_PATH,
    JUNIT_REPORTS_PATTERN,
)
from boostsec.test_report_recorder.errors import NoUsableDataError, SchemaError
from boostsec.test_report_recorder.locator import locate
from boostsec.test_report_recorder.models.aggregate_result import AggregateResult
from boostsec.test_report_recorder.models.canonical_document import (
    CanonicalDocument,
)
from boostsec.test_report_recorder.models.test_outcome import (
    OutcomeStatus,
    TestOutcome,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmptyAggregate:
    """No test results are attached to the build yet."""


@dataclass(frozen=True)
class ExistingAggregate:
    """Test results already attached to the build."""

    result: AggregateResult


Aggregate = EmptyAggregate | ExistingAggregate


def read_canonical_documents(
    root: Path, paths: Sequence[Path] | None = None
) -> list[CanonicalDocument]:
    """Read converted documents from the intermediate directory.

    Args:
        root: Workspace root
        paths: Converted documents in the order their reports were located.
            Every document in the intermediate directory is read when omitted.

    Returns:
        Documents in the order given, or sorted by name when reading them all

    """
    if paths is None:
        if not (root / JUNIT_REPORTS_PATH).is_dir():
            return []
        paths = locate(root, JUNIT_REPORTS_PATTERN)
    resolved = root.resolve()
    return [
        CanonicalDocument(
            source=_source_name(path, resolved), content=path.read_bytes()
        )
        for path in paths
    ]


def _source_name(path: Path, root: Path) -> str:
    try:
        return path.resolve().relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def parse_document(document: CanonicalDocument) -> list[TestOutcome]:
    """Parse the test cases of one JUnit document.

    Args:
        document: Document with a ``<testsuites>`` or ``<testsuite>`` root

    Returns:
        Test outcomes in document order

    Raises:
        SchemaError: If the document is not valid JUnit XML

    """
    try:
        root = ET.fromstring(document.content)
    except ET.ParseError as e:
        raise SchemaError(f"Invalid JUnit XML in {document.source}: {e}") from e

    if root.tag == "testsuite":
        suites = [root]
    elif root.tag == "testsuites":
        suites = list(root.iter("testsuite"))
    else:
        raise SchemaError(
            f"Unexpected root element <{root.tag}> in {document.source}"
        )

    outcomes: list[TestOutcome] = []
    for suite in suites:
        suite_name = suite.get("name", "")
        for testcase in suite.findall("testcase"):
            outcomes.append(_read_testcase(testcase, suite_name, document.source))
    return outcomes


def parse(
    documents: Sequence[CanonicalDocument], baseline_timestamp: datetime
) -> AggregateResult:
    """Build fresh test results from canonical documents.

    Raises:
        NoUsableDataError: If no document contains a test case
        SchemaError: If a document is not valid JUnit XML

    """
    outcomes = _parse_all(documents)
    aggregate = AggregateResult(baseline_timestamp=baseline_timestamp)
    for outcome in outcomes:
        aggregate.record(outcome)
    logger.info(
        f"Parsed {aggregate.total_count} tests from {len(documents)} document(s)"
    )
    return aggregate


def merge_into(
    existing: AggregateResult,
    documents: Sequence[CanonicalDocument],
    baseline_timestamp: datetime,
) -> AggregateResult:
    """Merge canonical documents into test results already attached to a build.

    Outcomes replace earlier outcomes of the same test, so merging the same
    documents twice leaves the counts unchanged. Every document is parsed
    before ``existing`` is modified.

    Raises:
        NoUsableDataError: If no document contains a test case
        SchemaError: If a document is not valid JUnit XML

    """
    outcomes = _parse_all(documents)
    if existing.baseline_timestamp != baseline_timestamp:
        logger.warning(
            f"Ignoring baseline {baseline_timestamp.isoformat()}, build results "
            f"use {existing.baseline_timestamp.isoformat()}"
        )

    before = existing.total_count
    for outcome in outcomes:
        existing.record(outcome)
    logger.info(
        f"Merged {len(outcomes)} tests into existing results "
        f"({existing.total_count - before} new, {existing.total_count} total)"
    )
    return existing


def accumulate(
    aggregate: Aggregate,
    documents: Sequence[CanonicalDocument],
    baseline_timestamp: datetime,
) -> AggregateResult:
    """Parse documents into fresh results or merge them into existing ones."""
    if isinstance(aggregate, ExistingAggregate):
        return merge_into(aggregate.result, documents, baseline_timestamp)
    return parse(documents, baseline_timestamp)


def _parse_all(documents: Sequence[CanonicalDocument]) -> list[TestOutcome]:
    if not documents:
        raise NoUsableDataError("No test report documents to parse")

    outcomes: list[TestOutcome] = []
    for document in documents:
        parsed = parse_document(document)
        logger.debug(f"{document.source}: {len(parsed)} test cases")
        outcomes.extend(parsed)

    if not outcomes:
        raise NoUsableDataError(
            f"None of the {len(documents)} test report document(s) "
            "contained a test case"
        )
    return outcomes


def _read_testcase(testcase: ET.Element, suite_name: str, source: str) -> TestOutcome:
    name = testcase.get("name")
    if name is None:
        raise SchemaError(f"Test case without a name in {source}")

    status: OutcomeStatus = "passed"
    message = None
    stack_trace = None
    for tag, tag_status in (
        ("failure", "failed"),
        ("error", "error"),
        ("skipped", "skipped"),
    ):
        detail = testcase.find(tag)
        if detail is not None:
            status = tag_status  # type: ignore[assignment]
            message = detail.get("message")
            stack_trace = detail.text.strip() if detail.text else None
            break

    try:
        duration = max(float(testcase.get("time") or 0), 0.0)
    except ValueError as e:
        raise SchemaError(
            f"Invalid time {testcase.get('time')!r} for test {name} in {source}"
        ) from e

    return TestOutcome(
        suite=testcase.get("classname") or suite_name,
        name=name,
        status=status,
        duration=duration,
        message=message,
        stack_trace=stack_trace or None,
    )
