"""Shared fixtures for test report recorder tests."""

import uuid
from collections.abc import Callable, Sequence
from xml.sax.saxutils import quoteattr

import pytest

TRX_NAMESPACE = "http://microsoft.com/schemas/VisualStudio/TeamTest/2010"

TrxCase = tuple[str, str, str]
TrxFactory = Callable[..., str]


def make_trx(
    cases: Sequence[TrxCase], namespace: str | None = TRX_NAMESPACE
) -> str:
    """Build a TRX document from (class name, test name, outcome) tuples."""
    definitions = []
    results = []
    for class_name, test_name, outcome in cases:
        test_id = str(uuid.uuid5(uuid.NAMESPACE_URL, f"{class_name}.{test_name}"))
        definitions.append(
            f"<UnitTest name={quoteattr(test_name)} id={quoteattr(test_id)}>"
            f"<TestMethod codeBase=\"Tests.dll\" "
            f"className={quoteattr(class_name + ', Tests, Version=1.0.0.0')} "
            f"name={quoteattr(test_name)} />"
            "</UnitTest>"
        )
        output = ""
        if outcome != "Passed":
            output = (
                "<Output><ErrorInfo>"
                f"<Message>{test_name} did not pass</Message>"
                f"<StackTrace>at {class_name}.{test_name}()</StackTrace>"
                "</ErrorInfo></Output>"
            )
        results.append(
            f"<UnitTestResult testId={quoteattr(test_id)} "
            f"testName={quoteattr(test_name)} duration=\"00:00:00.2500000\" "
            f"outcome={quoteattr(outcome)}>{output}</UnitTestResult>"
        )

    xmlns = f' xmlns="{namespace}"' if namespace else ""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<TestRun id="run" name="run"{xmlns}>'
        f"<Results>{''.join(results)}</Results>"
        f"<TestDefinitions>{''.join(definitions)}</TestDefinitions>"
        "</TestRun>"
    )


@pytest.fixture
def trx_factory() -> TrxFactory:
    """Return a factory building TRX documents."""
    return make_trx
