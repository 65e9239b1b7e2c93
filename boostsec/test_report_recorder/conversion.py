"""Workspace operations converting located reports to JUnit XML."""

import hashlib
import logging
import re
import shutil
from collections.abc import Sequence
from pathlib import Path

from boostsec.test_report_recorder.converters.base import ReportConverter
from boostsec.test_report_recorder.locator import locate

logger = logging.getLogger(__name__)

JUNIT_REPORTS_PATH = "temporary-junit-reports"
JUNIT_REPORTS_PATTERN = f"{JUNIT_REPORTS_PATH}/*.xml"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def locate_reports(root: Path, pattern: str) -> list[Path]:
    """Locate reports, leaving out previously converted documents."""
    output_dir = (root / JUNIT_REPORTS_PATH).resolve()
    return [path for path in locate(root, pattern) if output_dir not in path.parents]


def output_name(root: Path, report_file: Path) -> str:
    """Name of the converted document for a report file.

    The name is derived from the report's path relative to the workspace, so
    two reports never share an output file and repeated runs reuse the same
    name.
    """
    try:
        relative = report_file.relative_to(root.resolve()).as_posix()
    except ValueError:
        relative = report_file.as_posix()
    digest = hashlib.sha1(relative.encode("utf-8")).hexdigest()[:10]  # noqa: S324
    stem = _UNSAFE_CHARS.sub("_", report_file.stem) or "report"
    return f"TEST-{stem}-{digest}.xml"


def convert_reports(
    root: Path, report_files: Sequence[Path], converter: ReportConverter
) -> list[Path]:
    """Convert report files into the intermediate JUnit directory.

    The intermediate directory is emptied first so output left behind by an
    interrupted run is never read back as part of this one.

    Args:
        root: Workspace root
        report_files: Located foreign-format reports
        converter: Converter for the report format

    Returns:
        Paths of the written JUnit documents, in report order

    Raises:
        SchemaError: If a report is malformed

    """
    output_dir = root / JUNIT_REPORTS_PATH
    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True)

    written: list[Path] = []
    for report_file in report_files:
        target = output_dir / output_name(root, report_file)
        logger.debug(f"Converting {report_file} to {target}")
        target.write_bytes(converter.convert(report_file.read_bytes()))
        written.append(target)

    logger.info(f"Converted {len(written)} report file(s) to JUnit XML")
    return written


def remove_converted_reports(root: Path) -> bool:
    """Delete the intermediate JUnit directory.

    Returns:
        True if a directory was removed

    """
    output_dir = root / JUNIT_REPORTS_PATH
    if not output_dir.exists():
        return False
    shutil.rmtree(output_dir)
    return True
