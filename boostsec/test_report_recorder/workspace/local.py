"""Workspace on the local file system."""

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from boostsec.test_report_recorder.errors import WorkspaceIOError
from boostsec.test_report_recorder.workspace.base import Workspace

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LocalWorkspace(Workspace):
    """Workspace directory on the machine running the recorder."""

    def __init__(self, root: Path) -> None:
        """Initialize workspace rooted at the given directory."""
        self.root = root

    async def act(self, operation: Callable[[Path], T]) -> T:
        """Run the operation in a worker thread."""
        name = getattr(operation, "__name__", None) or getattr(
            getattr(operation, "func", None), "__name__", repr(operation)
        )
        logger.debug(f"Running workspace operation {name} on {self.root}")
        try:
            return await asyncio.to_thread(operation, self.root)
        except OSError as e:
            raise WorkspaceIOError(f"Workspace operation {name} failed: {e}") from e

    def __repr__(self) -> str:
        return f"LocalWorkspace({str(self.root)!r})"
