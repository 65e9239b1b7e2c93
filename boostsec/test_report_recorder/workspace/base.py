"""Abstract base class for workspaces holding build output."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

T = TypeVar("T")


class Workspace(ABC):
    """A build workspace, possibly living on a remote agent.

    File operations are shipped to wherever the workspace lives with
    ``act``; each call is a single blocking step from the caller's point of
    view.
    """

    @abstractmethod
    async def act(self, operation: Callable[[Path], T]) -> T:
        """Run a file operation against the workspace root.

        Args:
            operation: Callable receiving the workspace root directory

        Returns:
            The operation's return value

        Raises:
            WorkspaceIOError: If the operation fails with an I/O error
            OperationInterruptedError: If the operation was interrupted

        """
