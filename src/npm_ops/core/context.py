"""Execution context handed to every operation."""

from dataclasses import dataclass
from typing import Optional

from ..agents.abc import FileOperations, PackageSourceLookup, ProcessExecuter


@dataclass
class ExecutionContext:
    """
    The agent and services an operation runs against.

    Attributes:
        file_ops: File access on the agent
        processes: Process execution on the agent
        package_sources: Named package-source store
        working_directory: Base for relative paths, in the agent's convention
    """

    file_ops: FileOperations
    processes: ProcessExecuter
    package_sources: PackageSourceLookup
    working_directory: str

    def resolve_path(self, path: Optional[str]) -> str:
        """Resolve a path against the working directory; empty means the working directory."""
        if not path or not path.strip():
            return self.working_directory
        if self.file_ops.is_absolute(path):
            return path
        return self.file_ops.combine(self.working_directory, path)
