"""Interfaces to the agent npm runs on and to the package-source store."""

import ntpath
import posixpath
from abc import ABC, abstractmethod
from typing import IO, Callable, Optional

from ..core.models import PackageSource, PackageSourceReference, ProcessStartInfo

LineHandler = Callable[[str], None]


class FileOperations(ABC):
    """
    File access on the agent.

    Paths are plain strings in the agent's own convention, which may differ
    from the machine npm-ops runs on.
    """

    @property
    @abstractmethod
    def directory_separator(self) -> str:
        """Either "/" (POSIX agents) or "\\" (Windows agents)."""
        ...

    def combine(self, *parts: str) -> str:
        """Join path parts using the agent's path convention."""
        if self.directory_separator == "/":
            return posixpath.join(*parts)
        return ntpath.join(*parts)

    def is_absolute(self, path: str) -> bool:
        if self.directory_separator == "/":
            return posixpath.isabs(path)
        return ntpath.isabs(path)

    @abstractmethod
    async def create_directory(self, path: str) -> None:
        """Create a directory and its parents; existing directories are fine."""
        ...

    @abstractmethod
    async def file_exists(self, path: str) -> bool:
        ...

    @abstractmethod
    async def delete_file(self, path: str) -> None:
        ...

    @abstractmethod
    async def write_all_text(self, path: str, text: str) -> None:
        """Write text as UTF-8, replacing any existing file."""
        ...

    @abstractmethod
    async def open_file(self, path: str) -> IO[str]:
        """
        Open a UTF-8 text file for reading.

        The returned object is a context manager; callers are expected to
        close it:

            with await file_ops.open_file(path) as f:
                data = json.load(f)
        """
        ...


class RemoteProcess(ABC):
    """
    A process created on the agent.

    Line handlers must be assigned before `start()`. Each receives one line
    of output without its line terminator. Use as an async context manager
    so the process is never left running:

        async with processes.create_process(start_info) as process:
            process.on_output = handle_stdout
            await process.start()
            await process.wait()
            code = process.exit_code
    """

    def __init__(self, start_info: ProcessStartInfo):
        self.start_info = start_info
        self.on_output: Optional[LineHandler] = None
        self.on_error: Optional[LineHandler] = None

    @abstractmethod
    async def start(self) -> None:
        ...

    @abstractmethod
    async def wait(self) -> None:
        """
        Wait for the process to exit.

        Returns only after every line of output has been delivered to the
        handlers. If the waiting task is cancelled the process is killed and
        `asyncio.CancelledError` propagates.
        """
        ...

    @property
    @abstractmethod
    def exit_code(self) -> Optional[int]:
        """Exit code, or None if the process has not reported one."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Kill the process if it is still running and release its resources."""
        ...

    async def __aenter__(self) -> "RemoteProcess":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


class ProcessExecuter(ABC):
    """Process execution on the agent."""

    @abstractmethod
    def create_process(self, start_info: ProcessStartInfo) -> RemoteProcess:
        """Create (but do not start) a process."""
        ...

    @abstractmethod
    async def get_environment_variable(self, name: str) -> Optional[str]:
        """Value of an environment variable on the agent, or None."""
        ...


class PackageSourceLookup(ABC):
    """Store of named package sources."""

    @abstractmethod
    async def get_package_source(
        self, reference: PackageSourceReference
    ) -> Optional[PackageSource]:
        """
        Look up a package source by name.

        Args:
            reference: Symbolic source name

        Returns:
            The source regardless of its type, or None if there is no source
            with that name
        """
        ...

    @abstractmethod
    def list_package_sources(self) -> list[PackageSource]:
        """Return every known package source."""
        ...
