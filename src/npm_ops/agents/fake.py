"""In-memory fake agent implementations for testing."""

import asyncio
import io
from dataclasses import dataclass, field
from typing import IO, Optional

from ..core.models import PackageSource, PackageSourceReference, ProcessStartInfo
from .abc import FileOperations, PackageSourceLookup, ProcessExecuter, RemoteProcess


class FakeFileOperations(FileOperations):
    """
    In-memory file system.

    All state is provided via constructor using keyword arguments. Writes
    and deletes are recorded for assertions.
    """

    def __init__(
        self,
        *,
        files: Optional[dict[str, str]] = None,
        directory_separator: str = "/",
    ) -> None:
        self._files = dict(files or {})
        self._separator = directory_separator
        self._created_directories: list[str] = []
        self._deleted_files: list[str] = []

    @property
    def directory_separator(self) -> str:
        return self._separator

    @property
    def files(self) -> dict[str, str]:
        """Read-only copy of file contents by path."""
        return dict(self._files)

    @property
    def created_directories(self) -> list[str]:
        return list(self._created_directories)

    @property
    def deleted_files(self) -> list[str]:
        return list(self._deleted_files)

    async def create_directory(self, path: str) -> None:
        self._created_directories.append(path)

    async def file_exists(self, path: str) -> bool:
        return path in self._files

    async def delete_file(self, path: str) -> None:
        self._deleted_files.append(path)
        self._files.pop(path, None)

    async def write_all_text(self, path: str, text: str) -> None:
        self._files[path] = text

    async def open_file(self, path: str) -> IO[str]:
        if path not in self._files:
            raise FileNotFoundError(path)
        return io.StringIO(self._files[path])


@dataclass(frozen=True)
class FakeProcessResult:
    """Scripted behaviour of one fake process."""

    stdout: list[str] = field(default_factory=list)
    stderr: list[str] = field(default_factory=list)
    exit_code: Optional[int] = 0
    hang: bool = False


class FakeProcess(RemoteProcess):
    """Replays a FakeProcessResult through the line handlers."""

    def __init__(self, start_info: ProcessStartInfo, result: FakeProcessResult):
        super().__init__(start_info)
        self._result = result
        self._started = False
        self._finished = False
        self.closed = False
        self.killed = False

    async def start(self) -> None:
        self._started = True

    async def wait(self) -> None:
        if not self._started:
            raise RuntimeError("Process has not been started")
        for line in self._result.stdout:
            if self.on_output is not None:
                self.on_output(line)
        for line in self._result.stderr:
            if self.on_error is not None:
                self.on_error(line)
        if self._result.hang:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                await self.close()
                raise
        self._finished = True

    @property
    def exit_code(self) -> Optional[int]:
        return self._result.exit_code if self._finished else None

    async def close(self) -> None:
        if self._started and not self._finished:
            self.killed = True
        self.closed = True


class FakeProcessExecuter(ProcessExecuter):
    """
    Process executer that returns scripted results.

    `npm --version` invocations answer with `version`; every other process
    replays `result`. Created processes are kept for assertions.
    """

    def __init__(
        self,
        *,
        version: str = "10.2.4",
        result: Optional[FakeProcessResult] = None,
        environment: Optional[dict[str, str]] = None,
    ) -> None:
        self._version = version
        self._result = result or FakeProcessResult()
        self._environment = dict(environment or {})
        self._processes: list[FakeProcess] = []

    @property
    def processes(self) -> list[FakeProcess]:
        return list(self._processes)

    @property
    def started(self) -> list[ProcessStartInfo]:
        """Start infos of every process that was created, in order."""
        return [process.start_info for process in self._processes]

    def create_process(self, start_info: ProcessStartInfo) -> RemoteProcess:
        if start_info.arguments == "--version":
            result = FakeProcessResult(stdout=[self._version])
        else:
            result = self._result
        process = FakeProcess(start_info, result)
        self._processes.append(process)
        return process

    async def get_environment_variable(self, name: str) -> Optional[str]:
        return self._environment.get(name)


class FakePackageSourceLookup(PackageSourceLookup):
    """Package-source store backed by a list."""

    def __init__(self, *, sources: Optional[list[PackageSource]] = None) -> None:
        self._sources = list(sources or [])
        self._lookups: list[str] = []

    @property
    def lookups(self) -> list[str]:
        """Names that were looked up, in order."""
        return list(self._lookups)

    async def get_package_source(
        self, reference: PackageSourceReference
    ) -> Optional[PackageSource]:
        self._lookups.append(reference.value)
        for source in self._sources:
            if source.name == reference.value:
                return source
        return None

    def list_package_sources(self) -> list[PackageSource]:
        return list(self._sources)
