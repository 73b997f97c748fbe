"""Agent implementations for the machine npm-ops runs on."""

import asyncio
import logging
import os
import shlex
from pathlib import Path
from typing import IO, Optional

from ..core.config import load_package_sources
from ..core.models import PackageSource, PackageSourceReference, ProcessStartInfo
from .abc import (
    FileOperations,
    LineHandler,
    PackageSourceLookup,
    ProcessExecuter,
    RemoteProcess,
)

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"

# Read buffer size; longer lines are still delivered whole
STREAM_LIMIT = 1024 * 1024


async def _kill_process_tree(pid: int) -> None:
    """Kill a Windows process and all of its descendants."""
    killer = await asyncio.create_subprocess_exec(
        "taskkill",
        "/T",
        "/F",
        "/PID",
        str(pid),
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.DEVNULL,
    )
    await killer.wait()


class LocalFileOperations(FileOperations):
    """File operations on the local filesystem."""

    @property
    def directory_separator(self) -> str:
        return os.sep

    async def create_directory(self, path: str) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    async def file_exists(self, path: str) -> bool:
        return Path(path).is_file()

    async def delete_file(self, path: str) -> None:
        Path(path).unlink(missing_ok=True)

    async def write_all_text(self, path: str, text: str) -> None:
        Path(path).write_text(text, encoding="utf-8")

    async def open_file(self, path: str) -> IO[str]:
        return open(path, encoding="utf-8-sig")


class LocalProcess(RemoteProcess):
    """Subprocess started with asyncio, output pumped line by line."""

    def __init__(self, start_info: ProcessStartInfo):
        super().__init__(start_info)
        self._process: Optional[asyncio.subprocess.Process] = None
        self._readers: list[asyncio.Task] = []

    async def start(self) -> None:
        start_info = self.start_info
        logger.debug(
            f"Starting {start_info.file_name} {start_info.arguments} "
            f"in {start_info.working_directory}"
        )
        stdio = dict(
            cwd=start_info.working_directory,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=STREAM_LIMIT,
        )
        if IS_WINDOWS:
            # npm.cmd is a batch file, and cmd.exe understands the quoting as written
            command_line = f'"{start_info.file_name}" {start_info.arguments}'
            self._process = await asyncio.create_subprocess_shell(command_line, **stdio)
        else:
            argv = [start_info.file_name, *shlex.split(start_info.arguments)]
            self._process = await asyncio.create_subprocess_exec(*argv, **stdio)

        self._readers = [
            asyncio.create_task(self._pump(self._process.stdout, self.on_output)),
            asyncio.create_task(self._pump(self._process.stderr, self.on_error)),
        ]

    @staticmethod
    async def _pump(
        stream: Optional[asyncio.StreamReader], handler: Optional[LineHandler]
    ) -> None:
        if stream is None:
            return
        pending = b""
        at_eof = False
        while not at_eof:
            try:
                raw = pending + await stream.readuntil(b"\n")
            except asyncio.LimitOverrunError as e:
                # Line longer than the stream limit: collect it piecewise
                pending += await stream.readexactly(e.consumed)
                continue
            except asyncio.IncompleteReadError as e:
                raw = pending + e.partial
                at_eof = True
                if not raw:
                    break
            pending = b""
            if handler is not None:
                handler(raw.decode("utf-8", errors="replace").rstrip("\r\n"))

    async def wait(self) -> None:
        if self._process is None:
            raise RuntimeError("Process has not been started")
        try:
            # Drain both pipes before reaping so no output is lost
            await asyncio.gather(*self._readers)
            await self._process.wait()
        except asyncio.CancelledError:
            await self.close()
            raise

    @property
    def exit_code(self) -> Optional[int]:
        if self._process is None:
            return None
        return self._process.returncode

    async def close(self) -> None:
        process = self._process
        if process is not None and process.returncode is None:
            logger.debug(f"Killing process {process.pid}")
            if IS_WINDOWS:
                # kill() would only reach cmd.exe, not the node process behind npm.cmd
                await _kill_process_tree(process.pid)
            else:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass
            await process.wait()

        for reader in self._readers:
            reader.cancel()
        if self._readers:
            await asyncio.gather(*self._readers, return_exceptions=True)
        self._readers = []


class LocalProcessExecuter(ProcessExecuter):
    """Runs processes on the local machine."""

    def create_process(self, start_info: ProcessStartInfo) -> RemoteProcess:
        return LocalProcess(start_info)

    async def get_environment_variable(self, name: str) -> Optional[str]:
        return os.environ.get(name)


class YamlPackageSourceStore(PackageSourceLookup):
    """
    Package sources read from a YAML file.

    The file is loaded once, on construction. See `load_package_sources`
    for the format.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path
        self.sources = load_package_sources(path) if path else []

    async def get_package_source(
        self, reference: PackageSourceReference
    ) -> Optional[PackageSource]:
        for source in self.sources:
            if source.name == reference.value:
                return source
        return None

    def list_package_sources(self) -> list[PackageSource]:
        return list(self.sources)
