"""Tests for the local agent implementations."""

import asyncio
import os
import signal
import sys

import pytest

from npm_ops.agents import local
from npm_ops.agents.local import STREAM_LIMIT, LocalFileOperations, LocalProcessExecuter
from npm_ops.core.models import ProcessStartInfo

pytestmark = pytest.mark.skipif(os.name == "nt", reason="POSIX process semantics")


def python_start_info(tmp_path, code: str) -> ProcessStartInfo:
    return ProcessStartInfo(
        file_name=sys.executable,
        arguments=f'-c "{code}"',
        working_directory=str(tmp_path),
    )


class TestLocalFileOperations:
    """Tests for LocalFileOperations."""

    async def test_write_read_delete(self, tmp_path):
        file_ops = LocalFileOperations()
        path = file_ops.combine(str(tmp_path), "nested", "file.txt")

        await file_ops.create_directory(file_ops.combine(str(tmp_path), "nested"))
        await file_ops.write_all_text(path, "héllo\n")

        assert await file_ops.file_exists(path)
        with await file_ops.open_file(path) as f:
            assert f.read() == "héllo\n"

        await file_ops.delete_file(path)
        assert not await file_ops.file_exists(path)

    async def test_directories_are_not_files(self, tmp_path):
        assert not await LocalFileOperations().file_exists(str(tmp_path))

    async def test_create_existing_directory(self, tmp_path):
        await LocalFileOperations().create_directory(str(tmp_path))

    def test_separator(self):
        assert LocalFileOperations().directory_separator == "/"


class TestLocalProcess:
    """Tests for LocalProcess."""

    async def test_streams_lines_and_exit_code(self, tmp_path):
        code = (
            "import sys; "
            "print('first'); print('second'); "
            "sys.stderr.write('npm warn careful\\n'); "
            "sys.exit(3)"
        )
        stdout, stderr = [], []
        executer = LocalProcessExecuter()
        async with executer.create_process(python_start_info(tmp_path, code)) as process:
            process.on_output = stdout.append
            process.on_error = stderr.append
            await process.start()
            await process.wait()

        assert stdout == ["first", "second"]
        assert stderr == ["npm warn careful"]
        assert process.exit_code == 3

    async def test_runs_in_working_directory(self, tmp_path):
        lines = []
        code = "import os; print(os.getcwd())"
        async with LocalProcessExecuter().create_process(
            python_start_info(tmp_path, code)
        ) as process:
            process.on_output = lines.append
            await process.start()
            await process.wait()

        assert os.path.samefile(lines[0], tmp_path)

    async def test_cancellation_kills_process(self, tmp_path):
        code = "import time; print('ready', flush=True); time.sleep(60)"
        ready = asyncio.Event()
        process = LocalProcessExecuter().create_process(python_start_info(tmp_path, code))
        process.on_output = lambda line: ready.set()

        async def run():
            async with process:
                await process.start()
                await process.wait()

        task = asyncio.create_task(run())
        await asyncio.wait_for(ready.wait(), timeout=30)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert process.exit_code is not None
        assert process.exit_code != 0

    async def test_line_longer_than_stream_limit(self, tmp_path):
        """Test that an oversized line is delivered whole and the exit code still read."""
        size = STREAM_LIMIT * 2
        code = f"import sys; sys.stdout.write('x' * {size} + '\\n'); print('done')"
        stdout = []
        async with LocalProcessExecuter().create_process(
            python_start_info(tmp_path, code)
        ) as process:
            process.on_output = stdout.append
            await process.start()
            await process.wait()

        assert [len(line) for line in stdout] == [size, 4]
        assert stdout[1] == "done"
        assert process.exit_code == 0

    async def test_last_line_without_newline(self, tmp_path):
        code = "import sys; sys.stdout.write('no newline')"
        stdout = []
        async with LocalProcessExecuter().create_process(
            python_start_info(tmp_path, code)
        ) as process:
            process.on_output = stdout.append
            await process.start()
            await process.wait()

        assert stdout == ["no newline"]

    async def test_windows_close_kills_process_tree(self, tmp_path, monkeypatch):
        """Test that closing on Windows goes through the process-tree kill."""
        killed = []

        async def kill_tree(pid):
            killed.append(pid)
            os.kill(pid, signal.SIGKILL)

        code = "import time; time.sleep(60)"
        process = LocalProcessExecuter().create_process(python_start_info(tmp_path, code))
        await process.start()
        monkeypatch.setattr(local, "IS_WINDOWS", True)
        monkeypatch.setattr(local, "_kill_process_tree", kill_tree)
        await process.close()

        assert killed == [process._process.pid]
        assert process.exit_code == -signal.SIGKILL

    async def test_environment_variable(self, monkeypatch):
        monkeypatch.setenv("NPM_OPS_TEST_VALUE", "42")
        executer = LocalProcessExecuter()

        assert await executer.get_environment_variable("NPM_OPS_TEST_VALUE") == "42"
        assert await executer.get_environment_variable("NPM_OPS_TEST_UNSET") is None
