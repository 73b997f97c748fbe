"""Running npm on an agent and evaluating its exit code."""

import logging
from typing import Optional

from .context import ExecutionContext
from .exit_code import ExitCodeComparator
from .locator import find_npm
from .models import ExecutionOutcome, NpmOptions, ProcessStartInfo, ToolVersion
from .npmrc import NPMRC_FILE_NAME, render_npmrc, select_format
from .oplog import OperationLog
from .output import classify_stderr_line
from .package_sources import resolve_registry_source

logger = logging.getLogger(__name__)

VERBOSE_ARGUMENT = "--loglevel verbose"


class NpmRunner:
    """
    Runs one npm command for an operation.

    Locates npm, writes a .npmrc for the configured package source, starts
    npm in the source directory, logs its output and applies the success
    exit code policy.
    """

    def __init__(self, context: ExecutionContext, options: NpmOptions, log: OperationLog):
        self.context = context
        self.options = options
        self.log = log

    async def execute(self, command: str, command_args: Optional[str] = None) -> ExecutionOutcome:
        """
        Run `npm <command> <command_args>`.

        Args:
            command: npm command, e.g. "install" or "run build"
            command_args: Extra arguments appended after the command

        Returns:
            Outcome with the exit code. Not succeeded without an exit code if
            the package source could not be resolved.

        Raises:
            ExecutionFailureError: If npm cannot be found
        """
        self.log.info(f"Executing npm {command}")
        npm_path = await find_npm(self.context, self.options.npm_path, self.log)

        source_directory = self.context.resolve_path(self.options.source_directory)
        await self.context.file_ops.create_directory(source_directory)

        npmrc_argument = await self._get_npmrc_argument(npm_path, source_directory)
        if npmrc_argument is None:
            return ExecutionOutcome(succeeded=False)

        args = command_args or ""
        if self.options.verbose:
            args = _join(args, VERBOSE_ARGUMENT)
        arguments = _join(command, args, npmrc_argument)
        if self.options.verbose:
            self.log.debug(f"Executing {npm_path} {arguments}")

        exit_code = await self._run(
            ProcessStartInfo(
                file_name=npm_path,
                arguments=arguments,
                working_directory=source_directory,
            )
        )
        return ExecutionOutcome(
            succeeded=self.check_exit_code(exit_code), exit_code=exit_code
        )

    async def _run(self, start_info: ProcessStartInfo) -> Optional[int]:
        async with self.context.processes.create_process(start_info) as process:
            process.on_output = self.log.debug
            process.on_error = self._log_stderr
            await process.start()
            await process.wait()
            return process.exit_code

    def _log_stderr(self, line: str) -> None:
        level, text = classify_stderr_line(line, verbose=self.options.verbose)
        self.log.log(level, text)

    def check_exit_code(self, exit_code: Optional[int]) -> bool:
        """
        Log the exit code and apply the success exit code policy.

        Without a policy the exit code is only logged at debug level and the
        run counts as successful.
        """
        code = exit_code if exit_code is not None else 0
        comparator = ExitCodeComparator.try_parse(self.options.success_exit_code)
        if comparator is None:
            self.log.debug(f"Script exited with code: {code}")
            return True

        if comparator.evaluate(code):
            self.log.info(f"Script exited with code: {code} (success)")
            return True

        self.log.error(f"Script exited with code: {code} (failure)")
        return False

    async def get_npm_version(self, npm_path: str, working_directory: str) -> str:
        """Run `npm --version` and return its combined, trimmed output."""
        output: list[str] = []
        start_info = ProcessStartInfo(
            file_name=npm_path, arguments="--version", working_directory=working_directory
        )
        async with self.context.processes.create_process(start_info) as process:
            process.on_output = output.append
            process.on_error = output.append
            await process.start()
            await process.wait()
        return "".join(output).strip()

    async def _get_npmrc_argument(
        self, npm_path: str, source_directory: str
    ) -> Optional[str]:
        """
        Decide which user config npm should read.

        Returns:
            `--userconfig=...` for a generated or overridden .npmrc, an empty
            string to let npm use its defaults, or None if the package source
            could not be resolved
        """
        options = self.options
        if options.package_source and options.package_source.strip():
            self.log.debug("Creating .npmrc....")
            source = await resolve_registry_source(
                options.package_source, self.context.package_sources, self.log
            )
            if source is None:
                return None

            version = await self.get_npm_version(npm_path, source_directory)
            if options.verbose:
                self.log.debug(f"Using npm {version}")
            config_format = select_format(ToolVersion.parse(version))
            logger.debug(f"Writing {config_format.value} .npmrc for {source.source_id}")

            file_ops = self.context.file_ops
            npmrc_path = file_ops.combine(source_directory, NPMRC_FILE_NAME)
            if await file_ops.file_exists(npmrc_path):
                await file_ops.delete_file(npmrc_path)

            await file_ops.write_all_text(
                npmrc_path,
                render_npmrc(
                    source,
                    config_format,
                    scopes=options.scopes,
                    allow_self_signed_certificate=options.allow_self_signed_certificate,
                ),
            )
            self.log.debug("Created.")
            return f'--userconfig="{npmrc_path}"'

        if options.npmrc_path and options.npmrc_path.strip():
            return f'--userconfig="{options.npmrc_path}"'

        return ""


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)
