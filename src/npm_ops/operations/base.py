"""Base operation interface."""

import time
from abc import ABC, abstractmethod
from typing import Optional

from ..core.context import ExecutionContext
from ..core.models import ExecutionOutcome, NpmOptions, OperationResult
from ..core.oplog import OperationLog
from ..core.runner import NpmRunner


class Operation(ABC):
    """
    Abstract base class for all operations.

    Subclasses implement `execute_async` with the operation's own logic.
    `execute` wraps it with timing and turns the outcome and log into an
    OperationResult.
    """

    name: str = ""
    description: str = ""

    @abstractmethod
    async def execute_async(
        self, context: ExecutionContext, log: OperationLog
    ) -> ExecutionOutcome:
        """
        Run the operation.

        Recoverable problems (missing required values, unresolvable package
        sources, failing exit codes) must be written to `log` as errors and
        reported through an unsuccessful outcome, not raised.

        Args:
            context: Agent and services to run against
            log: Log that receives the operation's messages

        Returns:
            Whether the operation succeeded, plus npm's exit code if it ran

        Raises:
            ExecutionFailureError: If the operation cannot run at all
        """
        ...

    async def execute(self, context: ExecutionContext) -> OperationResult:
        """Run the operation and collect its result."""
        start_time = time.time()
        log = OperationLog(self.name)

        outcome = await self.execute_async(context, log)

        result = OperationResult(
            operation=self.name,
            success=outcome.succeeded,
            exit_code=outcome.exit_code,
            duration_seconds=round(time.time() - start_time, 2),
            log=log.entries,
        )
        result.summary = result.calculate_summary()
        return result

    def get_metadata(self) -> dict:
        """Return operation metadata."""
        return {"name": self.name, "description": self.description}


class NpmOperation(Operation):
    """Base for operations that run an npm command."""

    def __init__(self, options: Optional[NpmOptions] = None):
        self.options = options or NpmOptions()

    async def execute_npm(
        self,
        context: ExecutionContext,
        log: OperationLog,
        command: str,
        command_args: Optional[str] = None,
    ) -> ExecutionOutcome:
        runner = NpmRunner(context, self.options, log)
        return await runner.execute(command, command_args)
