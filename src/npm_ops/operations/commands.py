"""Operations that run npm commands."""

from typing import Optional

from ..core.context import ExecutionContext
from ..core.models import ExecutionOutcome, NpmOptions
from ..core.oplog import OperationLog
from .base import NpmOperation


class NpmInstallOperation(NpmOperation):
    """npm install"""

    name = "install"
    description = "Runs the npm install command."

    def __init__(
        self, options: Optional[NpmOptions] = None, additional_arguments: Optional[str] = None
    ):
        super().__init__(options)
        self.additional_arguments = additional_arguments

    async def execute_async(
        self, context: ExecutionContext, log: OperationLog
    ) -> ExecutionOutcome:
        return await self.execute_npm(context, log, "install", self.additional_arguments)


class NpmBuildOperation(NpmOperation):
    """npm run build"""

    name = "build"
    description = "Runs the `npm run build` command."

    def __init__(
        self, options: Optional[NpmOptions] = None, additional_arguments: Optional[str] = None
    ):
        super().__init__(options)
        self.additional_arguments = additional_arguments

    async def execute_async(
        self, context: ExecutionContext, log: OperationLog
    ) -> ExecutionOutcome:
        return await self.execute_npm(context, log, "run build", self.additional_arguments)


class NpmPublishOperation(NpmOperation):
    """npm publish"""

    name = "publish"
    description = "Runs the npm publish command."

    def __init__(
        self, options: Optional[NpmOptions] = None, additional_arguments: Optional[str] = None
    ):
        super().__init__(options)
        self.additional_arguments = additional_arguments

    async def execute_async(
        self, context: ExecutionContext, log: OperationLog
    ) -> ExecutionOutcome:
        return await self.execute_npm(context, log, "publish", self.additional_arguments)


class NpmRunOperation(NpmOperation):
    """
    npm run <command>

    Runs a script from package.json, e.g. `npm run lessc`.
    """

    name = "run"
    description = "Runs the specified npm run command (ex: `npm run lessc`)."

    def __init__(
        self,
        options: Optional[NpmOptions] = None,
        command: Optional[str] = None,
        additional_arguments: Optional[str] = None,
    ):
        super().__init__(options)
        self.command = command
        self.additional_arguments = additional_arguments

    async def execute_async(
        self, context: ExecutionContext, log: OperationLog
    ) -> ExecutionOutcome:
        if not self.command:
            log.error("Command is required.")
            return ExecutionOutcome(succeeded=False)

        args = f"{self.command} {self.additional_arguments or ''}".strip()
        return await self.execute_npm(context, log, "run", args)


class NpmExecuteOperation(NpmOperation):
    """
    npm <command> <arguments>

    Runs any npm command, e.g. `npm audit fix`.
    """

    name = "execute-command"
    description = "Runs the specified npm command (ex: `npm rebuild`)."

    def __init__(
        self,
        options: Optional[NpmOptions] = None,
        command: Optional[str] = None,
        arguments: Optional[str] = None,
    ):
        super().__init__(options)
        self.command = command
        self.arguments = arguments

    async def execute_async(
        self, context: ExecutionContext, log: OperationLog
    ) -> ExecutionOutcome:
        if not self.command:
            log.error("Command is required.")
            return ExecutionOutcome(succeeded=False)

        return await self.execute_npm(context, log, self.command, self.arguments)
