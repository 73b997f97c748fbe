"""Setting the version in package.json."""

import json
from typing import Optional

from ..core.context import ExecutionContext
from ..core.models import ExecutionOutcome
from ..core.oplog import OperationLog
from .base import Operation

PACKAGE_MANIFEST = "package.json"


class NpmSetProjectVersionOperation(Operation):
    """Writes a version into package.json without running npm."""

    name = "set-version"
    description = "Sets the version in an npm package.json."

    def __init__(self, version: Optional[str] = None, source_directory: Optional[str] = None):
        self.version = version
        self.source_directory = source_directory

    async def execute_async(
        self, context: ExecutionContext, log: OperationLog
    ) -> ExecutionOutcome:
        if not self.version:
            log.error("Version is required.")
            return ExecutionOutcome(succeeded=False)

        file_ops = context.file_ops
        source_directory = context.resolve_path(self.source_directory)
        package_json_path = file_ops.combine(source_directory, PACKAGE_MANIFEST)
        if not await file_ops.file_exists(package_json_path):
            log.error(f"{PACKAGE_MANIFEST} not found")
            return ExecutionOutcome(succeeded=False)

        log.debug(f"Found {PACKAGE_MANIFEST} at {package_json_path}")
        try:
            with await file_ops.open_file(package_json_path) as f:
                project = json.load(f)
        except ValueError as e:  # JSONDecodeError or UnicodeDecodeError
            log.error(f"{PACKAGE_MANIFEST} could not be deserialized: {e}")
            return ExecutionOutcome(succeeded=False)

        if not isinstance(project, dict):
            log.error(f"{PACKAGE_MANIFEST} could not be deserialized.")
            return ExecutionOutcome(succeeded=False)

        log.info(f"Setting package version to {self.version}")
        project["version"] = self.version

        await file_ops.write_all_text(
            package_json_path, json.dumps(project, indent=2, ensure_ascii=False) + "\n"
        )
        log.debug("Updated package version")
        return ExecutionOutcome(succeeded=True)
