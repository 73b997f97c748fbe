"""Locating the npm executable on an agent."""

from typing import Optional

from .context import ExecutionContext
from .errors import ExecutionFailureError
from .oplog import OperationLog

POSIX_NPM_PATHS = ("/usr/lib/npm", "/usr/lib/node_modules/npm")

WINDOWS_NPM_FILE_NAME = "npm.cmd"

# (environment variable, directory below it), probed in order
WINDOWS_SEARCH_DIRECTORIES = (
    ("AppData", "npm"),
    ("AppData", "npm\\node_modules"),
    ("AppData", "npm\\node_modules\\npm\\bin"),
    ("ProgramFiles", "nodejs"),
    ("ProgramFiles", "nodejs\\node_modules"),
    ("ProgramFiles", "nodejs\\node_modules\\npm\\bin"),
)


async def candidate_paths(context: ExecutionContext) -> list[str]:
    """Well-known npm locations for the agent's platform, most preferred first."""
    file_ops = context.file_ops
    if file_ops.directory_separator == "/":
        return list(POSIX_NPM_PATHS)

    roots = {}
    for variable in ("AppData", "ProgramFiles"):
        roots[variable] = await context.processes.get_environment_variable(variable) or ""

    return [
        file_ops.combine(roots[variable], directory, WINDOWS_NPM_FILE_NAME)
        for variable, directory in WINDOWS_SEARCH_DIRECTORIES
    ]


async def find_npm(
    context: ExecutionContext, npm_path: Optional[str], log: OperationLog
) -> str:
    """
    Find the npm executable.

    An explicit path is resolved against the working directory and used
    without checking that it exists. Otherwise the well-known locations are
    probed and the first existing one wins.

    Raises:
        ExecutionFailureError: If no path is configured and npm is not in
            any well-known location
    """
    found_path = None
    if npm_path and npm_path.strip():
        found_path = context.resolve_path(npm_path.strip())
    else:
        log.debug("NpmPath is not defined; searching for npm...")
        for candidate in await candidate_paths(context):
            if await context.file_ops.file_exists(candidate):
                found_path = candidate
                break

    if found_path is None:
        raise ExecutionFailureError(
            "Could not find npm and $NpmPath configuration variable is not set."
        )

    log.debug(f"Using npm at: {found_path}")
    return found_path
