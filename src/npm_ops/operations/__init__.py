"""npm operations."""

from .base import NpmOperation, Operation
from .commands import (
    NpmBuildOperation,
    NpmExecuteOperation,
    NpmInstallOperation,
    NpmPublishOperation,
    NpmRunOperation,
)
from .set_version import NpmSetProjectVersionOperation

# Operation classes by name, used for listing and by the CLI
OPERATION_REGISTRY: dict[str, type[Operation]] = {
    NpmInstallOperation.name: NpmInstallOperation,
    NpmBuildOperation.name: NpmBuildOperation,
    NpmRunOperation.name: NpmRunOperation,
    NpmExecuteOperation.name: NpmExecuteOperation,
    NpmPublishOperation.name: NpmPublishOperation,
    NpmSetProjectVersionOperation.name: NpmSetProjectVersionOperation,
}

__all__ = [
    "OPERATION_REGISTRY",
    "NpmBuildOperation",
    "NpmExecuteOperation",
    "NpmInstallOperation",
    "NpmOperation",
    "NpmPublishOperation",
    "NpmRunOperation",
    "NpmSetProjectVersionOperation",
    "Operation",
]
