"""Agent and package-source interfaces with local and fake implementations."""

from .abc import FileOperations, PackageSourceLookup, ProcessExecuter, RemoteProcess
from .local import (
    LocalFileOperations,
    LocalProcessExecuter,
    YamlPackageSourceStore,
)

__all__ = [
    "FileOperations",
    "LocalFileOperations",
    "LocalProcessExecuter",
    "PackageSourceLookup",
    "ProcessExecuter",
    "RemoteProcess",
    "YamlPackageSourceStore",
]
