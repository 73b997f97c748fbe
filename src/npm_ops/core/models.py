"""Core data models for npm-ops."""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageLevel(str, Enum):
    """Severity levels for operation log messages."""

    DEBUG = "debug"
    INFORMATION = "information"
    WARNING = "warning"
    ERROR = "error"

    @property
    def logging_level(self) -> int:
        """Equivalent stdlib logging level."""
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    MessageLevel.DEBUG: logging.DEBUG,
    MessageLevel.INFORMATION: logging.INFO,
    MessageLevel.WARNING: logging.WARNING,
    MessageLevel.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class PackageSourceReference:
    """
    Identifier of a package source.

    Either a symbolic name that the package-source lookup resolves, or a
    literal registry URL that is used as-is.
    """

    value: str

    @property
    def is_url(self) -> bool:
        parsed = urlparse(self.value.strip())
        return parsed.scheme in ("http", "https") and bool(parsed.netloc)

    def __str__(self) -> str:
        return self.value


_VERSION_PATTERN = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?")


@dataclass(frozen=True)
class ToolVersion:
    """Semantic version of the installed npm."""

    major: int
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> Optional["ToolVersion"]:
        """Parse `npm --version` output, returning None if it is not a version."""
        match = _VERSION_PATTERN.match(text.strip())
        if not match:
            return None
        return cls(
            major=int(match.group(1)),
            minor=int(match.group(2) or 0),
            patch=int(match.group(3) or 0),
        )

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class ProcessStartInfo:
    """
    Everything needed to launch one process on an agent.

    Attributes:
        file_name: Executable path on the agent
        arguments: Argument string, split by the agent using shell rules
        working_directory: Directory the process starts in
    """

    file_name: str
    arguments: str
    working_directory: str


@dataclass(frozen=True)
class ExecutionOutcome:
    """What an operation body reports back to the operation wrapper."""

    succeeded: bool
    exit_code: Optional[int] = None


class PackageSource(BaseModel):
    """
    Package source as returned by the package-source lookup.

    Sources of every type live in the same store; only `npm` sources can be
    used by npm operations.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(..., description="Symbolic name of the source")
    source_type: str = Field(
        "npm", alias="type", description="Feed type (npm, nuget, pypi, ...)"
    )
    url: str = Field(..., description="Registry endpoint")
    user_name: Optional[str] = Field(None, alias="username")
    password: Optional[str] = Field(None)
    api_key: Optional[str] = Field(None)

    @field_validator("source_type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        """Source types compare case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class RegistrySource(BaseModel):
    """An npm registry endpoint with optional credentials."""

    model_config = ConfigDict(frozen=True)

    registry_url: str = Field(..., description="Registry URL written to .npmrc")
    user_name: Optional[str] = Field(None)
    password: Optional[str] = Field(None)
    api_key: Optional[str] = Field(None)
    source_id: str = Field(..., description="Identifier this source was resolved from")

    @property
    def has_credentials(self) -> bool:
        return any(
            value and value.strip()
            for value in (self.user_name, self.password, self.api_key)
        )


class NpmOptions(BaseModel):
    """
    Settings shared by every npm operation.

    Mirrors the inputs a pipeline passes to an npm step. All fields are
    optional; an empty NpmOptions runs npm in the working directory with
    its own defaults.
    """

    model_config = ConfigDict(extra="forbid")

    source_directory: Optional[str] = Field(
        None, description="Directory npm runs in (default: working directory)"
    )
    package_source: Optional[str] = Field(
        None, description="Package source name or registry URL used to generate .npmrc"
    )
    scopes: list[str] = Field(
        default_factory=list, description="Scopes routed to the package source"
    )
    verbose: bool = Field(False, description="Run npm with --loglevel verbose")
    success_exit_code: Optional[str] = Field(
        None, description="Exit code policy, e.g. '0' or '>= 0' (default: ignored)"
    )
    npm_path: Optional[str] = Field(None, description="Full path to npm/npm.cmd")
    npmrc_path: Optional[str] = Field(
        None, description=".npmrc override, ignored when package_source is set"
    )
    allow_self_signed_certificate: bool = Field(
        False, description="Write strict-ssl=false to the generated .npmrc"
    )

    @field_validator("scopes", mode="before")
    @classmethod
    def split_scopes(cls, v):
        """Accept a multi-line string (one scope per line) as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.splitlines()
        return [scope.strip() for scope in v if scope and scope.strip()]


class LogEntry(BaseModel):
    """A single message logged by an operation."""

    level: MessageLevel
    message: str


class OperationResult(BaseModel):
    """
    Result of one operation run.

    Contains the verdict, npm's exit code (when npm ran), the operation's
    log and a per-level count of its entries.
    """

    operation: str = Field(..., description="Operation name, e.g. 'install'")
    success: bool = Field(..., description="Verdict after exit code evaluation")
    exit_code: Optional[int] = Field(None, description="npm exit code, if npm ran")
    duration_seconds: float = Field(..., description="Total operation time")
    log: list[LogEntry] = Field(default_factory=list)
    summary: dict[str, int] = Field(
        default_factory=dict, description="Log entry counts per level"
    )

    def calculate_summary(self) -> dict[str, int]:
        """
        Count log entries per level.

        Returns:
            Dictionary with counts per message level plus total
        """
        summary = {level.value: 0 for level in MessageLevel}
        summary["total"] = len(self.log)

        for entry in self.log:
            summary[entry.level.value] += 1

        return summary
