"""Exceptions raised by npm-ops."""


class NpmOpsError(Exception):
    """Base class for npm-ops errors."""


class ExecutionFailureError(NpmOpsError):
    """
    The operation cannot run at all.

    Raised only where there is no meaningful fallback (for example npm
    cannot be found). Recoverable problems are logged on the operation log
    instead.
    """


class ConfigError(NpmOpsError):
    """A configuration or package-source file could not be loaded."""
