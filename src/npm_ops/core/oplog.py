"""Per-operation message log."""

import logging

from .models import LogEntry, MessageLevel

logger = logging.getLogger("npm_ops.operation")


class OperationLog:
    """
    Collects the messages an operation writes.

    Every entry is kept for the operation result and forwarded to the
    `npm_ops.operation` logger at the equivalent level.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.entries: list[LogEntry] = []

    def log(self, level: MessageLevel, message: str) -> None:
        self.entries.append(LogEntry(level=level, message=message))
        if self.name:
            logger.log(level.logging_level, "[%s] %s", self.name, message)
        else:
            logger.log(level.logging_level, message)

    def debug(self, message: str) -> None:
        self.log(MessageLevel.DEBUG, message)

    def info(self, message: str) -> None:
        self.log(MessageLevel.INFORMATION, message)

    def warning(self, message: str) -> None:
        self.log(MessageLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.log(MessageLevel.ERROR, message)

    def messages(self, level: MessageLevel) -> list[str]:
        """Messages logged at exactly the given level."""
        return [entry.message for entry in self.entries if entry.level == level]

    @property
    def has_errors(self) -> bool:
        return any(entry.level == MessageLevel.ERROR for entry in self.entries)
