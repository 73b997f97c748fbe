"""Classification of npm's stderr output into log levels."""

import re

from .models import MessageLevel

# "npm <level> <message>", e.g. "npm WARN deprecated foo@1.0.0" or "npm ERR! code E404"
_LOG_LINE_PATTERN = re.compile(r"npm\s(?P<level>[a-zA-Z]+!?)(?P<message>\s.*)?$")

_LEVELS = {
    "debug": MessageLevel.DEBUG,
    "info": MessageLevel.INFORMATION,
    "information": MessageLevel.INFORMATION,
    "warn": MessageLevel.WARNING,
    "warning": MessageLevel.WARNING,
    "err!": MessageLevel.ERROR,
    "error": MessageLevel.ERROR,
    "critical": MessageLevel.ERROR,
}


def classify_stderr_line(line: str, verbose: bool = False) -> tuple[MessageLevel, str]:
    """
    Map one line of npm stderr to a log level and the text to log.

    Args:
        line: Raw stderr line
        verbose: Keep the "npm <level>" prefix in the logged text

    Returns:
        (level, text). Unrecognized lines are DEBUG with the full line.
    """
    match = _LOG_LINE_PATTERN.search(line)
    if not match:
        return MessageLevel.DEBUG, line

    level = _LEVELS.get(match.group("level").lower(), MessageLevel.DEBUG)
    if verbose:
        return level, line

    return level, (match.group("message") or "").lstrip()
