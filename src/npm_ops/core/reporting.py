"""Output formatters for operation results."""

from rich.console import Console
from rich.rule import Rule

from .models import MessageLevel, OperationResult


class TextReporter:
    """Human-readable summary using rich."""

    def __init__(self, console: Console | None = None):
        """Initialize text reporter with optional console."""
        self.console = console or Console()

    def report(self, result: OperationResult) -> None:
        """
        Print a summary of an operation result.

        The log itself is written through logging while the operation runs;
        this prints the verdict and the warnings and errors again so they
        are not lost in long npm output.

        Args:
            result: Operation result to report
        """
        self.console.print(Rule(f"npm {result.operation}"))

        problems = [
            entry
            for entry in result.log
            if entry.level in (MessageLevel.WARNING, MessageLevel.ERROR)
        ]
        for entry in problems:
            color = "red" if entry.level == MessageLevel.ERROR else "yellow"
            self.console.print(
                f"{entry.level.value.upper()}: {entry.message}", style=color, markup=False
            )

        summary = result.summary
        counts = f"{summary.get('error', 0)} error(s), {summary.get('warning', 0)} warning(s)"
        exit_code = "n/a" if result.exit_code is None else str(result.exit_code)

        if result.success:
            self.console.print(
                f"✅ Succeeded (exit code {exit_code}) | {counts} in {result.duration_seconds}s",
                style="green bold",
            )
        else:
            self.console.print(
                f"❌ Failed (exit code {exit_code}) | {counts} in {result.duration_seconds}s",
                style="red bold",
            )


class JsonReporter:
    """JSON output for programmatic consumption."""

    def report(self, result: OperationResult) -> str:
        """
        Generate JSON report.

        Args:
            result: Operation result to report

        Returns:
            JSON string
        """
        return result.model_dump_json(indent=2)
