"""Success policy for npm exit codes."""

import operator
import re
from dataclasses import dataclass
from typing import Optional

_EXPRESSION = re.compile(r"^\s*(?P<op>[=<>!]*)\s*(?P<value>[0-9]+)\s*$")

_OPERATORS = {
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}

DEFAULT_OPERATOR = "=="


@dataclass(frozen=True)
class ExitCodeComparator:
    """
    Comparison applied to an exit code, e.g. `>= 0` or `!= 2`.

    Attributes:
        operator: One of =, ==, !=, <, >, <=, >=
        value: Right-hand side of the comparison
    """

    operator: str
    value: int

    @classmethod
    def try_parse(cls, text: Optional[str]) -> Optional["ExitCodeComparator"]:
        """
        Parse a success exit code expression.

        Args:
            text: Expression such as "0", "== 2" or ">=0"

        Returns:
            Comparator, or None when the text is empty or not an expression.
            Unknown operators made of =<>! fall back to ==.
        """
        if not text or not text.strip():
            return None

        match = _EXPRESSION.match(text)
        if not match:
            return None

        op = match.group("op")
        if op not in _OPERATORS:
            op = DEFAULT_OPERATOR

        return cls(operator=op, value=int(match.group("value")))

    def evaluate(self, exit_code: int) -> bool:
        """Return True if the exit code satisfies this comparison."""
        return _OPERATORS[self.operator](exit_code, self.value)

    def __str__(self) -> str:
        return f"{self.operator} {self.value}"
