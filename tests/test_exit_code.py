"""Tests for the success exit code policy."""

import pytest

from npm_ops.core.exit_code import ExitCodeComparator


class TestParse:
    """Tests for parsing exit code expressions."""

    @pytest.mark.parametrize("text", [None, "", "   ", "\t\n"])
    def test_empty_is_no_policy(self, text):
        """Test that empty input yields no comparator."""
        assert ExitCodeComparator.try_parse(text) is None

    def test_bare_integer_defaults_to_equality(self):
        """Test that digits without an operator compare with ==."""
        comparator = ExitCodeComparator.try_parse("5")

        assert comparator == ExitCodeComparator("==", 5)

    def test_whitespace_is_allowed(self):
        """Test surrounding and inner whitespace."""
        comparator = ExitCodeComparator.try_parse("  >=   3 ")

        assert comparator.operator == ">="
        assert comparator.value == 3

    @pytest.mark.parametrize("text", ["~5", "abc", "5x", "-1", "== -1", ">= 1.5"])
    def test_non_expressions_are_no_policy(self, text):
        """Test that text outside the grammar yields no comparator."""
        assert ExitCodeComparator.try_parse(text) is None

    @pytest.mark.parametrize("text", ["=<3", "!!3", "><3", "!3", "===3"])
    def test_unknown_operator_falls_back_to_equality(self, text):
        """Test that unrecognized operator runs become ==."""
        comparator = ExitCodeComparator.try_parse(text)

        assert comparator.operator == "=="
        assert comparator.value == 3

    @pytest.mark.parametrize("op", ["=", "==", "!=", "<", ">", "<=", ">="])
    def test_all_operators_parse(self, op):
        """Test that every supported operator is kept as written."""
        assert ExitCodeComparator.try_parse(f"{op}7").operator == op


class TestEvaluate:
    """Tests for evaluating exit codes."""

    @pytest.mark.parametrize(
        "op, expected",
        [
            ("=", True),
            ("==", True),
            ("<=", True),
            (">=", True),
            ("<", False),
            (">", False),
            ("!=", False),
        ],
    )
    def test_comparing_value_with_itself(self, op, expected):
        """Test every operator against its own value."""
        for value in (0, 1, 42):
            comparator = ExitCodeComparator.try_parse(f"{op}{value}")
            assert comparator.evaluate(value) is expected

    def test_not_equal_zero(self):
        """Test the common 'fail on success' style policy."""
        comparator = ExitCodeComparator.try_parse("!= 0")

        assert comparator.evaluate(2) is True
        assert comparator.evaluate(0) is False

    def test_greater_or_equal_zero_rejects_negative(self):
        """Test '>= 0' failing only on negative exit codes."""
        comparator = ExitCodeComparator.try_parse(">= 0")

        assert comparator.evaluate(0) is True
        assert comparator.evaluate(255) is True
        assert comparator.evaluate(-1) is False
