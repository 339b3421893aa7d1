import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from simulator.result import extract_result


class TestExtractResult:

    @pytest.mark.parametrize("tape,expected", [
        ("_0000_", 4),
        ("__0000_", 0),
        ("_0_", 1),
        ("_XXC000_000000", 6),
        ("_XC0_0", 1),
        ("_YY_00_", 2),
        ("0000", 4),
    ])
    def test_examples(self, tape, expected):
        assert extract_result(tape) == expected

    def test_double_blank_anywhere_is_zero(self):
        assert extract_result("_000_000__") == 0
        assert extract_result("_0__0_") == 0

    def test_counts_any_non_blank_characters(self):
        assert extract_result("_0C0_XY0") == 3

    def test_only_blanks(self):
        assert extract_result("_") == 0
        assert extract_result("") == 0
