"""
test_validators.py
------------------
Unit tests for DataValidator normalization helpers.
"""
import pytest

from catalog.core.validators import DataValidator


class TestNormalizeString:
    """Test DataValidator.normalize_string."""

    def test_strips_whitespace(self):
        assert DataValidator.normalize_string("  Yui  ") == "Yui"

    def test_blank_becomes_none(self):
        assert DataValidator.normalize_string("   ") is None

    def test_non_string_becomes_none(self):
        assert DataValidator.normalize_string(42) is None
        assert DataValidator.normalize_string(None) is None


class TestNameKey:
    """Test DataValidator.name_key."""

    def test_case_and_whitespace_insensitive(self):
        assert DataValidator.name_key(" yui ") == DataValidator.name_key("Yui")

    def test_blank_has_no_key(self):
        assert DataValidator.name_key("") is None


class TestNormalizeStringList:
    """Test DataValidator.normalize_string_list."""

    def test_drops_blank_and_non_string_items(self):
        result = DataValidator.normalize_string_list([" a ", "", None, 3, "b"])
        assert result == ["a", "b"]

    def test_empty_list_becomes_none(self):
        assert DataValidator.normalize_string_list([]) is None
        assert DataValidator.normalize_string_list(["  "]) is None

    def test_non_list_becomes_none(self):
        assert DataValidator.normalize_string_list("a, b") is None


class TestNormalizeInt:
    """Test DataValidator.normalize_int."""

    @pytest.mark.parametrize(
        "value,expected",
        [(2, 2), ("3", 3), ("x", None), (None, None), (True, None)],
    )
    def test_conversion(self, value, expected):
        assert DataValidator.normalize_int(value) == expected
