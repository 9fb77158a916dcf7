"""
test_token_list.py
------------------
Unit tests for comma-joined token list handling.
"""
from catalog.sync.token_list import TokenList


class TestParse:
    """Test TokenList.parse."""

    def test_splits_and_trims(self):
        assert TokenList.parse("Yui Hatano ,  Maria Ozawa") == ["Yui Hatano", "Maria Ozawa"]

    def test_empty_field_is_empty_list(self):
        assert TokenList.parse("") == []
        assert TokenList.parse(None) == []

    def test_keeps_empty_inner_tokens(self):
        assert TokenList.parse("A,,B") == ["A", "", "B"]

    def test_non_string_is_empty_list(self):
        assert TokenList.parse(["A"]) == []


class TestFormat:
    """Test TokenList.format."""

    def test_joins_with_comma_space(self):
        assert TokenList.format(["A", "B"]) == "A, B"

    def test_empty(self):
        assert TokenList.format([]) == ""


class TestReplace:
    """Test TokenList.replace."""

    def test_whole_token_only(self):
        tokens = TokenList.parse("Ai, Aiko")
        assert TokenList.format(TokenList.replace(tokens, "Ai", "Ai Uehara")) == "Ai Uehara, Aiko"

    def test_replaces_every_occurrence(self):
        assert TokenList.replace(["A", "B", "A"], "A", "C") == ["C", "B", "C"]

    def test_case_sensitive(self):
        assert TokenList.replace(["ai"], "Ai", "X") == ["ai"]

    def test_missing_token_leaves_list_equal(self):
        tokens = ["A", "B"]
        assert TokenList.replace(tokens, "Z", "Y") == tokens
        assert not TokenList.contains(tokens, "Z")


class TestNormalize:
    """Test TokenList.normalize."""

    def test_drops_blank_tokens(self):
        assert TokenList.normalize(" a ,, b ") == "a, b"

    def test_accepts_lists(self):
        assert TokenList.normalize(["a", " ", "b"]) == "a, b"

    def test_nothing_left_is_none(self):
        assert TokenList.normalize(" , ") is None
        assert TokenList.normalize(None) is None
