#!/usr/bin/env python3
"""
token_list.py
-------------
Parsing and formatting of comma-joined name lists.

Catalog records store cast and label references as a single string
(``"Yui Hatano, Maria Ozawa"``). TokenList is the one place that knows
how such a field is split, rewritten and joined back.

Format rules:
    - Tokens are separated by ``,`` and trimmed on parse
    - An absent or empty field parses to an empty list
    - Empty tokens inside a non-empty field are kept, so a rewrite
      changes nothing but the replaced token and the separator spacing
    - Formatting joins with ``", "``

Usage:
    tokens = TokenList.parse("Ai, Aiko")
    tokens = TokenList.replace(tokens, "Ai", "Ai Uehara")
    TokenList.format(tokens)        # "Ai Uehara, Aiko"
"""
from __future__ import annotations

from typing import Any, List, Optional


class TokenList:
    """Helpers for comma-joined token list fields."""

    SEPARATOR = ","
    JOINER = ", "

    @staticmethod
    def parse(text: Any) -> List[str]:
        """
        Split a token list field into trimmed tokens.

        Args:
            text: Stored field value

        Returns:
            List of tokens; empty for None, non-strings and empty strings
        """
        if not isinstance(text, str) or not text:
            return []
        return [token.strip() for token in text.split(TokenList.SEPARATOR)]

    @staticmethod
    def format(tokens: List[str]) -> str:
        """Join tokens back into a field value."""
        return TokenList.JOINER.join(tokens)

    @staticmethod
    def replace(tokens: List[str], old: str, new: str) -> List[str]:
        """
        Replace every token exactly equal to old.

        Matching is whole-token and case-sensitive, so renaming "Ai" never
        touches "Aiko".

        Args:
            tokens: Parsed tokens
            old: Token to replace
            new: Replacement token

        Returns:
            New list of tokens
        """
        return [new if token == old else token for token in tokens]

    @staticmethod
    def contains(tokens: List[str], name: str) -> bool:
        """Whether name is one of the tokens (whole-token match)."""
        return name in tokens

    @staticmethod
    def normalize(value: Any) -> Optional[str]:
        """
        Canonical form of a user-supplied token list.

        Accepts a comma-joined string or a list of strings. Blank tokens
        are dropped.

        Args:
            value: Raw field value

        Returns:
            Formatted field, or None if no tokens remain
        """
        if isinstance(value, list):
            raw = [item for item in value if isinstance(item, str)]
        else:
            raw = TokenList.parse(value)
        tokens = [token.strip() for token in raw if token.strip()]
        return TokenList.format(tokens) if tokens else None
