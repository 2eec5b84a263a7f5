"""Tests for utils.card_utils — the single source of truth for card helpers."""

from __future__ import annotations

import pytest

from holdem_equity.core.errors import InvalidCardFormatError
from holdem_equity.utils.card_utils import (
    card_token,
    format_card,
    format_cards,
    parse_card,
    rank_name,
)


# ── parse_card ────────────────────────────────────────────────────


class TestParseCard:
    def test_two_character_tokens(self) -> None:
        assert parse_card("Ah") == (14, "h")
        assert parse_card("2c") == (2, "c")
        assert parse_card("Jd") == (11, "d")

    def test_ten_is_three_characters(self) -> None:
        assert parse_card("10h") == (10, "h")
        assert parse_card("10s") == (10, "s")

    def test_ten_alias(self) -> None:
        assert parse_card("Th") == (10, "h")

    @pytest.mark.parametrize("token", ["", "A", "1h", "11h", "Ax", "hA", "100h", "Ahh", "0s"])
    def test_invalid_raises(self, token: str) -> None:
        with pytest.raises(InvalidCardFormatError):
            parse_card(token)

    def test_non_string_raises(self) -> None:
        with pytest.raises(InvalidCardFormatError):
            parse_card(None)  # type: ignore[arg-type]

    def test_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_card("ZZ")


# ── card_token ─────────────────────────────────────────────────


class TestCardToken:
    def test_canonical_form(self) -> None:
        assert card_token(10, "h") == "10h"
        assert card_token(14, "s") == "As"
        assert card_token(*parse_card("tD")) == "10d"

    @pytest.mark.parametrize(("rank", "suit"), [(1, "h"), (15, "h"), (14, "x"), (14, "")])
    def test_invalid_raises(self, rank: int, suit: str) -> None:
        with pytest.raises(InvalidCardFormatError):
            card_token(rank, suit)


# ── Display ───────────────────────────────────────────────────────


class TestDisplay:
    def test_glyphs(self) -> None:
        assert format_card("Ah") == "A♥"
        assert format_cards(["10s", "2d", "Kc"]) == "10♠ 2♦ K♣"

    def test_abbreviated_ten(self) -> None:
        assert format_card("10h", abbreviate_ten=True) == "T♥"

    def test_names(self) -> None:
        assert rank_name(6, plural=True) == "Sixes"
