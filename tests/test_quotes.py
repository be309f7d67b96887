"""Tests for quotes and streak messages."""

from __future__ import annotations

import random
from pathlib import Path

from alarmed.quotes import DEFAULT_QUOTES, load_quotes_file, pick_quote, streak_message


class TestPickQuote:
    def test_from_list(self) -> None:
        assert pick_quote(["only one"]) == "only one"

    def test_empty_list_falls_back(self) -> None:
        assert pick_quote([]) in DEFAULT_QUOTES

    def test_seeded(self) -> None:
        quotes = ["a", "b", "c", "d"]
        assert pick_quote(quotes, random.Random(3)) == pick_quote(quotes, random.Random(3))


class TestLoadQuotesFile:
    def test_bullets_only(self, tmp_path: Path) -> None:
        md = tmp_path / "quotes.md"
        md.write_text("# Morning\n\n- Up and at 'em.\n  - Seize the day.\nnot a quote\n-   \n")
        assert load_quotes_file(md) == ["Up and at 'em.", "Seize the day."]


class TestStreakMessage:
    def test_thresholds(self) -> None:
        assert streak_message(0).startswith("Start your streak")
        assert streak_message(1).startswith("Great start")
        assert streak_message(3) == "You're building momentum!"
        assert streak_message(7).startswith("Impressive")
        assert streak_message(30).startswith("Amazing")
