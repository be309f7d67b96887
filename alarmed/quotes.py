"""Motivational quotes shown after a completed challenge, and streak encouragement.

The user's own quote list lives in the application state.  Quotes can also be
imported from a Markdown file: every ``- `` bullet line becomes one quote.
"""

from __future__ import annotations

import random
from pathlib import Path
from typing import Optional

DEFAULT_QUOTES: list[str] = [
    "Rise and shine! Today is full of possibilities.",
    "Every morning is a new beginning, a new chance to change your life.",
    "The only way to do great work is to love what you do.",
    "Your future is created by what you do today, not tomorrow.",
    "Success is not final, failure is not fatal: it is the courage to continue that counts.",
]

_FALLBACK_QUOTE = DEFAULT_QUOTES[0]


def pick_quote(quotes: list[str], rng: Optional[random.Random] = None) -> str:
    """Return a random quote, or the built-in fallback if the list is empty."""
    if not quotes:
        return _FALLBACK_QUOTE
    return (rng or random).choice(quotes)


def load_quotes_file(md_path: Path) -> list[str]:
    """Parse bullet points from a Markdown file."""
    quotes: list[str] = []
    for line in md_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped.startswith("- "):
            quote = stripped[2:].strip()
            if quote:
                quotes.append(quote)
    return quotes


def streak_message(streak: int) -> str:
    """Encouragement matched to the current streak length."""
    if streak == 0:
        return "Start your streak by waking up on time!"
    if streak == 1:
        return "Great start! Keep it going tomorrow."
    if streak < 5:
        return "You're building momentum!"
    if streak < 10:
        return "Impressive streak! You're developing a habit."
    return "Amazing discipline! You're a wake-up champion!"
