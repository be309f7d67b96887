"""Wake-up quiz questions and the selector that draws a session's pool.

The catalog is static and covers every category x difficulty combination:

* **math** -- mental arithmetic, answered with a whole number.
* **general** -- general knowledge, mostly multiple choice.
* **puzzle** -- number sequences, riddles and small logic traps.

Numeric answers are compared as base-10 integers, so ``"007"`` matches ``7``.
Text answers are compared case-insensitively with surrounding whitespace
ignored.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from typing import Optional, Union

from alarmed.models import Question, QuestionCategory, QuestionDifficulty

_M = QuestionCategory.MATH
_G = QuestionCategory.GENERAL
_P = QuestionCategory.PUZZLE
_EASY = QuestionDifficulty.EASY
_MEDIUM = QuestionDifficulty.MEDIUM
_HARD = QuestionDifficulty.HARD


def _q(
    qid: str,
    category: QuestionCategory,
    difficulty: QuestionDifficulty,
    text: str,
    answer: Union[int, str],
    options: Optional[tuple[str, ...]] = None,
) -> Question:
    return Question(
        id=qid,
        category=category,
        difficulty=difficulty,
        question=text,
        answer=answer,
        options=options,
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

QUESTION_CATALOG: tuple[Question, ...] = (
    # Math
    _q("math-easy-1", _M, _EASY, "What is 7 + 5?", 12),
    _q("math-easy-2", _M, _EASY, "What is 9 x 3?", 27),
    _q("math-easy-3", _M, _EASY, "What is 15 - 8?", 7),
    _q("math-easy-4", _M, _EASY, "What is 36 / 4?", 9),
    _q("math-easy-5", _M, _EASY, "What is 6 + 14?", 20),
    _q("math-easy-6", _M, _EASY, "What is 8 x 7?", 56),
    _q("math-medium-1", _M, _MEDIUM, "What is 17 x 6?", 102),
    _q("math-medium-2", _M, _MEDIUM, "What is 144 / 12?", 12),
    _q("math-medium-3", _M, _MEDIUM, "What is 48 + 79?", 127),
    _q("math-medium-4", _M, _MEDIUM, "What is 15% of 200?", 30),
    _q("math-medium-5", _M, _MEDIUM, "What is 23 x 4 - 12?", 80),
    _q("math-medium-6", _M, _MEDIUM, "What is the square root of 169?", 13),
    _q("math-hard-1", _M, _HARD, "What is 37 x 23?", 851),
    _q("math-hard-2", _M, _HARD, "What is 17 squared?", 289),
    _q("math-hard-3", _M, _HARD, "What is 1024 / 16 + 45?", 109),
    _q("math-hard-4", _M, _HARD, "What is 13 x 13 - 7 x 8?", 113),
    _q("math-hard-5", _M, _HARD, "What is 2 to the power of 10?", 1024),
    _q("math-hard-6", _M, _HARD, "What is 999 - 456 + 123?", 666),
    # General knowledge
    _q("general-easy-1", _G, _EASY, "What is the capital of France?", "Paris",
       ("Paris", "London", "Berlin", "Madrid")),
    _q("general-easy-2", _G, _EASY, "How many days are in a week?", 7),
    _q("general-easy-3", _G, _EASY, "What colour do you get by mixing blue and yellow?",
       "Green", ("Green", "Purple", "Orange", "Brown")),
    _q("general-easy-4", _G, _EASY, "Which planet do we live on?", "Earth",
       ("Mars", "Earth", "Venus", "Jupiter")),
    _q("general-easy-5", _G, _EASY, "How many legs does a spider have?", 8),
    _q("general-medium-1", _G, _MEDIUM, "What is the largest ocean on Earth?", "Pacific",
       ("Atlantic", "Indian", "Pacific", "Arctic")),
    _q("general-medium-2", _G, _MEDIUM, "Who painted the Mona Lisa?", "Leonardo da Vinci",
       ("Michelangelo", "Leonardo da Vinci", "Raphael", "Van Gogh")),
    _q("general-medium-3", _G, _MEDIUM, "What is the chemical symbol for gold?", "Au"),
    _q("general-medium-4", _G, _MEDIUM, "How many continents are there?", 7),
    _q("general-medium-5", _G, _MEDIUM, "What is the capital of Australia?", "Canberra",
       ("Sydney", "Melbourne", "Canberra", "Perth")),
    _q("general-hard-1", _G, _HARD, "In which year did the Berlin Wall fall?", 1989),
    _q("general-hard-2", _G, _HARD, "What is the chemical symbol for tungsten?", "W"),
    _q("general-hard-3", _G, _HARD, "Which element has atomic number 1?", "Hydrogen",
       ("Helium", "Hydrogen", "Oxygen", "Lithium")),
    _q("general-hard-4", _G, _HARD, "What is the longest river in Africa?", "Nile",
       ("Congo", "Niger", "Nile", "Zambezi")),
    _q("general-hard-5", _G, _HARD, "How many bones are in the adult human body?", 206),
    # Puzzles
    _q("puzzle-easy-1", _P, _EASY, "What comes next: 2, 4, 6, 8, ?", 10),
    _q("puzzle-easy-2", _P, _EASY, "What has keys but can't open locks?", "Piano",
       ("Piano", "Door", "Car", "Map")),
    _q("puzzle-easy-3", _P, _EASY, "What comes next: A, C, E, G, ?", "I"),
    _q("puzzle-easy-4", _P, _EASY, "How many sides does a triangle have?", 3),
    _q("puzzle-easy-5", _P, _EASY, "What gets wetter the more it dries?", "Towel",
       ("Sponge", "Towel", "Rain", "Ice")),
    _q("puzzle-medium-1", _P, _MEDIUM, "What comes next: 1, 1, 2, 3, 5, 8, ?", 13),
    _q("puzzle-medium-2", _P, _MEDIUM, "What comes next: 3, 9, 27, 81, ?", 243),
    _q("puzzle-medium-3", _P, _MEDIUM,
       "All Bloops are Razzies and all Razzies are Lazzies. Are all Bloops Lazzies?",
       "yes", ("yes", "no")),
    _q("puzzle-medium-4", _P, _MEDIUM,
       "A farmer has 17 sheep and all but 9 run away. How many are left?", 9),
    _q("puzzle-medium-5", _P, _MEDIUM, "What comes next: 1, 4, 9, 16, 25, ?", 36),
    _q("puzzle-hard-1", _P, _HARD, "What comes next: 2, 6, 12, 20, 30, ?", 42),
    _q("puzzle-hard-2", _P, _HARD,
       "A bat and a ball cost 110 cents together. The bat costs 100 cents more "
       "than the ball. How many cents does the ball cost?", 5),
    _q("puzzle-hard-3", _P, _HARD, "What comes next: 1, 11, 21, 1211, 111221, ?", 312211),
    _q("puzzle-hard-4", _P, _HARD,
       "If 5 machines take 5 minutes to make 5 widgets, how many minutes do "
       "100 machines take to make 100 widgets?", 5),
    _q("puzzle-hard-5", _P, _HARD, "What comes next: 2, 3, 5, 7, 11, 13, ?", 17),
)

DEFAULT_POOL_SIZE = 50


# ---------------------------------------------------------------------------
# Selection & answer checking
# ---------------------------------------------------------------------------


def select_questions(
    pool_size: int,
    difficulty: QuestionDifficulty,
    categories: Iterable[QuestionCategory],
    rng: Optional[random.Random] = None,
) -> list[Question]:
    """Draw a shuffled pool of up to ``pool_size`` matching questions.

    Returns every match (shuffled, never repeated) when fewer than
    ``pool_size`` exist, and an empty list when nothing matches.
    """
    wanted = set(categories)
    matches = [
        q for q in QUESTION_CATALOG if q.difficulty == difficulty and q.category in wanted
    ]
    (rng or random).shuffle(matches)
    return matches[:pool_size]


def check_answer(question: Question, given: object) -> bool:
    """Return True if ``given`` matches the question's canonical answer."""
    text = "" if given is None else str(given).strip()
    if isinstance(question.answer, int):
        try:
            return int(text, 10) == question.answer
        except ValueError:
            return False
    return text.lower() == question.answer.strip().lower()
