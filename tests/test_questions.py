"""Tests for the question bank and selector."""

from __future__ import annotations

import random

from alarmed.models import Question, QuestionCategory, QuestionDifficulty
from alarmed.questions import QUESTION_CATALOG, check_answer, select_questions


def _question(answer: object, options: tuple[str, ...] | None = None) -> Question:
    return Question(
        id="t",
        category=QuestionCategory.GENERAL,
        difficulty=QuestionDifficulty.EASY,
        question="?",
        answer=answer,
        options=options,
    )


class TestCatalog:
    def test_covers_every_combination(self) -> None:
        combos = {(q.category, q.difficulty) for q in QUESTION_CATALOG}
        assert len(combos) == len(QuestionCategory) * len(QuestionDifficulty)

    def test_ids_unique(self) -> None:
        ids = [q.id for q in QUESTION_CATALOG]
        assert len(ids) == len(set(ids))

    def test_options_contain_answer(self) -> None:
        for q in QUESTION_CATALOG:
            if q.options:
                assert any(check_answer(q, opt) for opt in q.options), q.id


class TestSelectQuestions:
    def test_respects_filters(self) -> None:
        cats = {QuestionCategory.MATH, QuestionCategory.PUZZLE}
        for difficulty in QuestionDifficulty:
            drawn = select_questions(50, difficulty, cats)
            assert drawn
            for q in drawn:
                assert q.difficulty == difficulty
                assert q.category in cats

    def test_returns_all_matches_without_repeats(self) -> None:
        expected = [
            q for q in QUESTION_CATALOG
            if q.difficulty == QuestionDifficulty.HARD and q.category == QuestionCategory.MATH
        ]
        drawn = select_questions(50, QuestionDifficulty.HARD, [QuestionCategory.MATH])
        assert len(drawn) == len(expected)
        assert {q.id for q in drawn} == {q.id for q in expected}

    def test_capped_at_pool_size(self) -> None:
        drawn = select_questions(2, QuestionDifficulty.EASY, list(QuestionCategory))
        assert len(drawn) == 2

    def test_no_categories_gives_empty_pool(self) -> None:
        assert select_questions(50, QuestionDifficulty.EASY, []) == []

    def test_order_varies_between_draws(self) -> None:
        rng = random.Random(1234)
        orders = {
            tuple(q.id for q in select_questions(50, QuestionDifficulty.MEDIUM,
                                                 list(QuestionCategory), rng))
            for _ in range(20)
        }
        assert len(orders) > 10

    def test_first_question_is_spread_out(self) -> None:
        rng = random.Random(42)
        firsts = {
            select_questions(50, QuestionDifficulty.EASY, [QuestionCategory.MATH], rng)[0].id
            for _ in range(200)
        }
        assert len(firsts) == 6


class TestCheckAnswer:
    def test_numeric_leading_zeros(self) -> None:
        assert check_answer(_question(7), "007")

    def test_numeric_whitespace(self) -> None:
        assert check_answer(_question(42), " 42 ")

    def test_numeric_wrong(self) -> None:
        assert not check_answer(_question(42), "43")

    def test_numeric_malformed_is_just_wrong(self) -> None:
        assert not check_answer(_question(42), "forty-two")
        assert not check_answer(_question(42), "42.0")
        assert not check_answer(_question(42), "")

    def test_text_case_and_whitespace(self) -> None:
        assert check_answer(_question("paris"), " Paris ")
        assert check_answer(_question("Paris"), "PARIS")

    def test_text_wrong(self) -> None:
        assert not check_answer(_question("Paris"), "London")

    def test_blank_answer(self) -> None:
        assert not check_answer(_question("Paris"), None)
        assert not check_answer(_question("Paris"), "   ")
