"""Wake-up challenge state machine.

A challenge walks through a drawn pool of questions until the alarm's
``question_count`` correct answers are reached.  Wrong answers move on to the
next question without losing progress; running out of questions parks the
challenge in ``OUT_OF_QUESTIONS`` until the user restarts it with a snooze,
which draws a fresh pool and starts counting from zero again.

Answering is two-step: ``submit`` locks the verdict for the current question
(re-submitting is a no-op), ``advance`` applies it.  ``answer`` does both.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Optional

from alarmed.models import ChallengeState, Question
from alarmed.questions import check_answer

log = logging.getLogger(__name__)

_RESTARTABLE = (
    ChallengeState.PRESENTING,
    ChallengeState.OUT_OF_QUESTIONS,
    ChallengeState.NO_QUESTIONS,
)


class Challenge:
    """Progress through one alarm's quiz."""

    def __init__(self, question_count: int, draw: Callable[[], list[Question]]) -> None:
        self.question_count = question_count
        self._draw = draw
        self.state = ChallengeState.LOADING
        self.questions: list[Question] = []
        self.index = 0
        self.correct = 0
        self.attempts = 0  # across the whole session, snoozes included
        self.snooze_count = 0
        self._verdict: Optional[bool] = None

    # -- properties ---------------------------------------------------------

    @property
    def current_question(self) -> Optional[Question]:
        if self.state is not ChallengeState.PRESENTING:
            return None
        return self.questions[self.index]

    @property
    def is_locked(self) -> bool:
        """True once the current question has a submitted answer."""
        return self._verdict is not None

    @property
    def questions_answered(self) -> int:
        return self.index + 1

    @property
    def is_finished(self) -> bool:
        return self.state is ChallengeState.COMPLETED

    # -- transitions --------------------------------------------------------

    def start(self) -> ChallengeState:
        if self.state is ChallengeState.LOADING:
            self._load()
        return self.state

    def _load(self) -> None:
        self.questions = list(self._draw())
        self.index = 0
        self.correct = 0
        self._verdict = None
        if self.questions:
            self.state = ChallengeState.PRESENTING
        else:
            log.warning("No questions available for this challenge.")
            self.state = ChallengeState.NO_QUESTIONS

    def submit(self, given: object) -> Optional[bool]:
        """Judge ``given`` against the current question and lock the verdict.

        Returns None when no question is being presented.
        """
        if self.state is not ChallengeState.PRESENTING:
            return None
        if self._verdict is not None:
            return self._verdict
        question = self.questions[self.index]
        self._verdict = check_answer(question, given)
        self.attempts += 1
        log.debug("Question %s answered %s", question.id, "right" if self._verdict else "wrong")
        return self._verdict

    def advance(self) -> ChallengeState:
        """Apply the locked verdict and move on."""
        if self.state is not ChallengeState.PRESENTING or self._verdict is None:
            return self.state
        was_correct = self._verdict
        self._verdict = None
        if was_correct:
            self.correct += 1
            if self.correct >= self.question_count:
                self.state = ChallengeState.COMPLETED
                return self.state
        self.index += 1
        if self.index >= len(self.questions):
            self.state = ChallengeState.OUT_OF_QUESTIONS
        return self.state

    def answer(self, given: object) -> bool:
        """Submit and advance in one step. Returns whether the answer was right."""
        verdict = self.submit(given)
        self.advance()
        return bool(verdict)

    def snooze(self) -> bool:
        """Restart with a fresh pool. Returns False if not allowed right now."""
        if self.state not in _RESTARTABLE:
            return False
        self.snooze_count += 1
        self._load()
        return True
