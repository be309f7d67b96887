"""Pydantic models: the data types shared by every layer."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class RepeatDay(str, enum.Enum):
    """Weekday tags, in ``date.weekday()`` order (Monday first)."""

    MON = "mon"
    TUE = "tue"
    WED = "wed"
    THU = "thu"
    FRI = "fri"
    SAT = "sat"
    SUN = "sun"


class QuestionDifficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestionCategory(str, enum.Enum):
    MATH = "math"
    GENERAL = "general"
    PUZZLE = "puzzle"


class ChallengeState(str, enum.Enum):
    """Lifecycle of a wake-up challenge."""

    IDLE = "idle"  # alarm vanished before the session could start
    LOADING = "loading"
    PRESENTING = "presenting"
    COMPLETED = "completed"
    OUT_OF_QUESTIONS = "out_of_questions"
    NO_QUESTIONS = "no_questions"


class Alarm(BaseModel):
    """A scheduled wake trigger together with its challenge settings."""

    id: int
    time: str = Field(pattern=TIME_PATTERN)
    label: str = ""
    is_active: bool = True
    repeat_days: set[RepeatDay] = Field(default_factory=set)
    # No upper bound here: the 1-5 range is an editing rule, not an engine limit.
    question_count: int = Field(default=3, ge=1)
    question_difficulty: QuestionDifficulty = QuestionDifficulty.MEDIUM
    question_categories: set[QuestionCategory] = Field(
        default_factory=lambda: {QuestionCategory.MATH}, min_length=1
    )
    sound: str = "default"
    vibrate: bool = True

    @property
    def is_one_time(self) -> bool:
        return not self.repeat_days


class AlarmCreate(BaseModel):
    """Input model for creating a new alarm."""

    time: str = Field(pattern=TIME_PATTERN)
    label: str = Field(default="", max_length=100)
    is_active: bool = True
    repeat_days: set[RepeatDay] = Field(default_factory=set)
    question_count: int = Field(default=3, ge=1, le=5)
    question_difficulty: QuestionDifficulty = QuestionDifficulty.MEDIUM
    question_categories: set[QuestionCategory] = Field(
        default_factory=lambda: {QuestionCategory.MATH}, min_length=1
    )
    sound: str = "default"
    vibrate: bool = True


class AlarmUpdate(BaseModel):
    """Partial edit of an alarm. Only fields that were set are applied."""

    time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    label: Optional[str] = Field(default=None, max_length=100)
    is_active: Optional[bool] = None
    repeat_days: Optional[set[RepeatDay]] = None
    question_count: Optional[int] = Field(default=None, ge=1, le=5)
    question_difficulty: Optional[QuestionDifficulty] = None
    question_categories: Optional[set[QuestionCategory]] = Field(default=None, min_length=1)
    sound: Optional[str] = None
    vibrate: Optional[bool] = None


class AlarmHistory(BaseModel):
    """One finished ringing session. Append-only."""

    model_config = ConfigDict(frozen=True)

    id: int
    alarm_id: int  # may refer to an alarm that has since been deleted
    date: datetime
    wake_up_time: datetime
    questions_answered: int = Field(ge=0)
    questions_correct: int = Field(ge=0)
    snooze_count: int = Field(default=0, ge=0)
    dismissed: bool = False


class AlarmHistoryCreate(BaseModel):
    """Input model for appending a history record."""

    alarm_id: int
    date: datetime
    wake_up_time: datetime = Field(default_factory=datetime.now)
    questions_answered: int = Field(ge=0)
    questions_correct: int = Field(ge=0)
    snooze_count: int = Field(default=0, ge=0)
    dismissed: bool = False


class Question(BaseModel):
    """A quiz question from the static catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    category: QuestionCategory
    difficulty: QuestionDifficulty
    question: str
    options: Optional[tuple[str, ...]] = None
    answer: Union[int, str]

    @property
    def is_multiple_choice(self) -> bool:
        return bool(self.options)


class AppConfig(BaseModel):
    """Application configuration (persisted to ~/.config/alarmed/config.json)."""

    db_path: Optional[str] = None  # None = use default (~/.local/share/alarmed/)
    poll_interval_seconds: float = Field(default=10, gt=0, le=60)
    question_time_limit_seconds: int = Field(default=90, gt=0)
    question_pool_size: int = Field(default=50, gt=0)
    crescendo_start_volume: float = Field(default=0.5, ge=0, le=1)
    crescendo_step: float = Field(default=0.05, gt=0, le=1)
    log_level: str = "WARNING"
