from __future__ import annotations

from dataclasses import dataclass

from trivia_master.game.questions.types import QuestionView


@dataclass(slots=True)
class StartGameResult:
    question: QuestionView
    total_questions: int
    message: str
    presentation: str


@dataclass(slots=True)
class AnswerResult:
    correct: bool
    score: int
    message: str
    correct_answer: str
    streak: int
    completed: bool
    next_question: QuestionView | None = None
    points_gained: int = 0
    streak_bonus: int = 0


@dataclass(slots=True)
class HintResult:
    success: bool
    message: str
    remaining_options: tuple[str, ...]
    hints_used: int
    penalty: int


@dataclass(slots=True)
class SkipResult:
    success: bool
    message: str
    skips_used: int
    penalty: int
    completed: bool = False
    next_question: QuestionView | None = None
