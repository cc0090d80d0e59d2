from __future__ import annotations

from dataclasses import dataclass

OPTION_COUNT = 4
DIFFICULTIES: tuple[str, ...] = ("easy", "medium", "hard")


@dataclass(frozen=True, slots=True)
class RawTriviaQuestion:
    """Provider record after schema validation, before decoding and shuffling."""

    category: str
    difficulty: str
    question: str
    correct_answer: str
    incorrect_answers: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TriviaQuestion:
    question_id: str
    category: str
    difficulty: str
    text: str
    options: tuple[str, ...]
    correct_answer: str

    def __post_init__(self) -> None:
        if len(self.options) != OPTION_COUNT:
            raise ValueError(f"expected {OPTION_COUNT} options, got {len(self.options)}")
        if self.correct_answer not in self.options:
            raise ValueError("correct answer must be one of the options")


@dataclass(frozen=True, slots=True)
class QuestionView:
    index: int
    question: str
    options: tuple[str, ...]
    category: str
    difficulty: str

    @classmethod
    def from_question(cls, question: TriviaQuestion, *, index: int) -> QuestionView:
        return cls(
            index=index,
            question=question.text,
            options=question.options,
            category=question.category,
            difficulty=question.difficulty,
        )
