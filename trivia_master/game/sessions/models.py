from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from trivia_master.game.questions.types import QuestionView, TriviaQuestion
from trivia_master.game.sessions.errors import NoCurrentQuestionError


@dataclass(slots=True)
class QuestionState:
    question: TriviaQuestion
    answered: bool = False
    user_answer: str | None = None


@dataclass(slots=True)
class GameSession:
    player_id: str
    questions: list[QuestionState]
    last_played: date
    current_index: int = 0
    score: int = 0
    streak: int = 0
    hints_used: int = 0
    skips_used: int = 0

    @classmethod
    def start(
        cls,
        *,
        player_id: str,
        questions: tuple[TriviaQuestion, ...],
        last_played: date,
    ) -> GameSession:
        return cls(
            player_id=player_id,
            questions=[QuestionState(question=question) for question in questions],
            last_played=last_played,
        )

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def is_completed(self) -> bool:
        return self.current_index == self.total_questions

    @property
    def questions_answered(self) -> int:
        return sum(1 for state in self.questions if state.answered)

    def current_state(self) -> QuestionState:
        if not 0 <= self.current_index < self.total_questions:
            raise NoCurrentQuestionError(
                f"current index {self.current_index} outside 0..{self.total_questions - 1}"
            )
        state = self.questions[self.current_index]
        if state.answered:
            raise NoCurrentQuestionError(f"question {state.question.question_id} is already answered")
        return state

    def question_view(self, index: int) -> QuestionView | None:
        if not 0 <= index < self.total_questions:
            return None
        return QuestionView.from_question(self.questions[index].question, index=index + 1)

    def current_view(self) -> QuestionView | None:
        return self.question_view(self.current_index)
