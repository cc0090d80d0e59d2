from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from trivia_master.game.questions.types import QuestionView


class QuestionViewResponse(BaseModel):
    index: int = Field(ge=1)
    question: str
    options: list[str]
    category: str
    difficulty: str

    @classmethod
    def from_view(cls, view: QuestionView | None) -> QuestionViewResponse | None:
        if view is None:
            return None
        return cls(
            index=view.index,
            question=view.question,
            options=list(view.options),
            category=view.category,
            difficulty=view.difficulty,
        )


class StartGameRequest(BaseModel):
    player_id: str = Field(min_length=1, max_length=128)
    question_count: int | None = Field(default=None, ge=1, le=50)
    category: str | None = Field(default=None, max_length=16)
    difficulty: Literal["easy", "medium", "hard"] | None = None


class StartGameResponse(BaseModel):
    message: str
    presentation: str
    current_question: QuestionViewResponse
    total_questions: int = Field(ge=1)


class AnswerRequest(BaseModel):
    answer: str = Field(min_length=1, max_length=512)


class AnswerResponse(BaseModel):
    correct: bool
    score: int = Field(ge=0)
    message: str
    correct_answer: str
    streak: int = Field(ge=0)
    next_question: QuestionViewResponse | None = None
    game_completed: bool


class HintResponse(BaseModel):
    success: bool
    message: str
    remaining_options: list[str]
    hints_used: int = Field(ge=0)
    score_penalty: int = Field(ge=0)


class SkipResponse(BaseModel):
    success: bool
    message: str
    next_question: QuestionViewResponse | None = None
    skips_used: int = Field(ge=0)
    score_penalty: int = Field(ge=0)
    game_completed: bool


class StatsResponse(BaseModel):
    player_id: str
    score: int = Field(ge=0)
    current_question: int = Field(ge=1)
    total_questions: int = Field(ge=0)
    streak: int = Field(ge=0)
    hints_used: int = Field(ge=0)
    skips_used: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    accuracy: int = Field(ge=0, le=100)


class LeaderboardEntryResponse(BaseModel):
    player_id: str
    score: int = Field(ge=0)
    streak: int = Field(ge=0)
    questions_answered: int = Field(ge=0)


class LeaderboardResponse(BaseModel):
    leaderboard: list[LeaderboardEntryResponse]
    total_players: int = Field(ge=0)
