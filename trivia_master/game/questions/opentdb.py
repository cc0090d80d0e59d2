from __future__ import annotations

from typing import Any, Protocol

import httpx
import structlog
from pydantic import BaseModel, Field, ValidationError

from trivia_master.game.questions.types import OPTION_COUNT, RawTriviaQuestion
from trivia_master.game.sessions.errors import ContentUnavailableError

logger = structlog.get_logger("trivia_master.game.questions.opentdb")

OPENTDB_RESPONSE_SUCCESS = 0


class QuestionSource(Protocol):
    async def fetch(
        self,
        *,
        amount: int,
        category: str | None = None,
        difficulty: str | None = None,
    ) -> list[RawTriviaQuestion]: ...


class OpenTdbQuestion(BaseModel):
    category: str = Field(default="General")
    type: str | None = None
    difficulty: str = Field(default="medium")
    question: str = Field(min_length=1)
    correct_answer: str = Field(min_length=1)
    incorrect_answers: list[str] = Field(min_length=OPTION_COUNT - 1, max_length=OPTION_COUNT - 1)

    def to_raw(self) -> RawTriviaQuestion:
        return RawTriviaQuestion(
            category=self.category,
            difficulty=self.difficulty,
            question=self.question,
            correct_answer=self.correct_answer,
            incorrect_answers=tuple(self.incorrect_answers),
        )


class OpenTdbResponse(BaseModel):
    response_code: int
    results: list[OpenTdbQuestion] = Field(default_factory=list)


def build_query_params(
    *,
    amount: int,
    category: str | None,
    difficulty: str | None,
) -> dict[str, str]:
    params = {"amount": str(amount), "type": "multiple"}
    if category:
        params["category"] = category
    if difficulty:
        params["difficulty"] = difficulty
    return params


def parse_response(payload: Any) -> list[RawTriviaQuestion]:
    try:
        response = OpenTdbResponse.model_validate(payload)
    except ValidationError as exc:
        logger.warning("trivia_content_payload_invalid", errors=exc.error_count())
        raise ContentUnavailableError("trivia provider returned an invalid payload") from exc

    if response.response_code != OPENTDB_RESPONSE_SUCCESS:
        logger.warning("trivia_content_rejected", response_code=response.response_code)
        raise ContentUnavailableError(
            f"trivia provider responded with code {response.response_code}"
        )
    return [item.to_raw() for item in response.results]


class OpenTdbQuestionSource:
    def __init__(self, *, base_url: str, timeout_seconds: float) -> None:
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds

    async def fetch(
        self,
        *,
        amount: int,
        category: str | None = None,
        difficulty: str | None = None,
    ) -> list[RawTriviaQuestion]:
        params = build_query_params(amount=amount, category=category, difficulty=difficulty)
        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                response = await client.get(self._base_url, params=params)
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "trivia_content_fetch_failed",
                url=self._base_url,
                amount=amount,
                exc_info=exc,
            )
            raise ContentUnavailableError("trivia provider request failed") from exc

        return parse_response(payload)
