from __future__ import annotations

import html
import random
from typing import Sequence

import structlog

from trivia_master.game.questions.opentdb import QuestionSource
from trivia_master.game.questions.types import OPTION_COUNT, RawTriviaQuestion, TriviaQuestion
from trivia_master.game.sessions.errors import ContentUnavailableError, InvalidQuestionCountError

logger = structlog.get_logger("trivia_master.game.questions.loader")


def decode_text(value: str) -> str:
    return html.unescape(value).strip()


def build_question(raw: RawTriviaQuestion, *, position: int, rng: random.Random) -> TriviaQuestion:
    correct_answer = decode_text(raw.correct_answer)
    options = [decode_text(answer) for answer in raw.incorrect_answers]
    options.append(correct_answer)
    if len(options) != OPTION_COUNT or len(set(options)) != OPTION_COUNT:
        raise ContentUnavailableError(f"question {position} does not have {OPTION_COUNT} distinct options")
    rng.shuffle(options)

    return TriviaQuestion(
        question_id=f"q-{position}",
        category=decode_text(raw.category) or "General",
        difficulty=raw.difficulty.strip().lower() or "medium",
        text=decode_text(raw.question),
        options=tuple(options),
        correct_answer=correct_answer,
    )


def build_question_set(
    records: Sequence[RawTriviaQuestion],
    *,
    rng: random.Random,
) -> tuple[TriviaQuestion, ...]:
    return tuple(
        build_question(raw, position=position, rng=rng)
        for position, raw in enumerate(records, start=1)
    )


class QuestionSetLoader:
    def __init__(self, source: QuestionSource, *, rng: random.Random | None = None) -> None:
        self._source = source
        self._rng = rng or random.Random()

    async def load(
        self,
        *,
        amount: int,
        category: str | None = None,
        difficulty: str | None = None,
    ) -> tuple[TriviaQuestion, ...]:
        if amount < 1:
            raise InvalidQuestionCountError(f"question count must be positive, got {amount}")

        records = await self._source.fetch(amount=amount, category=category, difficulty=difficulty)
        if len(records) < amount:
            logger.warning(
                "trivia_content_short",
                requested=amount,
                received=len(records),
                category=category,
                difficulty=difficulty,
            )
            raise ContentUnavailableError(f"requested {amount} questions, received {len(records)}")

        return build_question_set(records[:amount], rng=self._rng)
