from __future__ import annotations

import asyncio
import random
from datetime import datetime

import structlog

from trivia_master.game.presentation import (
    QuestionPresenter,
    correct_feedback,
    final_score_line,
    incorrect_feedback,
    present_question,
    welcome_message,
)
from trivia_master.game.questions.loader import QuestionSetLoader
from trivia_master.game.scoring.rules import (
    MAX_HINTS,
    MAX_SKIPS,
    apply_penalty,
    hint_penalty,
    max_possible_score,
    points_for_correct_answer,
    skip_penalty,
    streak_bonus,
)
from trivia_master.game.sessions.answers import is_answer_correct
from trivia_master.game.sessions.errors import InvalidQuestionCountError, NoActiveSessionError
from trivia_master.game.sessions.models import GameSession
from trivia_master.game.sessions.store import SessionStore
from trivia_master.game.sessions.types import AnswerResult, HintResult, SkipResult, StartGameResult

logger = structlog.get_logger("trivia_master.game.sessions.service")

DEFAULT_QUESTION_COUNT = 10


class GameSessionService:
    def __init__(
        self,
        *,
        store: SessionStore,
        loader: QuestionSetLoader,
        presenter: QuestionPresenter | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._loader = loader
        self._presenter = presenter
        self._rng = rng or random.Random()

    def _player_lock(self, player_id: str) -> asyncio.Lock:
        lock = self._store.existing_lock(player_id)
        if lock is None:
            raise NoActiveSessionError(f"no game found for player {player_id!r}")
        return lock

    def _active_session(self, player_id: str) -> GameSession:
        session = self._store.get(player_id)
        if session is None:
            raise NoActiveSessionError(f"no game found for player {player_id!r}")
        if session.is_completed:
            raise NoActiveSessionError(f"game for player {player_id!r} is already completed")
        return session

    async def start_game(
        self,
        *,
        player_id: str,
        now_utc: datetime,
        question_count: int = DEFAULT_QUESTION_COUNT,
        category: str | None = None,
        difficulty: str | None = None,
    ) -> StartGameResult:
        if question_count < 1:
            raise InvalidQuestionCountError(f"question count must be positive, got {question_count}")
        questions = await self._loader.load(
            amount=question_count,
            category=category,
            difficulty=difficulty,
        )
        session = GameSession.start(
            player_id=player_id,
            questions=questions,
            last_played=now_utc.date(),
        )
        async with self._store.lock(player_id):
            self._store.put(session)

        first_question = session.current_view()
        assert first_question is not None
        logger.info(
            "trivia_game_started",
            player_id=player_id,
            total_questions=session.total_questions,
            category=category,
            difficulty=difficulty,
        )
        return StartGameResult(
            question=first_question,
            total_questions=session.total_questions,
            message=welcome_message(session.total_questions),
            presentation=present_question(first_question, self._presenter),
        )

    async def submit_answer(self, *, player_id: str, answer: str) -> AnswerResult:
        async with self._player_lock(player_id):
            session = self._active_session(player_id)
            state = session.current_state()
            question = state.question
            is_correct = is_answer_correct(question, answer)

            if is_correct:
                new_streak = session.streak + 1
                bonus = streak_bonus(new_streak)
                points_gained = points_for_correct_answer(question.difficulty, new_streak)
                message = correct_feedback(points_gained=points_gained, bonus=bonus, streak=new_streak)
            else:
                new_streak = 0
                bonus = 0
                points_gained = 0
                message = incorrect_feedback(correct_answer=question.correct_answer)

            state.answered = True
            state.user_answer = answer
            session.streak = new_streak
            session.score += points_gained
            session.current_index += 1

            completed = session.is_completed
            if completed:
                max_score = max_possible_score(session.total_questions)
                message += "\n\n" + final_score_line(score=session.score, max_score=max_score)

            logger.info(
                "trivia_answer_submitted",
                player_id=player_id,
                question_id=question.question_id,
                is_correct=is_correct,
                points_gained=points_gained,
                score=session.score,
                streak=session.streak,
                completed=completed,
            )
            return AnswerResult(
                correct=is_correct,
                score=session.score,
                message=message,
                correct_answer=question.correct_answer,
                streak=session.streak,
                completed=completed,
                next_question=session.current_view(),
                points_gained=points_gained,
                streak_bonus=bonus,
            )

    async def request_hint(self, *, player_id: str) -> HintResult:
        async with self._player_lock(player_id):
            session = self._active_session(player_id)
            question = session.current_state().question

            if session.hints_used >= MAX_HINTS:
                return HintResult(
                    success=False,
                    message="You have used all available hints for this game.",
                    remaining_options=question.options,
                    hints_used=session.hints_used,
                    penalty=0,
                )

            wrong_options = [option for option in question.options if option != question.correct_answer]
            remaining = [question.correct_answer, self._rng.choice(wrong_options)]
            self._rng.shuffle(remaining)
            penalty = hint_penalty()

            session.score = apply_penalty(session.score, penalty)
            session.hints_used += 1

            logger.info(
                "trivia_hint_used",
                player_id=player_id,
                question_id=question.question_id,
                hints_used=session.hints_used,
                score=session.score,
            )
            return HintResult(
                success=True,
                message=f"Hint used! Two options eliminated. (-{penalty} points)",
                remaining_options=tuple(remaining),
                hints_used=session.hints_used,
                penalty=penalty,
            )

    async def skip_question(self, *, player_id: str) -> SkipResult:
        async with self._player_lock(player_id):
            session = self._active_session(player_id)
            question = session.current_state().question

            if session.skips_used >= MAX_SKIPS:
                return SkipResult(
                    success=False,
                    message="You have used all available skips for this game.",
                    skips_used=session.skips_used,
                    penalty=0,
                )

            penalty = skip_penalty()
            session.score = apply_penalty(session.score, penalty)
            session.skips_used += 1
            session.streak = 0
            session.current_index += 1

            completed = session.is_completed
            if completed:
                max_score = max_possible_score(session.total_questions)
                message = "Question skipped. " + final_score_line(score=session.score, max_score=max_score)
            else:
                message = f"Question skipped. (-{penalty} points)"

            logger.info(
                "trivia_question_skipped",
                player_id=player_id,
                question_id=question.question_id,
                skips_used=session.skips_used,
                score=session.score,
                completed=completed,
            )
            return SkipResult(
                success=True,
                message=message,
                skips_used=session.skips_used,
                penalty=penalty,
                completed=completed,
                next_question=session.current_view(),
            )
