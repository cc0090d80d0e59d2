from __future__ import annotations

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, HTTPException, Request

from trivia_master.core.config import Settings
from trivia_master.game.sessions.errors import (
    ContentUnavailableError,
    InvalidQuestionCountError,
    NoActiveSessionError,
    NoCurrentQuestionError,
)
from trivia_master.game.sessions.service import GameSessionService
from trivia_master.game.stats.service import GameStatsService

from .game_models import (
    AnswerRequest,
    AnswerResponse,
    HintResponse,
    LeaderboardEntryResponse,
    LeaderboardResponse,
    QuestionViewResponse,
    SkipResponse,
    StartGameRequest,
    StartGameResponse,
    StatsResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["games"])


def _settings(request: Request) -> Settings:
    return request.app.state.settings


def _session_service(request: Request) -> GameSessionService:
    return request.app.state.session_service


def _stats_service(request: Request) -> GameStatsService:
    return request.app.state.stats_service


def _no_active_session(exc: NoActiveSessionError) -> HTTPException:
    return HTTPException(status_code=404, detail={"code": exc.code})


def _no_current_question(exc: NoCurrentQuestionError, *, player_id: str) -> HTTPException:
    logger.error("trivia_session_invariant_broken", player_id=player_id, error=str(exc))
    return HTTPException(status_code=409, detail={"code": exc.code})


@router.post("/games", response_model=StartGameResponse)
async def start_game(payload: StartGameRequest, request: Request) -> StartGameResponse:
    question_count = payload.question_count or _settings(request).default_question_count
    try:
        result = await _session_service(request).start_game(
            player_id=payload.player_id,
            question_count=question_count,
            category=payload.category,
            difficulty=payload.difficulty,
            now_utc=datetime.now(timezone.utc),
        )
    except ContentUnavailableError as exc:
        raise HTTPException(status_code=503, detail={"code": exc.code}) from exc
    except InvalidQuestionCountError as exc:
        raise HTTPException(status_code=422, detail={"code": exc.code}) from exc

    current_question = QuestionViewResponse.from_view(result.question)
    assert current_question is not None
    return StartGameResponse(
        message=result.message,
        presentation=result.presentation,
        current_question=current_question,
        total_questions=result.total_questions,
    )


@router.post("/games/{player_id}/answers", response_model=AnswerResponse)
async def submit_answer(player_id: str, payload: AnswerRequest, request: Request) -> AnswerResponse:
    try:
        result = await _session_service(request).submit_answer(player_id=player_id, answer=payload.answer)
    except NoActiveSessionError as exc:
        raise _no_active_session(exc) from exc
    except NoCurrentQuestionError as exc:
        raise _no_current_question(exc, player_id=player_id) from exc

    return AnswerResponse(
        correct=result.correct,
        score=result.score,
        message=result.message,
        correct_answer=result.correct_answer,
        streak=result.streak,
        next_question=QuestionViewResponse.from_view(result.next_question),
        game_completed=result.completed,
    )


@router.post("/games/{player_id}/hints", response_model=HintResponse)
async def request_hint(player_id: str, request: Request) -> HintResponse:
    try:
        result = await _session_service(request).request_hint(player_id=player_id)
    except NoActiveSessionError as exc:
        raise _no_active_session(exc) from exc
    except NoCurrentQuestionError as exc:
        raise _no_current_question(exc, player_id=player_id) from exc

    return HintResponse(
        success=result.success,
        message=result.message,
        remaining_options=list(result.remaining_options),
        hints_used=result.hints_used,
        score_penalty=result.penalty,
    )


@router.post("/games/{player_id}/skips", response_model=SkipResponse)
async def skip_question(player_id: str, request: Request) -> SkipResponse:
    try:
        result = await _session_service(request).skip_question(player_id=player_id)
    except NoActiveSessionError as exc:
        raise _no_active_session(exc) from exc
    except NoCurrentQuestionError as exc:
        raise _no_current_question(exc, player_id=player_id) from exc

    return SkipResponse(
        success=result.success,
        message=result.message,
        next_question=QuestionViewResponse.from_view(result.next_question),
        skips_used=result.skips_used,
        score_penalty=result.penalty,
        game_completed=result.completed,
    )


@router.get("/games/{player_id}/stats", response_model=StatsResponse)
async def get_stats(player_id: str, request: Request) -> StatsResponse:
    try:
        stats = _stats_service(request).get_stats(player_id=player_id)
    except NoActiveSessionError as exc:
        raise _no_active_session(exc) from exc

    return StatsResponse(
        player_id=stats.player_id,
        score=stats.score,
        current_question=stats.position,
        total_questions=stats.total,
        streak=stats.streak,
        hints_used=stats.hints_used,
        skips_used=stats.skips_used,
        correct_answers=stats.correct_answers,
        accuracy=stats.accuracy,
    )


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(request: Request) -> LeaderboardResponse:
    leaderboard = _stats_service(request).get_leaderboard(limit=_settings(request).leaderboard_limit)
    return LeaderboardResponse(
        leaderboard=[
            LeaderboardEntryResponse(
                player_id=entry.player_id,
                score=entry.score,
                streak=entry.streak,
                questions_answered=entry.questions_answered,
            )
            for entry in leaderboard.entries
        ],
        total_players=leaderboard.total_players,
    )
