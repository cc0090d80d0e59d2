from __future__ import annotations

from dataclasses import dataclass

from trivia_master.game.scoring.rules import round_half_up
from trivia_master.game.sessions.answers import is_answer_correct
from trivia_master.game.sessions.errors import NoActiveSessionError
from trivia_master.game.sessions.models import GameSession
from trivia_master.game.sessions.store import SessionStore

LEADERBOARD_SIZE = 10


@dataclass(slots=True)
class PlayerStats:
    player_id: str
    score: int
    position: int
    total: int
    streak: int
    hints_used: int
    skips_used: int
    correct_answers: int
    accuracy: int


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    player_id: str
    score: int
    streak: int
    questions_answered: int


@dataclass(slots=True)
class Leaderboard:
    entries: list[LeaderboardEntry]
    total_players: int


def count_correct_answers(session: GameSession) -> int:
    # Each question is checked against its own option order.
    return sum(
        1
        for state in session.questions
        if state.answered
        and state.user_answer is not None
        and is_answer_correct(state.question, state.user_answer)
    )


def accuracy_percent(correct_answers: int, answered: int) -> int:
    if answered == 0:
        return 0
    return round_half_up(100 * correct_answers / answered)


class GameStatsService:
    """Read-only views over the session store."""

    def __init__(self, *, store: SessionStore) -> None:
        self._store = store

    def get_stats(self, *, player_id: str) -> PlayerStats:
        session = self._store.get(player_id)
        if session is None:
            raise NoActiveSessionError(f"no game found for player {player_id!r}")

        correct_answers = count_correct_answers(session)
        return PlayerStats(
            player_id=player_id,
            score=session.score,
            position=session.current_index + 1,
            total=session.total_questions,
            streak=session.streak,
            hints_used=session.hints_used,
            skips_used=session.skips_used,
            correct_answers=correct_answers,
            accuracy=accuracy_percent(correct_answers, session.questions_answered),
        )

    def get_leaderboard(self, *, limit: int = LEADERBOARD_SIZE) -> Leaderboard:
        sessions = self._store.values()
        entries = sorted(
            (
                LeaderboardEntry(
                    player_id=session.player_id,
                    score=session.score,
                    streak=session.streak,
                    questions_answered=session.questions_answered,
                )
                for session in sessions
            ),
            key=lambda entry: entry.score,
            reverse=True,
        )
        return Leaderboard(entries=entries[:limit], total_players=len(sessions))
