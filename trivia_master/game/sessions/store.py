from __future__ import annotations

import asyncio

from trivia_master.game.sessions.models import GameSession


class SessionStore:
    """Holds at most one session per player for the lifetime of the process.

    Mutating operations for a player must run under that player's lock; readers
    may use `get` and `values` without it. Locks exist only for players with a
    stored session.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, GameSession] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, player_id: str) -> asyncio.Lock:
        return self._locks.setdefault(player_id, asyncio.Lock())

    def existing_lock(self, player_id: str) -> asyncio.Lock | None:
        return self._locks.get(player_id)

    def get(self, player_id: str) -> GameSession | None:
        return self._sessions.get(player_id)

    def put(self, session: GameSession) -> None:
        self.lock(session.player_id)
        self._sessions[session.player_id] = session

    def values(self) -> tuple[GameSession, ...]:
        return tuple(self._sessions.values())

    @property
    def lock_count(self) -> int:
        return len(self._locks)

    def __contains__(self, player_id: object) -> bool:
        return player_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
