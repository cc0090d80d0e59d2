from __future__ import annotations

import math

BASE_POINTS = 10
MAX_POINTS_PER_QUESTION = BASE_POINTS
DIFFICULTY_MULTIPLIERS: dict[str, float] = {
    "easy": 1,
    "medium": 1.5,
    "hard": 2,
}
DEFAULT_DIFFICULTY_MULTIPLIER = 1
STREAK_BONUS_EVERY = 3
STREAK_BONUS_POINTS = 2
HINT_PENALTY = 2
SKIP_PENALTY = 1
MAX_HINTS = 3
MAX_SKIPS = 2


def round_half_up(value: float) -> int:
    """Rounds .5 away from zero for non-negative values, unlike the built-in round()."""
    return int(math.floor(value + 0.5))


def difficulty_multiplier(difficulty: str) -> float:
    return DIFFICULTY_MULTIPLIERS.get(difficulty, DEFAULT_DIFFICULTY_MULTIPLIER)


def difficulty_points(difficulty: str) -> int:
    return round_half_up(BASE_POINTS * difficulty_multiplier(difficulty))


def streak_bonus(streak: int) -> int:
    if streak < STREAK_BONUS_EVERY:
        return 0
    return (streak // STREAK_BONUS_EVERY) * STREAK_BONUS_POINTS


def points_for_correct_answer(difficulty: str, streak: int) -> int:
    """`streak` is the value after the current answer has been counted."""
    return difficulty_points(difficulty) + streak_bonus(streak)


def hint_penalty() -> int:
    return HINT_PENALTY


def skip_penalty() -> int:
    return SKIP_PENALTY


def apply_penalty(score: int, penalty: int) -> int:
    return max(0, score - penalty)


def max_possible_score(question_count: int) -> int:
    return question_count * MAX_POINTS_PER_QUESTION
