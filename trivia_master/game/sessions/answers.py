from __future__ import annotations

import re

from trivia_master.game.questions.types import TriviaQuestion

_LETTER_ANSWER_RE = re.compile(r"^[A-D]$")


def normalize_answer(raw_answer: str) -> str:
    return raw_answer.strip().upper()


def option_for_letter(question: TriviaQuestion, letter: str) -> str | None:
    option_index = ord(letter) - ord("A")
    if option_index >= len(question.options):
        return None
    return question.options[option_index]


def is_answer_correct(question: TriviaQuestion, raw_answer: str) -> bool:
    """Accepts a letter A-D (by option position) or the literal answer text, case-insensitive."""
    normalized = normalize_answer(raw_answer)
    if _LETTER_ANSWER_RE.match(normalized):
        return option_for_letter(question, normalized) == question.correct_answer
    return normalized == question.correct_answer.upper()
