from __future__ import annotations

from typing import Protocol

import structlog

from trivia_master.game.questions.types import QuestionView
from trivia_master.game.scoring.rules import HINT_PENALTY, MAX_HINTS, MAX_SKIPS, SKIP_PENALTY

logger = structlog.get_logger("trivia_master.game.presentation")

OPTION_LABELS = "ABCD"


class QuestionPresenter(Protocol):
    def render_question(self, view: QuestionView) -> str: ...


def option_lines(options: tuple[str, ...]) -> list[str]:
    return [f"{OPTION_LABELS[index]}. {option}" for index, option in enumerate(options)]


class PlainQuestionPresenter:
    def render_question(self, view: QuestionView) -> str:
        header = f"Question {view.index} | {view.category} | {view.difficulty.capitalize()}"
        lines = [header, "", view.question, *option_lines(view.options), "", "Your answer:"]
        return "\n".join(lines)


_PLAIN_PRESENTER = PlainQuestionPresenter()


def present_question(view: QuestionView, presenter: QuestionPresenter | None = None) -> str:
    if presenter is None:
        return _PLAIN_PRESENTER.render_question(view)
    try:
        text = presenter.render_question(view)
    except Exception:
        logger.exception("trivia_presenter_failed", question_index=view.index)
        return _PLAIN_PRESENTER.render_question(view)
    if not text or not text.strip():
        logger.warning("trivia_presenter_empty", question_index=view.index)
        return _PLAIN_PRESENTER.render_question(view)
    return text


def welcome_message(total_questions: int) -> str:
    return (
        f"Welcome to Daily Trivia! You have {total_questions} questions to answer. "
        f"Rules: {MAX_HINTS} hints (50/50, -{HINT_PENALTY} points each), "
        f"{MAX_SKIPS} skips (-{SKIP_PENALTY} point each, resets your streak), "
        "streak bonuses every 3 correct answers in a row. "
        "Answer with A/B/C/D or the full answer text. Good luck!"
    )


def correct_feedback(*, points_gained: int, bonus: int, streak: int) -> str:
    message = f"Correct! +{points_gained} points."
    if bonus > 0:
        message += f" Streak bonus: +{bonus}!"
    return f"{message} Current streak: {streak}."


def incorrect_feedback(*, correct_answer: str) -> str:
    return f"Incorrect. The correct answer was: {correct_answer}"


def final_score_line(*, score: int, max_score: int) -> str:
    return f"Game Completed! Final Score: {score}/{max_score}"
