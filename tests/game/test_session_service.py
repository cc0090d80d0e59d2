from __future__ import annotations

import asyncio
import random

import pytest

from tests.game.trivia_fixtures import (
    NOW_UTC,
    FakeQuestionSource,
    _easy_questions,
    _letter_for,
    _question,
    _raw_record,
    _service_with_session,
    _wrong_option,
)
from trivia_master.game.questions.loader import QuestionSetLoader
from trivia_master.game.sessions.errors import (
    ContentUnavailableError,
    GameSessionError,
    InvalidQuestionCountError,
    NoActiveSessionError,
    NoCurrentQuestionError,
)
from trivia_master.game.sessions.service import GameSessionService
from trivia_master.game.sessions.store import SessionStore


def _service_with_source(source: FakeQuestionSource) -> tuple[GameSessionService, SessionStore]:
    store = SessionStore()
    loader = QuestionSetLoader(source, rng=random.Random(3))
    return GameSessionService(store=store, loader=loader, rng=random.Random(5)), store


@pytest.mark.asyncio
async def test_start_game_creates_fresh_session_and_returns_first_question() -> None:
    source = FakeQuestionSource([_raw_record(1), _raw_record(2)])
    service, store = _service_with_source(source)

    result = await service.start_game(player_id="p1", question_count=2, now_utc=NOW_UTC)

    assert result.total_questions == 2
    assert result.question.index == 1
    assert result.question.question == "Question 1?"
    assert len(result.question.options) == 4
    assert "2 questions" in result.message
    assert "A. " in result.presentation
    assert result.presentation.endswith("Your answer:")

    session = store.get("p1")
    assert session is not None
    assert (session.score, session.streak, session.current_index) == (0, 0, 0)
    assert (session.hints_used, session.skips_used) == (0, 0)
    assert session.last_played == NOW_UTC.date()


@pytest.mark.asyncio
async def test_start_game_passes_filters_to_content_source() -> None:
    source = FakeQuestionSource([_raw_record(1, difficulty="hard")])
    service, _ = _service_with_source(source)

    await service.start_game(
        player_id="p1",
        question_count=1,
        category="23",
        difficulty="hard",
        now_utc=NOW_UTC,
    )

    assert source.calls == [{"amount": 1, "category": "23", "difficulty": "hard"}]


@pytest.mark.asyncio
async def test_start_game_replaces_previous_session_for_player() -> None:
    source = FakeQuestionSource([_raw_record(1), _raw_record(2)])
    service, store = _service_with_source(source)
    await service.start_game(player_id="p1", question_count=2, now_utc=NOW_UTC)
    await service.skip_question(player_id="p1")

    await service.start_game(player_id="p1", question_count=2, now_utc=NOW_UTC)

    session = store.get("p1")
    assert session is not None
    assert (session.current_index, session.skips_used, session.score) == (0, 0, 0)
    assert len(store) == 1


@pytest.mark.asyncio
async def test_start_game_failure_creates_no_session() -> None:
    service, store = _service_with_source(FakeQuestionSource([]))

    with pytest.raises(ContentUnavailableError):
        await service.start_game(player_id="p1", question_count=10, now_utc=NOW_UTC)

    assert "p1" not in store


@pytest.mark.asyncio
async def test_start_game_failure_keeps_existing_session_untouched() -> None:
    _, store, session = _service_with_session(_easy_questions(2), score=7)
    failing_service = GameSessionService(
        store=store,
        loader=QuestionSetLoader(FakeQuestionSource(error=ContentUnavailableError("down"))),
    )

    with pytest.raises(ContentUnavailableError):
        await failing_service.start_game(player_id="p1", question_count=2, now_utc=NOW_UTC)

    assert store.get("p1") is session
    assert session.score == 7


@pytest.mark.asyncio
async def test_two_question_game_scenario() -> None:
    source = FakeQuestionSource([_raw_record(1, difficulty="easy"), _raw_record(2, difficulty="easy")])
    service, store = _service_with_source(source)
    await service.start_game(player_id="p1", question_count=2, now_utc=NOW_UTC)
    session = store.get("p1")
    assert session is not None
    first, second = (state.question for state in session.questions)

    first_result = await service.submit_answer(player_id="p1", answer=first.correct_answer)

    assert first_result.correct is True
    assert (first_result.score, first_result.streak) == (10, 1)
    assert first_result.completed is False
    assert first_result.next_question is not None
    assert first_result.next_question.index == 2

    second_result = await service.submit_answer(player_id="p1", answer=_wrong_option(second))

    assert second_result.correct is False
    assert second_result.streak == 0
    assert second_result.completed is True
    assert second_result.next_question is None
    assert second_result.correct_answer == second.correct_answer
    assert "10/20" in second_result.message
    assert session.is_completed is True


@pytest.mark.asyncio
async def test_letter_answer_is_equivalent_to_option_text() -> None:
    question = _question(options=("Oslo", "Lima", "Rome", "Kyiv"), correct_answer="Rome")
    service, _, _ = _service_with_session((question, question))

    by_letter = await service.submit_answer(player_id="p1", answer="  c ")
    by_text = await service.submit_answer(player_id="p1", answer="rome")

    assert by_letter.correct is True
    assert by_text.correct is True


@pytest.mark.asyncio
async def test_third_consecutive_correct_answer_earns_streak_bonus() -> None:
    questions = _easy_questions(4)
    service, _, session = _service_with_session(questions)

    results = [
        await service.submit_answer(player_id="p1", answer=question.correct_answer)
        for question in questions[:3]
    ]

    assert [result.points_gained for result in results] == [10, 10, 12]
    assert [result.streak_bonus for result in results] == [0, 0, 2]
    assert "Streak bonus: +2" in results[2].message
    assert "Streak bonus" not in results[1].message
    assert session.score == 32
    assert session.streak == 3


@pytest.mark.asyncio
async def test_hard_question_with_streak_three_scores_twenty_two() -> None:
    service, _, session = _service_with_session((_question("q-1", difficulty="hard"),))
    session.streak = 2

    result = await service.submit_answer(player_id="p1", answer="B")

    assert result.points_gained == 22
    assert result.streak == 3
    assert result.score == 22


@pytest.mark.asyncio
async def test_incorrect_answer_resets_streak_and_records_raw_answer() -> None:
    questions = _easy_questions(3)
    service, _, session = _service_with_session(questions)
    await service.submit_answer(player_id="p1", answer="Rome")
    await service.submit_answer(player_id="p1", answer="Rome")

    result = await service.submit_answer(player_id="p1", answer=" paris ")

    assert result.correct is False
    assert result.streak == 0
    assert result.score == 20
    assert "The correct answer was: Rome" in result.message
    assert session.questions[2].answered is True
    assert session.questions[2].user_answer == " paris "


@pytest.mark.asyncio
async def test_operations_on_unknown_player_raise_no_active_session() -> None:
    service, _ = _service_with_source(FakeQuestionSource())

    with pytest.raises(NoActiveSessionError):
        await service.submit_answer(player_id="ghost", answer="A")
    with pytest.raises(NoActiveSessionError):
        await service.request_hint(player_id="ghost")
    with pytest.raises(NoActiveSessionError):
        await service.skip_question(player_id="ghost")


@pytest.mark.asyncio
async def test_completed_game_blocks_answer_hint_and_skip() -> None:
    service, _, session = _service_with_session(_easy_questions(1), score=5)
    await service.submit_answer(player_id="p1", answer="Rome")
    assert session.is_completed is True

    with pytest.raises(NoActiveSessionError):
        await service.submit_answer(player_id="p1", answer="Rome")
    with pytest.raises(NoActiveSessionError):
        await service.request_hint(player_id="p1")
    with pytest.raises(NoActiveSessionError):
        await service.skip_question(player_id="p1")
    assert session.score == 15
    assert session.current_index == 1


@pytest.mark.asyncio
async def test_corrupted_index_raises_no_current_question_without_mutation() -> None:
    service, _, session = _service_with_session(_easy_questions(2), score=4)
    session.current_index = 5

    with pytest.raises(NoCurrentQuestionError):
        await service.submit_answer(player_id="p1", answer="A")
    with pytest.raises(NoCurrentQuestionError):
        await service.request_hint(player_id="p1")
    with pytest.raises(NoCurrentQuestionError):
        await service.skip_question(player_id="p1")
    assert (session.score, session.current_index, session.skips_used) == (4, 5, 0)


@pytest.mark.asyncio
async def test_hint_keeps_correct_answer_and_one_wrong_option() -> None:
    question = _question()
    service, _, session = _service_with_session((question, _question("q-2")), score=10)
    session.streak = 2

    result = await service.request_hint(player_id="p1")

    assert result.success is True
    assert result.penalty == 2
    assert result.hints_used == 1
    assert len(result.remaining_options) == 2
    assert question.correct_answer in result.remaining_options
    assert len(set(result.remaining_options)) == 2
    assert set(result.remaining_options) <= set(question.options)
    assert session.score == 8
    assert session.streak == 2
    assert session.current_index == 0
    assert session.questions[0].answered is False


@pytest.mark.asyncio
async def test_fourth_hint_is_refused_without_state_change() -> None:
    service, _, session = _service_with_session(_easy_questions(2), score=10)

    results = [await service.request_hint(player_id="p1") for _ in range(4)]

    assert [result.success for result in results] == [True, True, True, False]
    assert results[3].hints_used == 3
    assert results[3].penalty == 0
    assert results[3].remaining_options == session.questions[0].question.options
    assert session.hints_used == 3
    assert session.score == 10 - 3 * 2


@pytest.mark.asyncio
async def test_hint_penalty_clamps_score_at_zero() -> None:
    service, _, session = _service_with_session(_easy_questions(2), score=1)

    await service.request_hint(player_id="p1")
    await service.request_hint(player_id="p1")

    assert session.score == 0


@pytest.mark.asyncio
async def test_skip_advances_resets_streak_and_leaves_question_unanswered() -> None:
    service, _, session = _service_with_session(_easy_questions(3), score=10)
    session.streak = 4

    result = await service.skip_question(player_id="p1")

    assert result.success is True
    assert result.penalty == 1
    assert result.skips_used == 1
    assert result.completed is False
    assert result.next_question is not None
    assert result.next_question.index == 2
    assert session.score == 9
    assert session.streak == 0
    assert session.current_index == 1
    assert session.questions[0].answered is False


@pytest.mark.asyncio
async def test_third_skip_is_refused_without_state_change() -> None:
    service, _, session = _service_with_session(_easy_questions(5), score=10)

    results = [await service.skip_question(player_id="p1") for _ in range(3)]

    assert [result.success for result in results] == [True, True, False]
    assert results[2].skips_used == 2
    assert results[2].penalty == 0
    assert results[2].next_question is None
    assert session.current_index == 2
    assert session.score == 8


@pytest.mark.asyncio
async def test_skipping_last_question_completes_game() -> None:
    service, _, session = _service_with_session(_easy_questions(1), score=0)

    result = await service.skip_question(player_id="p1")

    assert result.success is True
    assert result.completed is True
    assert result.next_question is None
    assert "Final Score: 0/10" in result.message
    assert session.score == 0
    assert session.is_completed is True


@pytest.mark.asyncio
async def test_index_advances_only_on_answer_and_skip() -> None:
    service, _, session = _service_with_session(_easy_questions(4), score=20)

    await service.request_hint(player_id="p1")
    assert session.current_index == 0
    await service.submit_answer(player_id="p1", answer="A")
    assert session.current_index == 1
    await service.skip_question(player_id="p1")
    assert session.current_index == 2
    await service.request_hint(player_id="p1")
    assert session.current_index == 2


@pytest.mark.asyncio
async def test_concurrent_answers_for_same_player_are_serialized() -> None:
    questions = _easy_questions(2)
    service, _, session = _service_with_session(questions)

    results = await asyncio.gather(
        service.submit_answer(player_id="p1", answer="Rome"),
        service.submit_answer(player_id="p1", answer="Rome"),
    )

    assert sorted(result.score for result in results) == [10, 20]
    assert session.current_index == 2
    assert all(state.answered for state in session.questions)


@pytest.mark.asyncio
async def test_letter_answers_use_each_question_own_options() -> None:
    first = _question("q-1", options=("Rome", "Paris", "Oslo", "Lima"), correct_answer="Rome")
    second = _question("q-2", options=("Paris", "Oslo", "Lima", "Rome"), correct_answer="Rome")
    service, _, _ = _service_with_session((first, second))

    first_result = await service.submit_answer(player_id="p1", answer=_letter_for(first, "Rome"))
    second_result = await service.submit_answer(player_id="p1", answer=_letter_for(second, "Rome"))

    assert first_result.correct is True
    assert second_result.correct is True


@pytest.mark.asyncio
async def test_failed_calls_for_unknown_players_leave_no_lock_behind() -> None:
    service, store = _service_with_source(FakeQuestionSource())

    for index in range(50):
        player_id = f"ghost-{index}"
        with pytest.raises(NoActiveSessionError):
            await service.request_hint(player_id=player_id)
        with pytest.raises(NoActiveSessionError):
            await service.submit_answer(player_id=player_id, answer="A")
        with pytest.raises(NoActiveSessionError):
            await service.skip_question(player_id=player_id)

    assert len(store) == 0
    assert store.lock_count == 0


@pytest.mark.asyncio
async def test_failed_start_game_leaves_no_lock_behind() -> None:
    service, store = _service_with_source(FakeQuestionSource([]))

    with pytest.raises(ContentUnavailableError):
        await service.start_game(player_id="p1", question_count=3, now_utc=NOW_UTC)

    assert store.lock_count == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("question_count", [0, -1])
async def test_start_game_rejects_non_positive_question_count(question_count: int) -> None:
    source = FakeQuestionSource([_raw_record(1)])
    service, store = _service_with_source(source)

    with pytest.raises(InvalidQuestionCountError) as exc_info:
        await service.start_game(player_id="p1", question_count=question_count, now_utc=NOW_UTC)

    assert isinstance(exc_info.value, GameSessionError)
    assert exc_info.value.code == "E_INVALID_QUESTION_COUNT"
    assert source.calls == []
    assert "p1" not in store
    assert store.lock_count == 0
