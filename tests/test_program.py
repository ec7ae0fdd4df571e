"""State machine tests: deferred transitions and the pure reducer."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st
import pytest

from storyfeed.deferred import (
    Finished,
    InProgress,
    InvalidTransitionError,
    NotStarted,
    Resolved,
    Started,
    advance,
    is_settled,
)
from storyfeed.program import Dispatch, NoEffect, RunFetch, State, init, update
from storyfeed.result import Failure, Success

pytestmark = pytest.mark.unit

OK = Success([])
ERR = Failure("not found")


# =============================================================================
# Deferred values
# =============================================================================


def test_forward_steps_are_allowed() -> None:
    assert advance(NotStarted(), InProgress()) == InProgress()
    assert advance(InProgress(), Resolved(OK)) == Resolved(OK)


@pytest.mark.parametrize(
    ("current", "nxt"),
    [
        (NotStarted(), Resolved(OK)),
        (InProgress(), NotStarted()),
        (InProgress(), InProgress()),
        (Resolved(OK), InProgress()),
        (Resolved(OK), NotStarted()),
        (Resolved(OK), Resolved(ERR)),
    ],
)
def test_backward_or_skipping_steps_are_rejected(current, nxt) -> None:
    with pytest.raises(InvalidTransitionError) as exc:
        advance(current, nxt)

    assert exc.value.hint is not None


def test_only_resolved_is_settled() -> None:
    assert not is_settled(NotStarted())
    assert not is_settled(InProgress())
    assert is_settled(Resolved(OK))
    assert is_settled(Resolved(ERR))


# =============================================================================
# Reducer
# =============================================================================


def test_init_starts_not_started_and_dispatches_started() -> None:
    state, effect = init()

    assert state == State(NotStarted())
    assert effect == Dispatch(Started())


def test_started_moves_to_in_progress_and_requests_fetch() -> None:
    state, effect = update(State(), Started())

    assert state.stories == InProgress()
    assert effect == RunFetch()


@pytest.mark.parametrize("result", [OK, ERR])
def test_finished_resolves_with_result_and_stops(result) -> None:
    state, effect = update(State(InProgress()), Finished(result))

    assert state.stories == Resolved(result)
    assert effect == NoEffect()


def test_update_does_not_mutate_the_previous_state() -> None:
    before = State()

    after, _ = update(before, Started())

    assert before.stories == NotStarted()
    assert after is not before


@pytest.mark.parametrize(
    ("stories", "event"),
    [
        (NotStarted(), Finished(OK)),
        (InProgress(), Started()),
        (Resolved(OK), Started()),
        (Resolved(ERR), Finished(OK)),
    ],
)
def test_out_of_order_events_are_ignored(stories, event) -> None:
    state = State(stories)

    nxt, effect = update(state, event)

    assert nxt is state
    assert effect == NoEffect()


_events = st.lists(
    st.one_of(
        st.just(Started()),
        st.sampled_from([Finished(OK), Finished(ERR)]),
    ),
    max_size=12,
)


@given(events=_events)
@settings(max_examples=50, deadline=None, derandomize=True)
def test_resolved_is_never_left(events) -> None:
    """Property: once resolved, no event sequence reaches an earlier tag."""
    state, _ = init()
    resolved = None

    for event in events:
        state, _ = update(state, event)
        if resolved is not None:
            assert state.stories == resolved
        elif isinstance(state.stories, Resolved):
            resolved = state.stories


def test_full_lifecycle_from_init() -> None:
    state, effect = init()
    assert isinstance(effect, Dispatch)

    state, effect = update(state, effect.event)
    assert (state.stories, effect) == (InProgress(), RunFetch())

    state, effect = update(state, Finished(ERR))
    assert (state.stories, effect) == (Resolved(ERR), NoEffect())
