"""
Unit tests for strictness flags and the retry state machine.
"""

from contentquarry.readability import MAX_ATTEMPTS, RetryState, StrictnessFlags, next_state


def _walk(state=RetryState.STRICT):
    states = []
    while state is not None:
        states.append(state)
        state = next_state(state)
    return states


class TestRetryStateMachine:
    """Test cases for the retry transitions."""

    def test_transition_order(self):
        assert _walk() == [
            RetryState.STRICT,
            RetryState.LENIENT_CLEANING,
            RetryState.UNWEIGHTED,
            RetryState.RELAXED,
        ]

    def test_attempts_are_bounded(self):
        assert len(_walk()) == MAX_ATTEMPTS == 4
        assert next_state(RetryState.RELAXED) is None

    def test_flags_per_state(self):
        assert RetryState.STRICT.flags == StrictnessFlags.ALL
        assert RetryState.LENIENT_CLEANING.flags == StrictnessFlags.STRIP_UNLIKELYS | StrictnessFlags.WEIGHT_CLASSES
        assert RetryState.UNWEIGHTED.flags == StrictnessFlags.STRIP_UNLIKELYS
        assert RetryState.RELAXED.flags == StrictnessFlags.NONE

    def test_each_step_disables_exactly_one_flag(self):
        states = _walk()
        for current, following in zip(states, states[1:]):
            assert following.flags & current.flags == following.flags
            dropped = current.flags & ~following.flags
            assert dropped in (
                StrictnessFlags.CLEAN_CONDITIONALLY,
                StrictnessFlags.WEIGHT_CLASSES,
                StrictnessFlags.STRIP_UNLIKELYS,
            )

    def test_disable_order(self):
        states = _walk()
        dropped = [current.flags & ~following.flags for current, following in zip(states, states[1:])]
        assert dropped == [
            StrictnessFlags.CLEAN_CONDITIONALLY,
            StrictnessFlags.WEIGHT_CLASSES,
            StrictnessFlags.STRIP_UNLIKELYS,
        ]

    def test_flag_membership(self):
        assert StrictnessFlags.WEIGHT_CLASSES & StrictnessFlags.ALL
        assert not StrictnessFlags.WEIGHT_CLASSES & StrictnessFlags.NONE
