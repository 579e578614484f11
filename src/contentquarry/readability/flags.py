"""
Strictness flags and the retry state machine.

Every parse starts in ``RetryState.STRICT`` with all heuristics enabled. When
an attempt produces too little text the next state disables one more flag, in
a fixed order, until the relaxed state has been tried.
"""

from __future__ import annotations

import enum
from typing import Dict, Optional


class StrictnessFlags(enum.Flag):
    STRIP_UNLIKELYS = 1
    WEIGHT_CLASSES = 2
    CLEAN_CONDITIONALLY = 4

    ALL = STRIP_UNLIKELYS | WEIGHT_CLASSES | CLEAN_CONDITIONALLY
    NONE = 0


class RetryState(enum.Enum):
    STRICT = "strict"
    LENIENT_CLEANING = "lenient_cleaning"
    UNWEIGHTED = "unweighted"
    RELAXED = "relaxed"

    @property
    def flags(self) -> StrictnessFlags:
        return _STATE_FLAGS[self]


_STATE_FLAGS: Dict[RetryState, StrictnessFlags] = {
    RetryState.STRICT: StrictnessFlags.ALL,
    RetryState.LENIENT_CLEANING: StrictnessFlags.STRIP_UNLIKELYS | StrictnessFlags.WEIGHT_CLASSES,
    RetryState.UNWEIGHTED: StrictnessFlags.STRIP_UNLIKELYS,
    RetryState.RELAXED: StrictnessFlags.NONE,
}

_TRANSITIONS: Dict[RetryState, Optional[RetryState]] = {
    RetryState.STRICT: RetryState.LENIENT_CLEANING,
    RetryState.LENIENT_CLEANING: RetryState.UNWEIGHTED,
    RetryState.UNWEIGHTED: RetryState.RELAXED,
    RetryState.RELAXED: None,
}

MAX_ATTEMPTS = len(_TRANSITIONS)


def next_state(state: RetryState) -> Optional[RetryState]:
    """Return the state to try after ``state`` failed, or ``None`` when exhausted."""
    return _TRANSITIONS[state]
