"""Progressive-overload policy.

Given the weight last lifted for an exercise and the reps-in-reserve the user
reported, suggest the weight for the next session.
"""

from collections.abc import Iterable

from app.schemas.workouts import SessionSet

BIG_INCREMENT_KG = 5.0
SMALL_INCREMENT_KG = 2.5

# rir at or above this earns the big jump
EASY_RIR = 4
# rir below this keeps the weight
FAILURE_RIR = 1


def next_weight(last_completed_weight: float, rir: float) -> float:
    """Next planned weight.

    >>> next_weight(100, 5)
    105.0
    >>> next_weight(100, 2)
    102.5
    >>> next_weight(100, 0)
    100
    """
    if rir >= EASY_RIR:
        return last_completed_weight + BIG_INCREMENT_KG
    if rir >= FAILURE_RIR:
        return last_completed_weight + SMALL_INCREMENT_KG
    return last_completed_weight


def last_logged_weight(sets: Iterable[SessionSet]) -> float | None:
    """Weight of the last set carrying a completed or planned weight.

    Scans from the end; within a set the completed weight wins over the
    planned one.
    """
    for s in reversed(list(sets)):
        weight = s.logged_weight()
        if weight is not None:
            return weight
    return None
