import pytest

from app.schemas.workouts import SessionSet
from app.services.progression import BIG_INCREMENT_KG, SMALL_INCREMENT_KG, last_logged_weight, next_weight


@pytest.mark.parametrize(
    "rir,expected",
    [
        (5, 105.0),
        (4, 105.0),
        (3.5, 102.5),
        (2, 102.5),
        (1, 102.5),
        (0.5, 100.0),
        (0, 100.0),
    ],
)
def test_next_weight_bands(rir, expected):
    assert next_weight(100, rir) == expected


def test_increments_are_fixed():
    assert BIG_INCREMENT_KG == 5.0
    assert SMALL_INCREMENT_KG == 2.5


def test_failure_keeps_weight_unchanged():
    assert next_weight(62.5, 0) == 62.5


class TestLastLoggedWeight:
    def test_prefers_completed_over_planned_on_same_set(self):
        sets = [
            SessionSet(reps=5, weight_kg=60),
            SessionSet(reps=5, weight_kg=60, done=True, completed_reps=5, completed_weight_kg=62.5),
        ]
        assert last_logged_weight(sets) == 62.5

    def test_scans_from_the_end(self):
        sets = [
            SessionSet(reps=5, weight_kg=50, done=True, completed_weight_kg=55),
            SessionSet(reps=5, weight_kg=70),
        ]
        # the later planned weight wins over an earlier completed one
        assert last_logged_weight(sets) == 70

    def test_skips_trailing_sets_without_weight(self):
        sets = [SessionSet(reps=5, weight_kg=40), SessionSet(reps=5), SessionSet(reps=5)]
        assert last_logged_weight(sets) == 40

    def test_none_when_nothing_weighed(self):
        assert last_logged_weight([SessionSet(reps=10), SessionSet(reps=10)]) is None
        assert last_logged_weight([]) is None
