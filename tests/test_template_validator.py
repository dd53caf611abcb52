import pytest

from app.core.errors import ValidationFailed
from app.schemas.workouts import SetSpec, TemplateItem
from app.services.template_validator import validate_template

KNOWN = {1, 2, 3}


def item(exercise_id=1, order=1, reps=(8,), **kw):
    return TemplateItem(exercise_id=exercise_id, order=order, sets=[SetSpec(reps=r) for r in reps], **kw)


def test_valid_template_passes():
    validate_template(
        "Push day",
        "chest",
        [
            item(1, 1),
            item(2, 2, group_id="a", group_order=1),
            item(3, 3, group_id="a", group_order=2),
        ],
        KNOWN,
    )


@pytest.mark.parametrize("name,body_part", [("", "legs"), ("Legs", ""), (None, "legs"), ("Legs", None)])
def test_missing_name_or_body_part(name, body_part):
    with pytest.raises(ValidationFailed, match="Missing required fields"):
        validate_template(name, body_part, [item()], KNOWN)


def test_empty_items():
    with pytest.raises(ValidationFailed, match="Items required"):
        validate_template("Legs", "legs", [], KNOWN)


def test_duplicate_order():
    with pytest.raises(ValidationFailed, match="Duplicate item order"):
        validate_template("Legs", "legs", [item(1, 1), item(2, 1)], KNOWN)


def test_unknown_exercise():
    with pytest.raises(ValidationFailed, match="Invalid exercise_id 99"):
        validate_template("Legs", "legs", [item(99, 1)], KNOWN)


def test_item_without_sets():
    with pytest.raises(ValidationFailed, match="Sets required"):
        validate_template("Legs", "legs", [item(1, 1, reps=())], KNOWN)


@pytest.mark.parametrize("reps", [0, -3])
def test_non_positive_reps(reps):
    with pytest.raises(ValidationFailed, match="Reps must be > 0"):
        validate_template("Legs", "legs", [item(1, 1, reps=(8, reps))], KNOWN)


def test_duplicate_group_order_within_group():
    items = [
        item(1, 1, group_id="ss1", group_order=1),
        item(2, 2, group_id="ss1", group_order=1),
    ]
    with pytest.raises(ValidationFailed, match="Duplicate group_order"):
        validate_template("Legs", "legs", items, KNOWN)


def test_same_group_order_in_different_groups_is_fine():
    items = [
        item(1, 1, group_id="ss1", group_order=1),
        item(2, 2, group_id="ss2", group_order=1),
    ]
    validate_template("Legs", "legs", items, KNOWN)


def test_missing_group_order_collides_with_itself():
    items = [item(1, 1, group_id="ss1"), item(2, 2, group_id="ss1")]
    with pytest.raises(ValidationFailed, match="Duplicate group_order"):
        validate_template("Legs", "legs", items, KNOWN)


def test_missing_group_order_collides_with_minus_one():
    items = [item(1, 1, group_id="ss1"), item(2, 2, group_id="ss1", group_order=-1)]
    with pytest.raises(ValidationFailed):
        validate_template("Legs", "legs", items, KNOWN)


def test_ungrouped_items_ignore_group_order():
    validate_template("Legs", "legs", [item(1, 1, group_order=1), item(2, 2, group_order=1)], KNOWN)


def test_whitespace_name_is_not_empty():
    validate_template("   ", "legs", [item()], KNOWN)
