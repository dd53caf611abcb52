from collections.abc import Collection, Sequence

from app.core.errors import ValidationFailed
from app.schemas.workouts import TemplateItem

# group_order used for superset members that did not set one
MISSING_GROUP_ORDER = -1


def validate_template(
    name: str | None,
    body_part: str | None,
    items: Sequence[TemplateItem] | None,
    known_exercise_ids: Collection[int],
) -> None:
    """Raise ValidationFailed if the template cannot be stored.

    Checks run in a fixed order and the first failure wins.
    """
    if not name or not body_part:
        raise ValidationFailed("Missing required fields")
    if not items:
        raise ValidationFailed("Items required")

    orders: set[int] = set()
    for item in items:
        if item.order in orders:
            raise ValidationFailed(f"Duplicate item order {item.order}")
        orders.add(item.order)

        if item.exercise_id not in known_exercise_ids:
            raise ValidationFailed(f"Invalid exercise_id {item.exercise_id}")

        if not item.sets:
            raise ValidationFailed(f"Sets required for item order {item.order}")
        for s in item.sets:
            if s.reps <= 0:
                raise ValidationFailed("Reps must be > 0")

    groups: dict[str, set[int]] = {}
    for item in items:
        if not item.group_id:
            continue
        seen = groups.setdefault(item.group_id, set())
        group_order = item.group_order if item.group_order is not None else MISSING_GROUP_ORDER
        if group_order in seen:
            raise ValidationFailed(f"Duplicate group_order within group {item.group_id}")
        seen.add(group_order)
