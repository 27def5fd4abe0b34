from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from skillmap.infrastructure.db.models import Level, UserModel

EDITABLE_FIELDS = frozenset(
    {"first_name", "last_name", "avatar_url", "email", "level", "blocked", "need_congratulate"}
)


def next_level(current: Level | str) -> Level:
    """Return the tier after ``current``; the last tier stays where it is."""
    tiers = Level.ordered()
    index = tiers.index(Level(current))
    return tiers[min(index + 1, len(tiers) - 1)]


def apply_user_changes(user: UserModel, changes: Mapping[str, Any]) -> UserModel:
    """Assign a partial update to ``user``.

    Any change set that names ``level`` raises the congratulation flag,
    even when the level ends up unchanged.
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Unsupported user field(s): {', '.join(sorted(unknown))}")

    for field, value in changes.items():
        setattr(user, field, value)

    if "level" in changes:
        user.need_congratulate = True
    return user
