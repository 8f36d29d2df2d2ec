"""Domain models for people, relationships and categories."""

from netcircle.domain.category import (
    FALLBACK_GROUP,
    SELF_GROUP,
    Category,
    CustomCategory,
    effective_categories,
)
from netcircle.domain.person import SELF_ID, Link, Person
from netcircle.domain.snapshot import NetworkSnapshot

__all__ = [
    "FALLBACK_GROUP",
    "SELF_GROUP",
    "SELF_ID",
    "Category",
    "CustomCategory",
    "Link",
    "NetworkSnapshot",
    "Person",
    "effective_categories",
]
