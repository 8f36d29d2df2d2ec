"""Category domain models and the effective category table."""

from typing import Literal

from pydantic import BaseModel

SELF_GROUP = "me"
FALLBACK_GROUP = "friends"

DEFAULT_LABELS: dict[str, str] = {
    "me": "Me",
    "family": "Family",
    "work": "Work",
    "friends": "Friends",
    "acquaintances": "Acquaintances",
}

# Muted palette for the default groups
DEFAULT_COLORS: dict[str, str] = {
    "me": "#e07a3a",
    "family": "#c9577a",
    "work": "#3a9ba5",
    "friends": "#7c6bb8",
    "acquaintances": "#7a8694",
}

AVAILABLE_COLORS: list[str] = [
    "#e07a3a",
    "#c9577a",
    "#3a9ba5",
    "#7c6bb8",
    "#7a8694",
    "#5a9a6b",
    "#d4a656",
    "#8b5a8b",
    "#5a8b8b",
    "#cd6839",
    "#708090",
    "#9370db",
]

UNKNOWN_GROUP_COLOR = "#7a8694"


class CustomCategory(BaseModel):
    """Persisted shape of a user-defined category."""

    label: str
    color: str


class Category(BaseModel):
    """One row of the effective category table.

    Default categories are never removed, only hidden; custom categories
    disappear from the table when deleted.
    """

    key: str
    label: str
    color: str
    kind: Literal["default", "custom"]
    hidden: bool = False


def effective_categories(
    custom: dict[str, CustomCategory],
    color_overrides: dict[str, str],
    deleted_defaults: list[str],
) -> dict[str, Category]:
    """Merge defaults, color overrides, hidden defaults and custom categories.

    Args:
        custom: User-defined categories keyed by category key
        color_overrides: Replacement colors for default categories
        deleted_defaults: Default category keys the user has hidden

    Returns:
        Ordered mapping of category key to Category, defaults first
    """
    table = {
        key: Category(
            key=key,
            label=label,
            color=color_overrides.get(key, DEFAULT_COLORS[key]),
            kind="default",
            hidden=key in deleted_defaults,
        )
        for key, label in DEFAULT_LABELS.items()
    }
    for key, category in custom.items():
        if key in table:
            continue
        table[key] = Category(key=key, label=category.label, color=category.color, kind="custom")
    return table


def group_colors(categories: dict[str, Category]) -> dict[str, str]:
    return {key: category.color for key, category in categories.items()}
