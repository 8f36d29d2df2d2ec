"""Network snapshot: the plain data exchanged with persistence."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from netcircle.domain.category import Category, CustomCategory, effective_categories
from netcircle.domain.person import SELF_ID, Link, Person


class NetworkSnapshot(BaseModel):
    """Complete persisted state of one user's network.

    Attributes:
        nodes: People, the self node included
        links: Relationships with bare-id endpoints
        custom_categories: User-defined categories keyed by category key
        default_color_overrides: Replacement colors for default categories
        deleted_default_categories: Default category keys hidden by the user
        updated_at: Time of the last successful save, if known
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    nodes: list[Person] = []
    links: list[Link] = []
    custom_categories: dict[str, CustomCategory] = {}
    default_color_overrides: dict[str, str] = {}
    deleted_default_categories: list[str] = []
    updated_at: datetime | None = None

    @classmethod
    def empty(cls, self_name: str = "Me") -> "NetworkSnapshot":
        """Snapshot holding only the self node."""
        return cls(nodes=[Person(id=SELF_ID, name=self_name, group="me")])

    def categories(self) -> dict[str, Category]:
        return effective_categories(
            self.custom_categories,
            self.default_color_overrides,
            self.deleted_default_categories,
        )
