"""Person and link domain models."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SELF_ID = "me"


def endpoint_id(value: Any) -> Any:
    """Reduce a resolved endpoint (an object carrying an ``id``) to its bare id."""
    if isinstance(value, dict):
        return value.get("id")
    return getattr(value, "id", value)


NodeRef = Annotated[str, BeforeValidator(endpoint_id)]


class Person(BaseModel):
    """A person in the network.

    Attributes:
        id: Stable identifier, unique within one user's network
        name: Display name, never empty after trimming
        group: Category key the person belongs to
        details: Free-text notes
        last_contacted: When the person was last contacted, None means never
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    group: str
    details: str = ""
    last_contacted: datetime | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        return value

    @property
    def is_self(self) -> bool:
        return self.id == SELF_ID


class Link(BaseModel):
    """An undirected relationship between two people."""

    source: NodeRef
    target: NodeRef
    strength: int = Field(ge=1, le=10)

    @property
    def key(self) -> frozenset[str]:
        return frozenset((self.source, self.target))

    def touches(self, person_id: str) -> bool:
        return person_id in (self.source, self.target)

    def connects(self, a: str, b: str) -> bool:
        return (self.source == a and self.target == b) or (self.source == b and self.target == a)

    def other(self, person_id: str) -> str:
        """Return the endpoint opposite to ``person_id``."""
        return self.target if self.source == person_id else self.source
