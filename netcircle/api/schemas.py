"""Request bodies accepted by the HTTP endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PersonCreate(_Body):
    name: str
    group: str
    details: str = ""
    last_contacted: datetime | None = None


class PersonUpdate(_Body):
    name: str | None = None
    group: str | None = None
    details: str | None = None
    last_contacted: datetime | None = None


class BulkPeopleCreate(_Body):
    names: list[str]
    group: str
    connect_to_me: bool = False
    connection_strength: int = 5


class ContactedUpdate(_Body):
    when: datetime | None = None


# Strength bounds are checked by the network model so callers get its message
class LinkCreate(_Body):
    source: str
    target: str
    strength: int


class LinkUpdate(_Body):
    strength: int


class CategoryCreate(_Body):
    key: str
    label: str
    color: str


class CategoryUpdate(_Body):
    label: str | None = None
    color: str | None = None


class CenterUpdate(_Body):
    person_id: str


class SelectionUpdate(_Body):
    person_id: str | None = None
