from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from netcircle.domain.person import Person


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StrengthBuckets(_CamelModel):
    """Link counts per strength band."""

    very_strong: int = 0  # [8, 10]
    strong: int = 0  # [6, 8)
    moderate: int = 0  # [4, 6)
    weak: int = 0  # [2, 4)
    very_weak: int = 0  # [1, 2)


class NeglectedLink(_CamelModel):
    source: Person
    target: Person
    strength: int


class GroupShare(_CamelModel):
    key: str
    label: str
    color: str
    count: int
    percentage: float


class LegendEntry(_CamelModel):
    key: str
    label: str
    color: str
    count: int
    selectable: bool = True


class NetworkMetrics(_CamelModel):
    """Health dashboard statistics for one snapshot."""

    total_people: int
    total_connections: int
    avg_strength: float
    density: float
    avg_connections_per_person: float
    max_possible_connections: int
    strength_buckets: StrengthBuckets
    neglected_links: list[NeglectedLink]
    isolated_people: list[Person]
    group_distribution: list[GroupShare]
