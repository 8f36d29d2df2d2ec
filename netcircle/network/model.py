"""Graph data model with validated, single-writer mutations."""

import logging
import uuid
from datetime import datetime, timezone

from pydantic import ValidationError

from netcircle.domain.category import (
    DEFAULT_LABELS,
    FALLBACK_GROUP,
    SELF_GROUP,
    Category,
    CustomCategory,
    effective_categories,
)
from netcircle.domain.person import SELF_ID, Link, Person
from netcircle.domain.snapshot import NetworkSnapshot
from netcircle.network.schemas import Connection, MutationResult

logger = logging.getLogger(__name__)

DEFAULT_BULK_STRENGTH = 5


def new_person_id() -> str:
    return f"person-{uuid.uuid4().hex}"


def _valid_strength(strength: int) -> bool:
    return isinstance(strength, int) and 1 <= strength <= 10


class NetworkModel:
    """In-memory network of people, links and categories.

    Every mutation validates first and only then applies, so a rejected call
    leaves the model untouched.
    """

    def __init__(self, snapshot: NetworkSnapshot | None = None) -> None:
        snapshot = snapshot or NetworkSnapshot.empty()
        self._nodes: dict[str, Person] = {}
        self._links: list[Link] = []
        self._custom: dict[str, CustomCategory] = dict(snapshot.custom_categories)
        self._color_overrides: dict[str, str] = dict(snapshot.default_color_overrides)
        self._deleted_defaults: list[str] = list(snapshot.deleted_default_categories)
        self.updated_at = snapshot.updated_at

        for person in snapshot.nodes:
            if person.id in self._nodes:
                logger.warning(f"Duplicate person id {person.id} dropped on load")
                continue
            self._nodes[person.id] = person.model_copy()

        if SELF_ID not in self._nodes:
            logger.warning("Snapshot has no self node, recreating it")
            self._nodes = {SELF_ID: Person(id=SELF_ID, name="Me", group=SELF_GROUP), **self._nodes}

        seen: set[frozenset[str]] = set()
        for link in snapshot.links:
            if link.source not in self._nodes or link.target not in self._nodes:
                logger.warning(f"Dangling link {link.source} -> {link.target} dropped on load")
                continue
            if link.source == link.target or link.key in seen:
                logger.warning(f"Invalid link {link.source} -> {link.target} dropped on load")
                continue
            seen.add(link.key)
            self._links.append(link.model_copy())

    @classmethod
    def from_snapshot(cls, snapshot: NetworkSnapshot) -> "NetworkModel":
        return cls(snapshot)

    @property
    def nodes(self) -> list[Person]:
        return list(self._nodes.values())

    @property
    def links(self) -> list[Link]:
        return list(self._links)

    def snapshot(self) -> NetworkSnapshot:
        """Deep copy of the current state, safe to hand to persistence."""
        return NetworkSnapshot(
            nodes=[node.model_copy() for node in self._nodes.values()],
            links=[link.model_copy() for link in self._links],
            custom_categories={k: v.model_copy() for k, v in self._custom.items()},
            default_color_overrides=dict(self._color_overrides),
            deleted_default_categories=list(self._deleted_defaults),
            updated_at=self.updated_at,
        )

    def person(self, person_id: str) -> Person | None:
        return self._nodes.get(person_id)

    def find_link(self, a: str, b: str) -> Link | None:
        for link in self._links:
            if link.connects(a, b):
                return link
        return None

    def categories(self) -> dict[str, Category]:
        return effective_categories(self._custom, self._color_overrides, self._deleted_defaults)

    def _group_rejection(self, group: str) -> str | None:
        if group == SELF_GROUP:
            return "Only you belong to your own group"
        category = self.categories().get(group)
        if category is None or category.hidden:
            return f"Unknown category: {group}"
        return None

    # People

    def add_person(
        self,
        name: str,
        group: str,
        details: str = "",
        last_contacted: datetime | None = None,
        person_id: str | None = None,
    ) -> MutationResult:
        error = self._group_rejection(group)
        if error:
            return MutationResult.failure(error)
        person_id = person_id or new_person_id()
        if person_id in self._nodes:
            return MutationResult.failure(f"Person {person_id} already exists")
        try:
            person = Person(
                id=person_id,
                name=name,
                group=group,
                details=details,
                last_contacted=last_contacted,
            )
        except ValidationError as e:
            return MutationResult.failure(f"Invalid person: {e.errors()[0]['msg']}")

        self._nodes[person.id] = person
        return MutationResult.success(id=person.id)

    def update_person(self, person_id: str, **changes) -> MutationResult:
        """Apply field changes to a person (name, group, details, last_contacted)."""
        current = self._nodes.get(person_id)
        if current is None:
            return MutationResult.failure(f"Person {person_id} not found")
        changes.pop("id", None)
        if "group" in changes and changes["group"] != current.group:
            if current.is_self:
                return MutationResult.failure("The self node always stays in its own group")
            error = self._group_rejection(changes["group"])
            if error:
                return MutationResult.failure(error)
        try:
            updated = Person.model_validate({**current.model_dump(), **changes})
        except ValidationError as e:
            return MutationResult.failure(f"Invalid person: {e.errors()[0]['msg']}")

        self._nodes[person_id] = updated
        return MutationResult.success(id=person_id)

    def mark_contacted(self, person_id: str, when: datetime | None = None) -> MutationResult:
        return self.update_person(person_id, last_contacted=when or datetime.now(timezone.utc))

    def delete_person(self, person_id: str) -> MutationResult:
        """Remove a person and every link touching them."""
        if person_id == SELF_ID:
            return MutationResult.failure("You can't delete yourself from your own network")
        if person_id not in self._nodes:
            return MutationResult.failure(f"Person {person_id} not found")

        del self._nodes[person_id]
        self._links = [link for link in self._links if not link.touches(person_id)]
        return MutationResult.success(id=person_id)

    def bulk_add_people(
        self,
        names: list[str],
        group: str,
        connect_to_me: bool = False,
        connection_strength: int = DEFAULT_BULK_STRENGTH,
    ) -> MutationResult:
        """Add several people to one group, optionally linking each to the self node."""
        names = [name.strip() for name in names if name and name.strip()]
        if not names:
            return MutationResult.failure("No names given")
        error = self._group_rejection(group)
        if error:
            return MutationResult.failure(error)
        if connect_to_me and not _valid_strength(connection_strength):
            return MutationResult.failure("Strength must be between 1 and 10")

        people = [Person(id=new_person_id(), name=name, group=group) for name in names]
        for person in people:
            self._nodes[person.id] = person
            if connect_to_me:
                self._links.append(
                    Link(source=SELF_ID, target=person.id, strength=connection_strength)
                )
        return MutationResult.success(ids=[person.id for person in people])

    def connections(self, person_id: str) -> list[Connection]:
        """People directly linked to ``person_id`` with the tie strength."""
        connections = []
        for link in self._links:
            if not link.touches(person_id):
                continue
            other = self._nodes.get(link.other(person_id))
            if other is None:
                logger.warning(f"Link {link.source} -> {link.target} references a missing person")
                continue
            connections.append(Connection(person=other, strength=link.strength))
        return connections

    def people_in_group(self, group: str) -> list[Person]:
        return [node for node in self._nodes.values() if node.group == group]

    # Links

    def add_link(self, source: str, target: str, strength: int) -> MutationResult:
        if source == target:
            return MutationResult.failure("A person can't be linked to themselves")
        for person_id in (source, target):
            if person_id not in self._nodes:
                return MutationResult.failure(f"Person {person_id} not found")
        if not _valid_strength(strength):
            return MutationResult.failure("Strength must be between 1 and 10")
        if self.find_link(source, target) is not None:
            return MutationResult.failure("This relationship already exists")

        self._links.append(Link(source=source, target=target, strength=strength))
        return MutationResult.success()

    def update_link(self, source: str, target: str, strength: int) -> MutationResult:
        link = self.find_link(source, target)
        if link is None:
            return MutationResult.failure("Relationship not found")
        if not _valid_strength(strength):
            return MutationResult.failure("Strength must be between 1 and 10")

        link.strength = strength
        return MutationResult.success()

    def delete_link(self, source: str, target: str) -> MutationResult:
        link = self.find_link(source, target)
        if link is None:
            return MutationResult.failure("Relationship not found")

        self._links.remove(link)
        return MutationResult.success()

    # Categories

    def add_category(self, key: str, label: str, color: str) -> MutationResult:
        key, label = key.strip(), label.strip()
        if not key or not label:
            return MutationResult.failure("Category key and label are required")
        if key in DEFAULT_LABELS or key in self._custom:
            return MutationResult.failure(f"Category {key} already exists")

        self._custom[key] = CustomCategory(label=label, color=color)
        return MutationResult.success(id=key)

    def update_category(
        self, key: str, label: str | None = None, color: str | None = None
    ) -> MutationResult:
        category = self._custom.get(key)
        if category is None:
            return MutationResult.failure(f"Custom category {key} not found")
        if label is not None and not label.strip():
            return MutationResult.failure("Category label must not be empty")

        self._custom[key] = CustomCategory(
            label=label.strip() if label is not None else category.label,
            color=color or category.color,
        )
        return MutationResult.success(id=key)

    def delete_category(self, key: str) -> MutationResult:
        """Remove a custom category, moving its members to the fallback."""
        if key not in self._custom:
            return MutationResult.failure(f"Custom category {key} not found")

        self._reassign_members(key)
        del self._custom[key]
        return MutationResult.success(id=key)

    def set_default_category_color(self, key: str, color: str) -> MutationResult:
        if key not in DEFAULT_LABELS:
            return MutationResult.failure(f"Default category {key} not found")

        self._color_overrides[key] = color
        return MutationResult.success(id=key)

    def delete_default_category(self, key: str) -> MutationResult:
        """Hide a default category, moving its members to the fallback."""
        if key not in DEFAULT_LABELS:
            return MutationResult.failure(f"Default category {key} not found")
        if key in (SELF_GROUP, FALLBACK_GROUP):
            return MutationResult.failure(f"Category {key} can't be deleted")

        self._reassign_members(key)
        if key not in self._deleted_defaults:
            self._deleted_defaults.append(key)
        self._color_overrides.pop(key, None)
        return MutationResult.success(id=key)

    def restore_default_category(self, key: str) -> MutationResult:
        if key not in self._deleted_defaults:
            return MutationResult.failure(f"Category {key} is not deleted")

        self._deleted_defaults.remove(key)
        return MutationResult.success(id=key)

    def _reassign_members(self, key: str) -> None:
        for person_id, person in self._nodes.items():
            if person.group == key:
                self._nodes[person_id] = person.model_copy(update={"group": FALLBACK_GROUP})
