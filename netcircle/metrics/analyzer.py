"""Pure functions deriving statistics from a network's people and links."""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Literal

from netcircle.domain.category import SELF_GROUP, UNKNOWN_GROUP_COLOR, Category
from netcircle.domain.person import SELF_ID, Link, Person
from netcircle.metrics.schemas import GroupShare, LegendEntry, NeglectedLink, StrengthBuckets

logger = logging.getLogger(__name__)

NEGLECTED_MAX_STRENGTH = 3

ContactUrgency = Literal["never", "recent", "moderate", "overdue", "urgent"]


def degree(node_id: str, links: Iterable[Link]) -> int:
    """Count the links with either endpoint equal to ``node_id``."""
    return sum(1 for link in links if link.touches(node_id))


def degrees(links: Iterable[Link]) -> Counter[str]:
    """Connection count for every id referenced by a link."""
    counts: Counter[str] = Counter()
    for link in links:
        counts[link.source] += 1
        counts[link.target] += 1
    return counts


def bridges_of(nodes: list[Person], links: list[Link]) -> dict[str, list[str]]:
    """Find people whose links reach groups other than their own.

    The self node and the self group never count. Foreign groups are listed
    in the order their first link appears in ``links``.

    Args:
        nodes: People in the network
        links: Relationships in input order

    Returns:
        Mapping of bridge person id to the foreign groups it reaches
    """
    by_id = {node.id: node for node in nodes}
    reached: dict[str, dict[str, None]] = {}

    for link in links:
        source = by_id.get(link.source)
        target = by_id.get(link.target)
        if source is None or target is None:
            continue
        for person, neighbour in ((source, target), (target, source)):
            if person.group == SELF_GROUP:
                continue
            if neighbour.group == SELF_GROUP or neighbour.group == person.group:
                continue
            reached.setdefault(person.id, {})[neighbour.group] = None

    # keep node order for the result, group order from link iteration
    return {node.id: list(reached[node.id]) for node in nodes if node.id in reached}


def density(nodes: list[Person], links: list[Link]) -> float:
    """Links as a percentage of all possible unordered pairs, one decimal."""
    possible = max_possible_connections(nodes)
    if possible == 0:
        return 0.0
    return round(len(links) / possible * 100, 1)


def max_possible_connections(nodes: list[Person]) -> int:
    n = len(nodes)
    return n * (n - 1) // 2


def avg_connections_per_person(nodes: list[Person], links: list[Link]) -> float:
    people = [node for node in nodes if node.id != SELF_ID]
    if not people:
        return 0.0
    counts = degrees(links)
    return round(sum(counts[person.id] for person in people) / len(people), 1)


def avg_strength(links: list[Link]) -> float:
    if not links:
        return 0.0
    return round(sum(link.strength for link in links) / len(links), 1)


def strength_buckets(links: list[Link]) -> StrengthBuckets:
    buckets = StrengthBuckets()
    for link in links:
        if link.strength >= 8:
            buckets.very_strong += 1
        elif link.strength >= 6:
            buckets.strong += 1
        elif link.strength >= 4:
            buckets.moderate += 1
        elif link.strength >= 2:
            buckets.weak += 1
        else:
            buckets.very_weak += 1
    return buckets


def strength_label(strength: int) -> str:
    if strength >= 8:
        return "Very Strong"
    if strength >= 6:
        return "Strong"
    if strength >= 4:
        return "Moderate"
    if strength >= 2:
        return "Weak"
    return "Very Weak"


def neglected_links(nodes: list[Person], links: list[Link]) -> list[NeglectedLink]:
    """Weak ties (strength <= 3) resolved to both people.

    Links pointing at missing people are skipped and logged, cascading
    deletes should have removed them already.
    """
    by_id = {node.id: node for node in nodes}
    neglected = []
    for link in links:
        if link.strength > NEGLECTED_MAX_STRENGTH:
            continue
        source = by_id.get(link.source)
        target = by_id.get(link.target)
        if source is None or target is None:
            logger.warning(f"Dangling link {link.source} -> {link.target} ignored")
            continue
        neglected.append(NeglectedLink(source=source, target=target, strength=link.strength))
    return neglected


def isolated_people(nodes: list[Person], links: list[Link]) -> list[Person]:
    counts = degrees(links)
    return [node for node in nodes if node.id != SELF_ID and counts[node.id] == 0]


def group_distribution(
    nodes: list[Person], categories: dict[str, Category] | None = None
) -> list[GroupShare]:
    """Share of non-self people per group, largest group first."""
    categories = categories or {}
    people = [node for node in nodes if node.id != SELF_ID]
    counts = Counter(node.group or "other" for node in people)
    counts.pop(SELF_GROUP, None)

    shares = []
    for key, count in counts.items():
        category = categories.get(key)
        shares.append(
            GroupShare(
                key=key,
                label=category.label if category else key,
                color=category.color if category else UNKNOWN_GROUP_COLOR,
                count=count,
                percentage=round(count / len(people) * 100, 1),
            )
        )
    shares.sort(key=lambda share: share.count, reverse=True)
    return shares


def legend_entries(nodes: list[Person], categories: dict[str, Category]) -> list[LegendEntry]:
    """Visible categories with member counts, self group first then by size."""
    counts = Counter(node.group for node in nodes)
    entries = [
        LegendEntry(
            key=key,
            label=category.label,
            color=category.color,
            count=counts[key],
            selectable=key != SELF_GROUP,
        )
        for key, category in categories.items()
        if not category.hidden
    ]
    entries.sort(key=lambda entry: (entry.key != SELF_GROUP, -entry.count))
    return entries


def contact_urgency(last_contacted: datetime | None, now: datetime | None = None) -> ContactUrgency:
    """Classify how overdue a person is for contact."""
    if last_contacted is None:
        return "never"
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    if last_contacted.tzinfo is None:
        last_contacted = last_contacted.replace(tzinfo=timezone.utc)
    days = (now - last_contacted).days
    if days <= 7:
        return "recent"
    if days <= 30:
        return "moderate"
    if days <= 90:
        return "overdue"
    return "urgent"
