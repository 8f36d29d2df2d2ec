"""Network health dashboard statistics."""

from netcircle.domain.person import SELF_ID
from netcircle.domain.snapshot import NetworkSnapshot

from . import analyzer
from .schemas import NetworkMetrics


def compute_metrics(snapshot: NetworkSnapshot) -> NetworkMetrics:
    """Compute every dashboard statistic for a snapshot.

    Args:
        snapshot: Network state to analyse, left untouched

    Returns:
        NetworkMetrics derived only from the snapshot contents
    """
    nodes, links = snapshot.nodes, snapshot.links
    return NetworkMetrics(
        total_people=sum(1 for node in nodes if node.id != SELF_ID),
        total_connections=len(links),
        avg_strength=analyzer.avg_strength(links),
        density=analyzer.density(nodes, links),
        avg_connections_per_person=analyzer.avg_connections_per_person(nodes, links),
        max_possible_connections=analyzer.max_possible_connections(nodes),
        strength_buckets=analyzer.strength_buckets(links),
        neglected_links=analyzer.neglected_links(nodes, links),
        isolated_people=analyzer.isolated_people(nodes, links),
        group_distribution=analyzer.group_distribution(nodes, snapshot.categories()),
    )
