"""Node radius from degree."""

BASE_RADIUS = 12
RADIUS_PER_CONNECTION = 2
MAX_RADIUS = 28
CENTER_RADIUS = 32


def node_radius(degree: int, is_center: bool = False) -> int:
    """Rendered radius of a node, the center node is always the largest."""
    if is_center:
        return CENTER_RADIUS
    return min(BASE_RADIUS + degree * RADIUS_PER_CONNECTION, MAX_RADIUS)
