"""Force-directed layout engine."""

from netcircle.layout.engine import LayoutEngine
from netcircle.layout.schemas import Position
from netcircle.layout.sizing import node_radius

__all__ = [
    "LayoutEngine",
    "Position",
    "node_radius",
]
