"""Scene building, SVG output and pointer interaction for the network graph."""

from netcircle.render.interaction import InteractionSurface
from netcircle.render.scene import build_scene
from netcircle.render.svg import render_svg

__all__ = [
    "InteractionSurface",
    "build_scene",
    "render_svg",
]
