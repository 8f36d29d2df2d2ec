"""Visual encoding rules for nodes and links."""

import math

from netcircle.domain.category import SELF_GROUP, UNKNOWN_GROUP_COLOR
from netcircle.render.schemas import GradientStop, LinkStyle, NodeStyle

LINK_COLOR = "#94a3b8"
SELECTED_STROKE = "#1e293b"
NODE_STROKE = "rgba(255,255,255,0.8)"
BRIDGE_RING_OFFSET = 6
BRIDGE_RING_WIDTH = 2.5
BRIDGE_RING_DASH = "6,4"
BRIDGE_RING_OPACITY = 0.9
HOVER_SCALE = 1.15
CURVE_MIN_DISTANCE = 50.0
CURVE_FACTOR = 0.2
BRIGHTEN_K = 0.5
# d3-color brightening step
BRIGHTER = 1 / 0.7


def brighter(color: str, k: float = BRIGHTEN_K) -> str:
    """Brighten a ``#rrggbb`` color by ``k`` steps."""
    value = color.lstrip("#")
    factor = BRIGHTER**k
    channels = [int(value[i : i + 2], 16) for i in (0, 2, 4)]
    return "#" + "".join(f"{min(255, round(c * factor)):02x}" for c in channels)


def node_gradient(color: str) -> list[GradientStop]:
    """Radial fill of a group: a lighter, more opaque highlight fading to the base color."""
    return [
        GradientStop(offset=0.0, color=brighter(color), opacity=0.9),
        GradientStop(offset=100.0, color=color, opacity=0.75),
    ]


def bridge_gradient(groups: list[str], colors: dict[str, str]) -> list[GradientStop]:
    """Stops for the dashed ring of a bridge node.

    One foreign group gives a solid ring. Several groups give equal hard-edged
    segments, repeated from the 50% mark for as long as they fit.
    """
    palette = [colors.get(group, UNKNOWN_GROUP_COLOR) for group in groups]
    if len(palette) == 1:
        return [
            GradientStop(offset=0.0, color=palette[0]),
            GradientStop(offset=100.0, color=palette[0]),
        ]

    segment = 100 / (len(palette) * 2)
    stops = []
    for i, color in enumerate(palette):
        stops.append(GradientStop(offset=(i * 2) * segment, color=color))
        stops.append(GradientStop(offset=(i * 2 + 1) * segment, color=color))
    for i, color in enumerate(palette):
        start = 50 + (i * 2) * segment
        end = 50 + (i * 2 + 1) * segment
        if end <= 100:
            stops.append(GradientStop(offset=start, color=color))
            stops.append(GradientStop(offset=end, color=color))
    return stops


def node_filter(is_center: bool, is_bridge: bool) -> str:
    if is_center:
        return "glow-me"
    if is_bridge:
        return "glow-bridge"
    return "drop-shadow"


def node_style(
    radius: float,
    *,
    is_center: bool,
    is_bridge: bool,
    selected: bool = False,
    hovered: bool = False,
) -> NodeStyle:
    """Circle, stroke and ring geometry for one node in its current state."""
    r = radius * HOVER_SCALE if hovered else radius
    stroke_width = 3.0 if is_center else 2.0
    if hovered:
        stroke_width += 1.0
    if selected:
        stroke_width = 4.0
    return NodeStyle(
        radius=r,
        stroke=SELECTED_STROKE if selected else NODE_STROKE,
        stroke_width=stroke_width,
        filter=node_filter(is_center, is_bridge),
        ring_radius=r + BRIDGE_RING_OFFSET if is_bridge else None,
        initial_size=16 if is_center else 12,
        label_size=13 if is_center else 11,
        label_weight=600 if is_center else 500,
        label_offset=radius + 16,
    )


def link_style(
    strength: int,
    touches_selection: bool | None = None,
    selection_color: str | None = None,
) -> LinkStyle:
    """Stroke of a link.

    Args:
        strength: Tie strength, 1 to 10
        touches_selection: None when nothing is selected, otherwise whether
            the link touches the selected node
        selection_color: Group color of the selected node

    Returns:
        LinkStyle with color, opacity and width
    """
    if touches_selection is None:
        return LinkStyle(
            color=LINK_COLOR,
            opacity=0.5 + strength / 20,
            width=max(1.5, strength / 2.5),
        )
    if touches_selection:
        return LinkStyle(
            color=selection_color or LINK_COLOR,
            opacity=0.9,
            width=max(2.5, strength / 2),
        )
    return LinkStyle(color=LINK_COLOR, opacity=0.2, width=max(1.0, strength / 3))


def is_cross_group(source_group: str, target_group: str) -> bool:
    """Links between two different groups, neither of them the self group."""
    return (
        source_group != target_group
        and source_group != SELF_GROUP
        and target_group != SELF_GROUP
    )


def link_path(sx: float, sy: float, tx: float, ty: float, curved: bool) -> str:
    """SVG path data for a link.

    Curved links bow perpendicular to the segment by a fifth of its length,
    but only once the endpoints are far enough apart.
    """
    dx, dy = tx - sx, ty - sy
    dist = math.hypot(dx, dy)
    if curved and dist > CURVE_MIN_DISTANCE:
        mx, my = (sx + tx) / 2, (sy + ty) / 2
        qx = mx + dy * CURVE_FACTOR
        qy = my - dx * CURVE_FACTOR
        return f"M{sx:.2f},{sy:.2f} Q{qx:.2f},{qy:.2f} {tx:.2f},{ty:.2f}"
    return f"M{sx:.2f},{sy:.2f} L{tx:.2f},{ty:.2f}"
