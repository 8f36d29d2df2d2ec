"""Build a drawable scene from a network, its layout and the interaction state."""

import logging

from netcircle.domain.category import UNKNOWN_GROUP_COLOR, group_colors
from netcircle.domain.snapshot import NetworkSnapshot
from netcircle.layout.schemas import Position
from netcircle.layout.sizing import node_radius
from netcircle.metrics.analyzer import bridges_of, degrees
from netcircle.render import encoding
from netcircle.render.schemas import (
    Gradient,
    LinkGlyph,
    NodeGlyph,
    Scene,
    Tooltip,
    ViewTransform,
)

logger = logging.getLogger(__name__)


def node_gradient_id(group: str) -> str:
    return f"gradient-{group}"


def bridge_gradient_id(node_id: str) -> str:
    return f"bridge-gradient-{node_id}"


def build_scene(
    snapshot: NetworkSnapshot,
    layout: dict[str, Position],
    *,
    center_id: str,
    width: float,
    height: float,
    transform: ViewTransform | None = None,
    radii: dict[str, int] | None = None,
    selected_id: str | None = None,
    hovered_id: str | None = None,
) -> Scene:
    """Assemble node and link glyphs with their styles.

    Args:
        snapshot: Network to draw
        layout: Node positions keyed by id
        center_id: Node currently pinned at the center
        width: Width of the drawing area
        height: Height of the drawing area
        transform: View transform, identity if None
        radii: Node radii keyed by id, derived from degree when missing
        selected_id: Selected node, restyles the node and its links
        hovered_id: Hovered node, enlarged and given a tooltip

    Returns:
        Scene ready to be rendered
    """
    categories = snapshot.categories()
    colors = group_colors(categories)
    bridges = bridges_of(snapshot.nodes, snapshot.links)
    counts = degrees(snapshot.links)
    radii = radii or {}
    by_id = {node.id: node for node in snapshot.nodes}

    gradients = [
        Gradient(id=node_gradient_id(key), kind="radial", stops=encoding.node_gradient(color))
        for key, color in colors.items()
    ]
    gradients += [
        Gradient(
            id=bridge_gradient_id(node_id),
            kind="linear",
            stops=encoding.bridge_gradient(groups, colors),
        )
        for node_id, groups in bridges.items()
    ]

    selected = by_id.get(selected_id) if selected_id else None
    selection_color = colors.get(selected.group, UNKNOWN_GROUP_COLOR) if selected else None

    links = []
    for link in snapshot.links:
        source, target = by_id.get(link.source), by_id.get(link.target)
        source_pos, target_pos = layout.get(link.source), layout.get(link.target)
        if source is None or target is None or source_pos is None or target_pos is None:
            logger.warning(f"Link {link.source} -> {link.target} has no drawable endpoints")
            continue
        curved = encoding.is_cross_group(source.group, target.group)
        links.append(
            LinkGlyph(
                source=link.source,
                target=link.target,
                strength=link.strength,
                path=encoding.link_path(
                    source_pos.x, source_pos.y, target_pos.x, target_pos.y, curved
                ),
                curved=curved,
                style=encoding.link_style(
                    link.strength,
                    touches_selection=link.touches(selected.id) if selected else None,
                    selection_color=selection_color,
                ),
            )
        )

    nodes = []
    for node in snapshot.nodes:
        position = layout.get(node.id)
        if position is None:
            logger.warning(f"Person {node.id} has no layout position")
            continue
        is_center = node.id == center_id
        groups = bridges.get(node.id, [])
        radius = radii.get(node.id, node_radius(counts[node.id], is_center))
        nodes.append(
            NodeGlyph(
                id=node.id,
                name=node.name,
                initial=node.name[:1].upper(),
                group=node.group,
                x=position.x,
                y=position.y,
                fill=node_gradient_id(node.group),
                style=encoding.node_style(
                    radius,
                    is_center=is_center,
                    is_bridge=bool(groups),
                    selected=node.id == selected_id,
                    hovered=node.id == hovered_id,
                ),
                is_center=is_center,
                bridge_groups=groups,
                bridge_marker_color=colors.get(groups[0], UNKNOWN_GROUP_COLOR) if groups else None,
            )
        )

    tooltip = None
    hovered = by_id.get(hovered_id) if hovered_id else None
    if hovered is not None:
        category = categories.get(hovered.group)
        groups = bridges.get(hovered.id, [])
        labels = [categories[group].label if group in categories else group for group in groups]
        tooltip = Tooltip(
            name=hovered.name,
            group=hovered.group,
            group_label=category.label if category else hovered.group,
            color=colors.get(hovered.group, UNKNOWN_GROUP_COLOR),
            bridge_groups=groups,
            bridge_labels=labels,
            bridge_colors=[colors.get(group, UNKNOWN_GROUP_COLOR) for group in groups],
        )

    return Scene(
        width=width,
        height=height,
        transform=transform or ViewTransform(),
        gradients=gradients,
        links=links,
        nodes=nodes,
        selected_id=selected_id,
        hovered_id=hovered_id,
        tooltip=tooltip,
        has_bridges=bool(bridges),
    )
