"""Tests for the force-directed layout engine."""

import itertools
import math

import numpy as np
import pytest

from netcircle.domain.person import SELF_ID, Link, Person
from netcircle.domain.sample import sample_snapshot
from netcircle.layout import LayoutEngine, node_radius
from netcircle.layout.simulation import DRAG_ALPHA_TARGET


def _family_network(size: int = 4) -> tuple[list[Person], list[Link]]:
    nodes = [Person(id=SELF_ID, name="Me", group="me")] + [
        Person(id=f"f{i}", name=f"Family {i}", group="family") for i in range(size)
    ]
    links = [Link(source=SELF_ID, target=f"f{i}", strength=7) for i in range(size)]
    return nodes, links


def _distance(a, b) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


@pytest.mark.parametrize(
    "degree,is_center,radius",
    [(0, False, 12), (3, False, 18), (8, False, 28), (20, False, 28), (0, True, 32), (20, True, 32)],
)
def test_node_radius(degree: int, is_center: bool, radius: int) -> None:
    assert node_radius(degree, is_center) == radius


def test_zero_nodes_is_a_no_op(layout_engine: LayoutEngine) -> None:
    assert layout_engine.compute([], []) == {}
    assert layout_engine.current_layout() == {}
    assert not layout_engine.running


def test_every_node_gets_a_finite_position(layout_engine: LayoutEngine) -> None:
    snapshot = sample_snapshot()

    layout = layout_engine.compute(snapshot.nodes, snapshot.links)

    assert set(layout) == {node.id for node in snapshot.nodes}
    assert all(math.isfinite(p.x) and math.isfinite(p.y) for p in layout.values())


def test_isolated_node_is_seeded_near_its_group(layout_engine: LayoutEngine) -> None:
    nodes = [
        Person(id=SELF_ID, name="Me", group="me"),
        Person(id="loner", name="Loner", group="work"),
    ]

    layout = layout_engine.compute(nodes, [])

    cx, cy = layout_engine.center
    loner = layout["loner"]
    assert (loner.x, loner.y) != (0.0, 0.0)
    # work sits up and to the right of the center
    assert loner.x > cx
    assert loner.y < cy


def test_coincident_nodes_do_not_produce_nan() -> None:
    engine = LayoutEngine(rng=np.random.default_rng(1), iterations=50)
    nodes = [Person(id=SELF_ID, name="Me", group="me")] + [
        Person(id=f"p{i}", name=f"P{i}", group="friends") for i in range(3)
    ]
    engine.prepare(nodes, [])
    state = engine.simulation.state
    state.x[1:] = state.x[1]
    state.y[1:] = state.y[1]

    layout = engine.settle()

    assert all(math.isfinite(p.x) and math.isfinite(p.y) for p in layout.values())


def test_center_node_sits_at_the_center(layout_engine: LayoutEngine) -> None:
    snapshot = sample_snapshot()

    layout = layout_engine.compute(snapshot.nodes, snapshot.links)

    cx, cy = layout_engine.center
    assert math.hypot(layout[SELF_ID].x - cx, layout[SELF_ID].y - cy) < 60


def test_same_seed_same_layout() -> None:
    snapshot = sample_snapshot()

    first = LayoutEngine(rng=np.random.default_rng(3)).compute(snapshot.nodes, snapshot.links)
    second = LayoutEngine(rng=np.random.default_rng(3)).compute(snapshot.nodes, snapshot.links)

    assert first == second


def test_collision_keeps_nodes_apart(layout_engine: LayoutEngine) -> None:
    snapshot = sample_snapshot()

    layout = layout_engine.compute(snapshot.nodes, snapshot.links)

    for a, b in itertools.combinations(layout, 2):
        min_distance = layout_engine.radius(a) + layout_engine.radius(b)
        assert _distance(layout[a], layout[b]) >= min_distance - 1.0, (a, b)


def test_adding_a_node_keeps_existing_positions(layout_engine: LayoutEngine) -> None:
    nodes, links = _family_network(size=8)
    before = layout_engine.compute(nodes, links)

    nodes.append(Person(id="newcomer", name="Newcomer", group="acquaintances"))
    after = layout_engine.compute(nodes, links)

    for node_id, position in before.items():
        assert _distance(position, after[node_id]) < 40, node_id
    newcomer = after["newcomer"]
    assert 0 <= newcomer.x <= layout_engine.width
    assert 0 <= newcomer.y <= layout_engine.height


def test_cache_tracks_positions_and_prunes_removed_nodes(layout_engine: LayoutEngine) -> None:
    nodes, links = _family_network()
    layout = layout_engine.compute(nodes, links)

    assert layout_engine.cached_position("f0") == (layout["f0"].x, layout["f0"].y)

    layout_engine.compute(nodes[:-1], links[:-1])
    assert layout_engine.cached_position("f3") is None


def test_changing_center_clears_the_cache(layout_engine: LayoutEngine) -> None:
    nodes, links = _family_network()
    layout = layout_engine.compute(nodes, links)

    layout_engine.set_center("f1")

    assert layout_engine.cached_position("f0") is None
    assert layout_engine.radius("f1") == 32
    assert layout_engine.radius(SELF_ID) == node_radius(4)
    assert layout_engine.node_at(layout["f1"].x + 25, layout["f1"].y) == "f1"


def test_restart_seeds_center_in_the_middle_and_keeps_the_shape(
    layout_engine: LayoutEngine,
) -> None:
    nodes, links = _family_network(size=8)
    before = layout_engine.compute(nodes, links)

    layout_engine.prepare(nodes, links)

    cx, cy = layout_engine.center
    state = layout_engine.simulation.state
    me = state.index[SELF_ID]
    assert (state.x[me], state.y[me]) == (cx, cy)
    for node_id in ("f0", "f5"):
        i = state.index[node_id]
        assert state.x[i] - cx == pytest.approx(before[node_id].x - before[SELF_ID].x)
        assert state.y[i] - cy == pytest.approx(before[node_id].y - before[SELF_ID].y)
    assert layout_engine.simulation.alpha == pytest.approx(0.1)


def test_recentering_seeds_new_center_in_the_middle(layout_engine: LayoutEngine) -> None:
    nodes, links = _family_network()
    layout_engine.compute(nodes, links)

    layout_engine.prepare(nodes, links, center_id="f2")

    state = layout_engine.simulation.state
    i = state.index["f2"]
    assert (state.x[i], state.y[i]) == layout_engine.center
    assert layout_engine.simulation.alpha == 1.0
    assert layout_engine.radius("f2") == 32
    assert layout_engine.radius(SELF_ID) == node_radius(4)


def test_links_to_unknown_nodes_are_skipped(layout_engine: LayoutEngine) -> None:
    nodes, links = _family_network()
    links.append(Link(source="f0", target="ghost", strength=5))

    layout = layout_engine.compute(nodes, links)

    assert "ghost" not in layout


def test_custom_groups_get_their_own_anchor(layout_engine: LayoutEngine) -> None:
    layout_engine.compute(
        [Person(id=SELF_ID, name="Me", group="me")], [], custom_groups=["climbing", "choir"]
    )

    assert layout_engine.anchor("climbing") != layout_engine.anchor("choir")
    assert math.hypot(*layout_engine.anchor("climbing")) == pytest.approx(160.0)
    assert layout_engine.anchor("unknown") == (0.0, 0.0)


def test_stale_generation_steps_are_ignored(layout_engine: LayoutEngine) -> None:
    nodes, links = _family_network()
    stale = layout_engine.prepare(nodes, links)
    current = layout_engine.prepare(nodes, links)

    assert not layout_engine.is_current(stale)
    assert layout_engine.step(stale) == {}
    assert layout_engine.step(current) != {}


def test_drag_pins_and_reheats(layout_engine: LayoutEngine) -> None:
    nodes, links = _family_network()
    layout_engine.compute(nodes, links)

    layout_engine.drag_start("f0")
    assert layout_engine.dragging == "f0"
    assert layout_engine.simulation.alpha_target == DRAG_ALPHA_TARGET

    layout_engine.drag_move("f0", 100.0, 100.0)
    layout = layout_engine.step()
    assert (layout["f0"].x, layout["f0"].y) == (100.0, 100.0)
    assert layout["f0"].pinned
    assert layout_engine.running

    layout_engine.drag_move("f0", 120.0, 90.0)
    layout = layout_engine.step()
    assert (layout["f0"].x, layout["f0"].y) == (120.0, 90.0)

    layout_engine.drag_end("f0")
    assert layout_engine.dragging is None
    assert not layout_engine.simulation.is_pinned("f0")
    assert layout_engine.simulation.alpha_target == 0.0

    layout_engine.settle(max_steps=2000)
    assert not layout_engine.running


def test_drag_without_layout_raises() -> None:
    with pytest.raises(ValueError, match="No layout has been computed"):
        LayoutEngine().drag_start("me")


def test_node_at_finds_topmost_node(layout_engine: LayoutEngine) -> None:
    nodes, links = _family_network()
    layout = layout_engine.compute(nodes, links)

    f0 = layout["f0"]
    assert layout_engine.node_at(f0.x + 1, f0.y - 1) == "f0"
    assert layout_engine.node_at(-5000, -5000) is None
