"""Force-directed layout with a per-node continuity cache."""

import logging
import math

import numpy as np

from netcircle.domain.person import SELF_ID, Link, Person
from netcircle.layout import forces
from netcircle.layout.schemas import Position
from netcircle.layout.simulation import DEFAULT_ITERATIONS, Simulation, alpha_decay_for
from netcircle.layout.sizing import node_radius
from netcircle.metrics.analyzer import degrees

logger = logging.getLogger(__name__)

GROUP_ANCHORS: dict[str, tuple[float, float]] = {
    "me": (0.0, 0.0),
    "family": (-180.0, -120.0),
    "work": (180.0, -120.0),
    "friends": (0.0, 120.0),
    "acquaintances": (0.0, 180.0),
}
CUSTOM_ANCHOR_RADIUS = 160.0
CUSTOM_ANCHOR_STEP = math.pi / 3
SEED_JITTER = 50.0
# fraction of cached nodes above which a recompute starts warm
WARM_START_FRACTION = 0.5
WARM_ALPHA = 0.1


class LayoutEngine:
    """Compute and refine 2D positions for every person in a network.

    Positions are remembered per node id after every tick and reused as seeds
    on the next computation, so settled nodes stay put when the network
    changes. The cache is dropped wholesale only when the center node changes.
    """

    def __init__(
        self,
        width: float = 960.0,
        height: float = 640.0,
        iterations: int = DEFAULT_ITERATIONS,
        rng: np.random.Generator | None = None,
        warm_alpha: float = WARM_ALPHA,
    ) -> None:
        """Initialize the engine.

        Args:
            width: Width of the layout area
            height: Height of the layout area
            iterations: Ticks run by a synchronous compute
            rng: Random source for seeding jitter, pass a seeded generator for
                reproducible layouts
            warm_alpha: Starting alpha when most nodes come from the cache
        """
        self.width = width
        self.height = height
        self.iterations = iterations
        self.rng = rng if rng is not None else np.random.default_rng()
        self.warm_alpha = warm_alpha

        self.center_id = SELF_ID
        self.generation = 0
        self._cache: dict[str, tuple[float, float]] = {}
        self._custom_groups: list[str] = []
        self._degrees: dict[str, int] = {}
        self._simulation: Simulation | None = None
        self._dragging: str | None = None

    @property
    def center(self) -> tuple[float, float]:
        return self.width / 2, self.height / 2

    @property
    def simulation(self) -> Simulation | None:
        return self._simulation

    @property
    def running(self) -> bool:
        """Whether further steps would still move nodes."""
        return self._simulation is not None and not self._simulation.settled

    def cached_position(self, node_id: str) -> tuple[float, float] | None:
        return self._cache.get(node_id)

    def set_center(self, center_id: str) -> None:
        if center_id == self.center_id:
            return
        logger.debug(f"Center moved from {self.center_id} to {center_id}, clearing positions")
        self.center_id = center_id
        self._cache.clear()

    def anchor(self, group: str) -> tuple[float, float]:
        """Offset from the layout center around which a group clusters."""
        if group in GROUP_ANCHORS:
            return GROUP_ANCHORS[group]
        if group in self._custom_groups:
            angle = (self._custom_groups.index(group) + 1) * CUSTOM_ANCHOR_STEP
            return math.cos(angle) * CUSTOM_ANCHOR_RADIUS, math.sin(angle) * CUSTOM_ANCHOR_RADIUS
        return 0.0, 0.0

    def radius(self, node_id: str) -> int:
        return node_radius(self._degrees.get(node_id, 0), node_id == self.center_id)

    def compute(
        self,
        nodes: list[Person],
        links: list[Link],
        center_id: str | None = None,
        custom_groups: list[str] | None = None,
    ) -> dict[str, Position]:
        """Lay out the network synchronously.

        Args:
            nodes: People to position
            links: De-duplicated links between those people
            center_id: Node to pin at the center, keeps the current one if None
            custom_groups: Custom category keys, in order, for anchor placement

        Returns:
            Final position of every node keyed by id
        """
        self.prepare(nodes, links, center_id=center_id, custom_groups=custom_groups)
        if self._simulation is None:
            return {}
        for _ in range(self.iterations):
            self.step()
        return self.current_layout()

    def prepare(
        self,
        nodes: list[Person],
        links: list[Link],
        center_id: str | None = None,
        custom_groups: list[str] | None = None,
    ) -> int:
        """Build a fresh simulation for the given network without running it.

        Any simulation built earlier is discarded.

        Returns:
            Generation number identifying the new simulation
        """
        if center_id is not None:
            self.set_center(center_id)
        if custom_groups is not None:
            self._custom_groups = list(custom_groups)

        self.generation += 1
        self._dragging = None
        ids = [node.id for node in nodes]
        known = set(ids)
        self._cache = {k: v for k, v in self._cache.items() if k in known}

        if not nodes:
            self._simulation = None
            self._degrees = {}
            return self.generation

        index = {node_id: i for i, node_id in enumerate(ids)}
        valid_links = []
        for link in links:
            if link.source in index and link.target in index:
                valid_links.append(link)
            else:
                logger.warning(f"Link {link.source} -> {link.target} skipped, unknown endpoint")

        counts = degrees(valid_links)
        self._degrees = {node.id: counts[node.id] for node in nodes}

        x, y, from_cache = self._seed(nodes)
        state = forces.SimulationState(ids, x, y, self.rng)
        warm = bool(from_cache) and from_cache / len(nodes) >= WARM_START_FRACTION
        self._simulation = Simulation(
            state,
            self._build_forces(nodes, valid_links, index),
            alpha=self.warm_alpha if warm else 1.0,
            alpha_decay=alpha_decay_for(self.iterations),
        )
        logger.debug(
            f"Layout generation {self.generation}: {len(nodes)} nodes, "
            f"{len(valid_links)} links, {from_cache} seeded from cache"
        )
        return self.generation

    def _seed(self, nodes: list[Person]) -> tuple[np.ndarray, np.ndarray, int]:
        cx, cy = self.center
        x = np.empty(len(nodes))
        y = np.empty(len(nodes))
        from_cache = 0
        # the center always starts exactly in the middle, the cached layout moves with it
        shift_x, shift_y = 0.0, 0.0
        cached_center = self._cache.get(self.center_id)
        if cached_center is not None:
            shift_x, shift_y = cx - cached_center[0], cy - cached_center[1]
        for i, node in enumerate(nodes):
            if node.id == self.center_id:
                x[i], y[i] = cx, cy
                if cached_center is not None:
                    from_cache += 1
                continue
            cached = self._cache.get(node.id)
            if cached is not None:
                x[i], y[i] = cached[0] + shift_x, cached[1] + shift_y
                from_cache += 1
                continue
            dx, dy = self.anchor(node.group)
            x[i] = cx + dx + (self.rng.random() - 0.5) * SEED_JITTER
            y[i] = cy + dy + (self.rng.random() - 0.5) * SEED_JITTER
        return x, y, from_cache

    def _build_forces(
        self, nodes: list[Person], links: list[Link], index: dict[str, int]
    ) -> list[forces.Force]:
        cx, cy = self.center
        n = len(nodes)
        strengths = np.array([link.strength for link in links], dtype=np.float64)
        sources = np.array([index[link.source] for link in links], dtype=np.intp)
        targets = np.array([index[link.target] for link in links], dtype=np.intp)

        target_x = np.empty(n)
        target_y = np.empty(n)
        anchor_strength = np.full(n, forces.ANCHOR_STRENGTH)
        for i, node in enumerate(nodes):
            if node.id == self.center_id:
                target_x[i], target_y[i] = cx, cy
                anchor_strength[i] = forces.CENTER_NODE_ANCHOR_STRENGTH
                continue
            dx, dy = self.anchor(node.group)
            target_x[i], target_y[i] = cx + dx, cy + dy

        radii = np.array([self.radius(node.id) for node in nodes], dtype=np.float64)
        return [
            forces.LinkForce(sources, targets, strengths, n),
            forces.ManyBodyForce(),
            forces.CenterForce(cx, cy),
            forces.CollideForce(radii + forces.COLLISION_PADDING),
            forces.PositionForce("x", target_x, anchor_strength),
            forces.PositionForce("y", target_y, anchor_strength),
        ]

    def step(self, generation: int | None = None) -> dict[str, Position]:
        """Advance the current simulation by one tick.

        Args:
            generation: If given and no longer current, the call is a no-op

        Returns:
            Positions after the tick, empty when nothing is laid out or stale
        """
        if self._simulation is None or not self.is_current(generation):
            return {}
        self._simulation.step()
        s = self._simulation.state
        for i, node_id in enumerate(s.ids):
            self._cache[node_id] = (float(s.x[i]), float(s.y[i]))
        return self.current_layout()

    def settle(self, max_steps: int | None = None) -> dict[str, Position]:
        """Step until the simulation cools down or ``max_steps`` is reached."""
        max_steps = max_steps if max_steps is not None else self.iterations
        for _ in range(max_steps):
            if not self.running:
                break
            self.step()
        return self.current_layout()

    def is_current(self, generation: int | None) -> bool:
        return generation is None or generation == self.generation

    def current_layout(self) -> dict[str, Position]:
        if self._simulation is None:
            return {}
        s = self._simulation.state
        return {
            node_id: Position(x=float(s.x[i]), y=float(s.y[i]), pinned=not np.isnan(s.fx[i]))
            for i, node_id in enumerate(s.ids)
        }

    def node_at(self, x: float, y: float) -> str | None:
        """Topmost node whose rendered circle contains (x, y)."""
        if self._simulation is None:
            return None
        s = self._simulation.state
        for i in reversed(range(len(s))):
            node_id = s.ids[i]
            if math.hypot(s.x[i] - x, s.y[i] - y) <= self.radius(node_id):
                return node_id
        return None

    # Interactive dragging

    def drag_start(self, node_id: str) -> None:
        """Pin a node where it stands and reheat the simulation."""
        sim = self._require_simulation()
        s = sim.state
        i = s.index[node_id]
        sim.reheat()
        sim.pin(node_id, float(s.x[i]), float(s.y[i]))
        self._dragging = node_id

    def drag_move(self, node_id: str, x: float, y: float) -> None:
        self._require_simulation().pin(node_id, x, y)

    def drag_end(self, node_id: str) -> None:
        """Release a dragged node and let the layout cool down again."""
        sim = self._require_simulation()
        sim.cool()
        sim.unpin(node_id)
        self._dragging = None

    @property
    def dragging(self) -> str | None:
        return self._dragging

    def _require_simulation(self) -> Simulation:
        if self._simulation is None:
            raise ValueError("No layout has been computed")
        return self._simulation
