"""Force functions for the relaxation loop.

Each force mutates the velocities (or, for centering, the positions) held in
a ``SimulationState``. Forces scaled by ``alpha`` fade out as the simulation
cools; centering and collision are applied at full strength every tick.
"""

from typing import Protocol

import numpy as np

LINK_BASE_DISTANCE = 100.0
LINK_DISTANCE_PER_STRENGTH = 6.0
LINK_STRENGTH_DIVISOR = 12.0
CHARGE_STRENGTH = -350.0
CHARGE_DISTANCE_MAX = 450.0
CHARGE_DISTANCE_MIN = 1.0
CENTER_STRENGTH = 0.05
COLLISION_PADDING = 15.0
ANCHOR_STRENGTH = 0.12
CENTER_NODE_ANCHOR_STRENGTH = 0.5

# squared distances below this are clamped before dividing
MIN_DISTANCE_SQUARED = 1e-9


class SimulationState:
    """Positions, velocities and pins of every node, indexed by position in ``ids``."""

    def __init__(
        self, ids: list[str], x: np.ndarray, y: np.ndarray, rng: np.random.Generator
    ) -> None:
        self.ids = ids
        self.index = {node_id: i for i, node_id in enumerate(ids)}
        self.x = np.asarray(x, dtype=np.float64).copy()
        self.y = np.asarray(y, dtype=np.float64).copy()
        self.vx = np.zeros(len(ids))
        self.vy = np.zeros(len(ids))
        self.fx = np.full(len(ids), np.nan)
        self.fy = np.full(len(ids), np.nan)
        self.rng = rng

    def __len__(self) -> int:
        return len(self.ids)

    def jiggle(self, size: int | None = None) -> np.ndarray | float:
        """Tiny random offset used to separate coincident nodes."""
        return (self.rng.random(size) - 0.5) * 1e-6


class Force(Protocol):
    def __call__(self, state: SimulationState, alpha: float) -> None: ...


def link_distance(strength: np.ndarray | float) -> np.ndarray | float:
    """Stronger ties sit closer together."""
    return LINK_BASE_DISTANCE - strength * LINK_DISTANCE_PER_STRENGTH


def link_stiffness(strength: np.ndarray | float) -> np.ndarray | float:
    return strength / LINK_STRENGTH_DIVISOR


class LinkForce:
    """Spring between linked nodes, distance and stiffness driven by tie strength."""

    def __init__(self, sources: np.ndarray, targets: np.ndarray, strengths: np.ndarray, n: int):
        self.sources = np.asarray(sources, dtype=np.intp)
        self.targets = np.asarray(targets, dtype=np.intp)
        self.distances = link_distance(np.asarray(strengths, dtype=np.float64))
        self.stiffness = link_stiffness(np.asarray(strengths, dtype=np.float64))

        count = np.bincount(np.concatenate([self.sources, self.targets]), minlength=n)
        src_count = count[self.sources]
        self.bias = src_count / np.maximum(src_count + count[self.targets], 1)

    def __call__(self, state: SimulationState, alpha: float) -> None:
        x, y, vx, vy = state.x, state.y, state.vx, state.vy
        # sequential so each spring sees the velocity changes of the previous one
        for i in range(len(self.sources)):
            s, t = self.sources[i], self.targets[i]
            dx = x[t] + vx[t] - x[s] - vx[s]
            dy = y[t] + vy[t] - y[s] - vy[s]
            if dx == 0:
                dx = state.jiggle()
            if dy == 0:
                dy = state.jiggle()
            length = np.sqrt(dx * dx + dy * dy)
            scale = (length - self.distances[i]) / length * alpha * self.stiffness[i]
            dx, dy = dx * scale, dy * scale
            b = self.bias[i]
            vx[t] -= dx * b
            vy[t] -= dy * b
            vx[s] += dx * (1 - b)
            vy[s] += dy * (1 - b)


class ManyBodyForce:
    """Pairwise repulsion between all nodes within ``distance_max``."""

    def __init__(
        self,
        strength: float = CHARGE_STRENGTH,
        distance_max: float = CHARGE_DISTANCE_MAX,
        distance_min: float = CHARGE_DISTANCE_MIN,
    ):
        self.strength = strength
        self.distance_max2 = distance_max * distance_max
        self.distance_min2 = distance_min * distance_min

    def __call__(self, state: SimulationState, alpha: float) -> None:
        if len(state) < 2:
            return
        dx = state.x[np.newaxis, :] - state.x[:, np.newaxis]
        dy = state.y[np.newaxis, :] - state.y[:, np.newaxis]
        dist2 = dx * dx + dy * dy

        in_range = dist2 < self.distance_max2
        np.fill_diagonal(in_range, False)
        near = dist2 < self.distance_min2
        dist2 = np.where(near, np.sqrt(self.distance_min2 * dist2), dist2)
        dist2 = np.maximum(dist2, MIN_DISTANCE_SQUARED)

        weight = np.where(in_range, self.strength * alpha / dist2, 0.0)
        state.vx += (dx * weight).sum(axis=1)
        state.vy += (dy * weight).sum(axis=1)


class CenterForce:
    """Translate every node so the mean position drifts toward (cx, cy)."""

    def __init__(self, cx: float, cy: float, strength: float = CENTER_STRENGTH):
        self.cx = cx
        self.cy = cy
        self.strength = strength

    def __call__(self, state: SimulationState, alpha: float) -> None:  # noqa: ARG002
        if not len(state):
            return
        state.x -= (state.x.mean() - self.cx) * self.strength
        state.y -= (state.y.mean() - self.cy) * self.strength


class CollideForce:
    """Push apart nodes whose collision circles overlap."""

    def __init__(self, radii: np.ndarray, strength: float = 1.0, iterations: int = 1):
        self.radii = np.asarray(radii, dtype=np.float64)
        self.strength = strength
        self.iterations = iterations

    def __call__(self, state: SimulationState, alpha: float) -> None:  # noqa: ARG002
        n = len(state)
        radii, radii2 = self.radii, self.radii * self.radii
        x, y, vx, vy = state.x, state.y, state.vx, state.vy

        for _ in range(self.iterations):
            for i in range(n - 1):
                xi, yi = x[i] + vx[i], y[i] + vy[i]
                others = np.arange(i + 1, n)
                dx = xi - x[others] - vx[others]
                dy = yi - y[others] - vy[others]
                reach = radii[i] + radii[others]
                dist2 = dx * dx + dy * dy
                hit = dist2 < reach * reach
                if not hit.any():
                    continue

                others, dx, dy, reach, dist2 = (
                    others[hit],
                    dx[hit],
                    dy[hit],
                    reach[hit],
                    dist2[hit],
                )
                zero_x = dx == 0
                if zero_x.any():
                    dx[zero_x] = state.jiggle(int(zero_x.sum()))
                    dist2[zero_x] += dx[zero_x] ** 2
                zero_y = dy == 0
                if zero_y.any():
                    dy[zero_y] = state.jiggle(int(zero_y.sum()))
                    dist2[zero_y] += dy[zero_y] ** 2

                dist = np.sqrt(dist2)
                scale = (reach - dist) / dist * self.strength
                dx, dy = dx * scale, dy * scale
                share = radii2[others] / (radii2[i] + radii2[others])
                vx[i] += (dx * share).sum()
                vy[i] += (dy * share).sum()
                vx[others] -= dx * (1 - share)
                vy[others] -= dy * (1 - share)


class PositionForce:
    """Pull each node along one axis toward its own target coordinate."""

    def __init__(self, axis: str, targets: np.ndarray, strengths: np.ndarray):
        if axis not in ("x", "y"):
            raise ValueError(f"Unknown axis: {axis}")
        self.axis = axis
        self.targets = np.asarray(targets, dtype=np.float64)
        self.strengths = np.asarray(strengths, dtype=np.float64)

    def __call__(self, state: SimulationState, alpha: float) -> None:
        if self.axis == "x":
            state.vx += (self.targets - state.x) * self.strengths * alpha
        else:
            state.vy += (self.targets - state.y) * self.strengths * alpha
