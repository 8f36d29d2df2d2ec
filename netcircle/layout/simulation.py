"""Iterative relaxation with alpha cooling."""

import numpy as np

from netcircle.layout.forces import Force, SimulationState

ALPHA_MIN = 0.001
DEFAULT_ITERATIONS = 300
VELOCITY_DECAY = 0.4
DRAG_ALPHA_TARGET = 0.3


def alpha_decay_for(iterations: int, alpha_min: float = ALPHA_MIN) -> float:
    """Decay rate that cools alpha from 1 to ``alpha_min`` in ``iterations`` ticks."""
    return 1 - alpha_min ** (1 / iterations)


class Simulation:
    """Advance a set of forces one tick at a time.

    The simulation never schedules itself. Callers either loop over
    ``step()`` to a fixed budget (batch layout) or call it once per frame
    while the user drags a node.
    """

    def __init__(
        self,
        state: SimulationState,
        forces: list[Force],
        *,
        alpha: float = 1.0,
        alpha_min: float = ALPHA_MIN,
        alpha_decay: float | None = None,
        velocity_decay: float = VELOCITY_DECAY,
    ) -> None:
        self.state = state
        self.forces = forces
        self.alpha = alpha
        self.alpha_min = alpha_min
        self.alpha_decay = alpha_decay if alpha_decay is not None else alpha_decay_for(
            DEFAULT_ITERATIONS, alpha_min
        )
        self.alpha_target = 0.0
        self.velocity_decay = velocity_decay

    @property
    def settled(self) -> bool:
        return self.alpha < self.alpha_min and self.alpha_target < self.alpha_min

    def step(self) -> None:
        self.alpha += (self.alpha_target - self.alpha) * self.alpha_decay
        for force in self.forces:
            force(self.state, self.alpha)

        s = self.state
        s.vx *= 1 - self.velocity_decay
        s.vy *= 1 - self.velocity_decay
        s.x += s.vx
        s.y += s.vy

        pinned = ~np.isnan(s.fx)
        if pinned.any():
            s.x[pinned] = s.fx[pinned]
            s.y[pinned] = s.fy[pinned]
            s.vx[pinned] = 0.0
            s.vy[pinned] = 0.0

    def run(self, iterations: int) -> None:
        for _ in range(iterations):
            self.step()

    def pin(self, node_id: str, x: float, y: float) -> None:
        """Fix a node at (x, y) until unpinned, the latest pin wins."""
        i = self.state.index[node_id]
        self.state.fx[i] = x
        self.state.fy[i] = y

    def unpin(self, node_id: str) -> None:
        i = self.state.index[node_id]
        self.state.fx[i] = np.nan
        self.state.fy[i] = np.nan

    def is_pinned(self, node_id: str) -> bool:
        return not np.isnan(self.state.fx[self.state.index[node_id]])

    def reheat(self, target: float = DRAG_ALPHA_TARGET) -> None:
        self.alpha_target = target

    def cool(self) -> None:
        self.alpha_target = 0.0
