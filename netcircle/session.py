"""Per-user session: the in-process API consumed by a UI shell."""

import logging
from datetime import datetime, timezone
from typing import Callable

import numpy as np

from netcircle.config import settings
from netcircle.domain.person import SELF_ID, Person
from netcircle.domain.sample import sample_snapshot
from netcircle.domain.snapshot import NetworkSnapshot
from netcircle.layout.engine import LayoutEngine
from netcircle.layout.schemas import Position
from netcircle.metrics.analyzer import legend_entries
from netcircle.metrics.health import compute_metrics
from netcircle.metrics.schemas import LegendEntry, NetworkMetrics
from netcircle.network.model import NetworkModel
from netcircle.network.schemas import Connection, MutationResult
from netcircle.render.interaction import InteractionSurface
from netcircle.render.scene import build_scene
from netcircle.render.schemas import Scene
from netcircle.render.svg import render_svg
from netcircle.stores.base import SnapshotStore

logger = logging.getLogger(__name__)

ChangeListener = Callable[[NetworkSnapshot], None]
SaveErrorListener = Callable[[Exception], None]


def default_snapshot() -> NetworkSnapshot:
    return sample_snapshot() if settings.seed_sample_network else NetworkSnapshot.empty()


def default_engine() -> LayoutEngine:
    return LayoutEngine(
        width=settings.layout_width,
        height=settings.layout_height,
        iterations=settings.layout_iterations,
        rng=np.random.default_rng(settings.layout_seed),
    )


class NetworkSession:
    """One user's network together with its layout and interaction state.

    Mutations go through the network model and, when accepted, trigger a
    synchronous relayout before change listeners are told. Persisting is left
    to the host, which calls ``save()`` whenever it sees fit.
    """

    def __init__(
        self,
        store: SnapshotStore,
        user_id: str,
        *,
        engine: LayoutEngine | None = None,
        snapshot_factory: Callable[[], NetworkSnapshot] = default_snapshot,
    ) -> None:
        """Initialize the session.

        Args:
            store: Persistence collaborator
            user_id: Opaque id of the current user
            engine: Layout engine, built from settings if None
            snapshot_factory: Produces the network used when nothing can be loaded
        """
        self.store = store
        self.user_id = user_id
        self.engine = engine or default_engine()
        self.surface = InteractionSurface(self.engine)
        self.snapshot_factory = snapshot_factory
        self.model = NetworkModel(NetworkSnapshot.empty())
        self.dirty = False
        self._change_listeners: list[ChangeListener] = []
        self._save_error_listeners: list[SaveErrorListener] = []

    def on_change(self, listener: ChangeListener) -> None:
        self._change_listeners.append(listener)

    def on_save_error(self, listener: SaveErrorListener) -> None:
        self._save_error_listeners.append(listener)

    # Persistence

    def load(self) -> None:
        """Load the user's network, falling back to the default network."""
        try:
            snapshot = self.store.load(self.user_id)
        except Exception as e:
            logger.error(f"Failed to load network for {self.user_id}: {e}")
            snapshot = None
            self.dirty = False
        else:
            self.dirty = snapshot is None

        if snapshot is None:
            snapshot = self.snapshot_factory()
        self.model = NetworkModel.from_snapshot(snapshot)
        self.engine.set_center(SELF_ID)
        self.relayout()

    def save(self) -> bool:
        """Hand the current snapshot to the store.

        Failures are reported to save-error listeners and never raise, the
        in-memory network stays usable.

        Returns:
            True if the store accepted the snapshot
        """
        snapshot = self.model.snapshot()
        snapshot.updated_at = datetime.now(timezone.utc)
        try:
            self.store.save(self.user_id, snapshot)
        except Exception as e:
            logger.error(f"Failed to save network for {self.user_id}: {e}")
            for listener in self._save_error_listeners:
                listener(e)
            return False

        self.model.updated_at = snapshot.updated_at
        self.dirty = False
        return True

    def reset(self) -> None:
        """Replace the network with the default one."""
        self.model = NetworkModel.from_snapshot(self.snapshot_factory())
        self.engine.set_center(SELF_ID)
        self._changed()

    # Layout and derived data

    def relayout(self) -> dict[str, Position]:
        if self.engine.center_id not in {node.id for node in self.model.nodes}:
            self.engine.set_center(SELF_ID)
        layout = self.engine.compute(
            self.model.nodes,
            self.model.links,
            custom_groups=[
                key for key, cat in self.model.categories().items() if cat.kind == "custom"
            ],
        )
        self.surface.forget_missing(set(layout))
        return layout

    def recenter(self, person_id: str) -> MutationResult:
        """Pin another person at the center and lay out from scratch."""
        if self.model.person(person_id) is None:
            return MutationResult.failure(f"Person {person_id} not found")
        self.engine.set_center(person_id)
        self.relayout()
        return MutationResult.success(id=person_id)

    @property
    def center_id(self) -> str:
        return self.engine.center_id

    def current_layout(self) -> dict[str, Position]:
        return self.engine.current_layout()

    def metrics_snapshot(self) -> NetworkMetrics:
        return compute_metrics(self.model.snapshot())

    def legend(self) -> list[LegendEntry]:
        return legend_entries(self.model.nodes, self.model.categories())

    def connections(self, person_id: str) -> list[Connection]:
        return self.model.connections(person_id)

    def people_in_group(self, group: str) -> list[Person]:
        return self.model.people_in_group(group)

    def scene(self) -> Scene:
        return build_scene(
            self.model.snapshot(),
            self.engine.current_layout(),
            center_id=self.engine.center_id,
            width=self.engine.width,
            height=self.engine.height,
            transform=self.surface.transform,
            radii={node.id: self.engine.radius(node.id) for node in self.model.nodes},
            selected_id=self.surface.selected_id,
            hovered_id=self.surface.hovered_id,
        )

    def render_svg(self) -> str:
        return render_svg(self.scene())

    # Mutations

    def _apply(self, result: MutationResult) -> MutationResult:
        if result.ok:
            self._changed()
        else:
            logger.info(f"Rejected change for {self.user_id}: {result.error}")
        return result

    def _changed(self) -> None:
        self.dirty = True
        self.relayout()
        snapshot = self.model.snapshot()
        for listener in self._change_listeners:
            listener(snapshot)

    def add_person(self, name: str, group: str, **kwargs) -> MutationResult:
        return self._apply(self.model.add_person(name, group, **kwargs))

    def update_person(self, person_id: str, **changes) -> MutationResult:
        return self._apply(self.model.update_person(person_id, **changes))

    def delete_person(self, person_id: str) -> MutationResult:
        return self._apply(self.model.delete_person(person_id))

    def mark_contacted(self, person_id: str, when: datetime | None = None) -> MutationResult:
        return self._apply(self.model.mark_contacted(person_id, when))

    def bulk_add_people(self, names: list[str], group: str, **kwargs) -> MutationResult:
        return self._apply(self.model.bulk_add_people(names, group, **kwargs))

    def add_link(self, source: str, target: str, strength: int) -> MutationResult:
        return self._apply(self.model.add_link(source, target, strength))

    def update_link(self, source: str, target: str, strength: int) -> MutationResult:
        return self._apply(self.model.update_link(source, target, strength))

    def delete_link(self, source: str, target: str) -> MutationResult:
        return self._apply(self.model.delete_link(source, target))

    def add_category(self, key: str, label: str, color: str) -> MutationResult:
        return self._apply(self.model.add_category(key, label, color))

    def update_category(
        self, key: str, label: str | None = None, color: str | None = None
    ) -> MutationResult:
        return self._apply(self.model.update_category(key, label, color))

    def delete_category(self, key: str) -> MutationResult:
        return self._apply(self.model.delete_category(key))

    def set_default_category_color(self, key: str, color: str) -> MutationResult:
        return self._apply(self.model.set_default_category_color(key, color))

    def delete_default_category(self, key: str) -> MutationResult:
        return self._apply(self.model.delete_default_category(key))

    def restore_default_category(self, key: str) -> MutationResult:
        return self._apply(self.model.restore_default_category(key))
