"""Pointer handling: hover, selection, drag, zoom and pan."""

from typing import Callable

from netcircle.layout.engine import LayoutEngine
from netcircle.layout.schemas import Position
from netcircle.render.schemas import ViewTransform

MIN_ZOOM = 0.2
MAX_ZOOM = 4.0
INITIAL_SCALE = 0.85

SelectionListener = Callable[[str | None], None]


def initial_transform(width: float, height: float, scale: float = INITIAL_SCALE) -> ViewTransform:
    """Slightly zoomed-out view keeping the layout area centred."""
    return ViewTransform(
        k=scale,
        x=width * (1 - scale) / 2,
        y=height * (1 - scale) / 2,
    )


class InteractionSurface:
    """Turns pointer events into layout pins or selection changes.

    Hover and selection are purely visual state owned here. Dragging pins the
    node in the layout engine and reheats it. Selection changes are reported
    to listeners and never touch the network itself.
    """

    def __init__(self, engine: LayoutEngine) -> None:
        self.engine = engine
        self.transform = initial_transform(engine.width, engine.height)
        self.hovered_id: str | None = None
        self.selected_id: str | None = None
        self._listeners: list[SelectionListener] = []

    def on_select(self, listener: SelectionListener) -> None:
        self._listeners.append(listener)

    def reset_view(self) -> None:
        self.transform = initial_transform(self.engine.width, self.engine.height)

    @property
    def dragging_id(self) -> str | None:
        return self.engine.dragging

    # Hover

    def pointer_enter(self, node_id: str) -> None:
        self.hovered_id = node_id

    def pointer_leave(self, node_id: str) -> None:
        if self.hovered_id == node_id:
            self.hovered_id = None

    # Selection

    def click(self, node_id: str | None) -> None:
        """Select a node, toggle it off when clicked again, clear on background."""
        if node_id is not None and node_id == self.selected_id:
            node_id = None
        self.select(node_id)

    def select(self, node_id: str | None) -> None:
        if node_id == self.selected_id:
            return
        self.selected_id = node_id
        for listener in self._listeners:
            listener(node_id)

    def forget_missing(self, node_ids: set[str]) -> None:
        """Drop hover and selection pointing at nodes that no longer exist."""
        if self.hovered_id is not None and self.hovered_id not in node_ids:
            self.hovered_id = None
        if self.selected_id is not None and self.selected_id not in node_ids:
            self.select(None)

    # Dragging

    def pointer_down(self, node_id: str) -> None:
        self.engine.drag_start(node_id)

    def pointer_move(self, sx: float, sy: float) -> dict[str, Position]:
        """Follow the pointer while dragging and advance the layout one tick."""
        node_id = self.engine.dragging
        if node_id is None:
            return self.engine.current_layout()
        wx, wy = self.transform.invert(sx, sy)
        self.engine.drag_move(node_id, wx, wy)
        return self.engine.step()

    def pointer_up(self) -> None:
        node_id = self.engine.dragging
        if node_id is not None:
            self.engine.drag_end(node_id)

    # View transform

    def zoom(self, factor: float, sx: float, sy: float) -> ViewTransform:
        """Scale around the screen point (sx, sy), clamped to the zoom range."""
        k = min(MAX_ZOOM, max(MIN_ZOOM, self.transform.k * factor))
        wx, wy = self.transform.invert(sx, sy)
        self.transform = ViewTransform(k=k, x=sx - wx * k, y=sy - wy * k)
        return self.transform

    def pan(self, dx: float, dy: float) -> ViewTransform:
        t = self.transform
        self.transform = ViewTransform(k=t.k, x=t.x + dx, y=t.y + dy)
        return self.transform

    def node_at_screen(self, sx: float, sy: float) -> str | None:
        wx, wy = self.transform.invert(sx, sy)
        return self.engine.node_at(wx, wy)
