from pydantic import BaseModel


class GradientStop(BaseModel):
    offset: float  # percent
    color: str
    opacity: float = 1.0


class NodeStyle(BaseModel):
    radius: float
    stroke: str
    stroke_width: float
    filter: str
    ring_radius: float | None = None
    initial_size: int
    label_size: int
    label_weight: int
    label_offset: float


class LinkStyle(BaseModel):
    color: str
    opacity: float
    width: float


class Tooltip(BaseModel):
    """Hover card for a node."""

    name: str
    group: str
    group_label: str
    color: str
    bridge_groups: list[str] = []
    bridge_labels: list[str] = []
    bridge_colors: list[str] = []


class NodeGlyph(BaseModel):
    id: str
    name: str
    initial: str
    group: str
    x: float
    y: float
    fill: str  # gradient id
    style: NodeStyle
    is_center: bool = False
    bridge_groups: list[str] = []
    bridge_marker_color: str | None = None


class LinkGlyph(BaseModel):
    source: str
    target: str
    strength: int
    path: str
    curved: bool
    style: LinkStyle


class Gradient(BaseModel):
    id: str
    kind: str  # "radial" or "linear"
    stops: list[GradientStop]


class ViewTransform(BaseModel):
    """Scale-then-translate view transform: screen = world * k + (x, y)."""

    k: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def apply(self, wx: float, wy: float) -> tuple[float, float]:
        return wx * self.k + self.x, wy * self.k + self.y

    def invert(self, sx: float, sy: float) -> tuple[float, float]:
        return (sx - self.x) / self.k, (sy - self.y) / self.k

    @property
    def svg(self) -> str:
        return f"translate({self.x:.2f},{self.y:.2f}) scale({self.k:.4f})"


class Scene(BaseModel):
    """Everything needed to draw one frame of the graph."""

    width: float
    height: float
    transform: ViewTransform
    gradients: list[Gradient]
    links: list[LinkGlyph]
    nodes: list[NodeGlyph]
    selected_id: str | None = None
    hovered_id: str | None = None
    tooltip: Tooltip | None = None
    has_bridges: bool = False
