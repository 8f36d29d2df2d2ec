"""Render a scene as an SVG document."""

from jinja2 import Environment, PackageLoader

from netcircle.render.schemas import Scene

_env = Environment(
    loader=PackageLoader("netcircle.render", "templates"),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_svg(scene: Scene) -> str:
    return _env.get_template("graph.svg.j2").render(scene=scene)
