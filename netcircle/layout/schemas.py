from pydantic import BaseModel


class Position(BaseModel):
    """Layout coordinates of one node."""

    x: float
    y: float
    pinned: bool = False
