from netcircle.network.model import NetworkModel
from netcircle.network.schemas import Connection, MutationResult

__all__ = [
    "Connection",
    "MutationResult",
    "NetworkModel",
]
