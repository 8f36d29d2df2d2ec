from netcircle.stores.base import SnapshotStore
from netcircle.stores.local import LocalSnapshotStore

__all__ = ["LocalSnapshotStore", "SnapshotStore"]
