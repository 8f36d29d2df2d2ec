from tests.fakes.fake_snapshot_store import FakeSnapshotStore

__all__ = ["FakeSnapshotStore"]
