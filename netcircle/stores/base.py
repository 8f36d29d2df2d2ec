from typing import Protocol

from netcircle.domain.snapshot import NetworkSnapshot


class SnapshotStore(Protocol):
    """Protocol for per-user network persistence."""

    def load(self, user_id: str) -> NetworkSnapshot | None:
        """Load a user's network, None if nothing was saved yet."""
        ...

    def save(self, user_id: str, snapshot: NetworkSnapshot) -> None:
        """Persist a user's network, replacing any previous version."""
        ...

    def delete(self, user_id: str) -> None:
        """Remove a user's saved network."""
        ...
