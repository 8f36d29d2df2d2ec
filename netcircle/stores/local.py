import json
from pathlib import Path
from urllib.parse import quote, unquote

from netcircle.domain.snapshot import NetworkSnapshot
from netcircle.stores.base import SnapshotStore


class LocalSnapshotStore(SnapshotStore):
    """Snapshot store keeping one JSON file per user."""

    def __init__(self, directory: str | Path | None = None) -> None:
        """Initialize LocalSnapshotStore.

        Args:
            directory: Folder holding one ``<user_id>.json`` file per user. Created
                       on first save if missing. If not provided, snapshots are
                       kept in memory only.
        """
        self._directory = Path(directory) if directory else None
        self._memory: dict[str, str] = {}

    def _path(self, user_id: str) -> Path:
        if not self._directory:
            raise ValueError("No directory set during initialization")
        # percent-encoding is reversible, distinct ids never share a file
        name = quote(user_id, safe="")
        if not name.strip("."):
            raise ValueError(f"Invalid user id: {user_id!r}")
        return self._directory / f"{name}.json"

    def load(self, user_id: str) -> NetworkSnapshot | None:
        """Load a user's network, None if nothing was saved yet."""
        if not self._directory:
            raw = self._memory.get(user_id)
            return NetworkSnapshot.model_validate_json(raw) if raw is not None else None

        path = self._path(user_id)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return NetworkSnapshot.model_validate(data)

    def save(self, user_id: str, snapshot: NetworkSnapshot) -> None:
        """Write a user's network as JSON with camelCase keys."""
        payload = snapshot.model_dump_json(by_alias=True)
        if not self._directory:
            self._memory[user_id] = payload
            return

        path = self._path(user_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(payload)
        tmp_path.replace(path)

    def delete(self, user_id: str) -> None:
        if not self._directory:
            self._memory.pop(user_id, None)
            return
        self._path(user_id).unlink(missing_ok=True)

    def user_ids(self) -> list[str]:
        """Ids with a saved network."""
        if not self._directory:
            return sorted(self._memory)
        if not self._directory.exists():
            return []
        return sorted(unquote(path.stem) for path in self._directory.glob("*.json"))
