from loguru import logger

from netcircle.session import NetworkSession
from netcircle.stores.base import SnapshotStore


class SessionRegistry:
    """Keeps one loaded session per user for the lifetime of the app."""

    def __init__(self, store: SnapshotStore) -> None:
        self.store = store
        self._sessions: dict[str, NetworkSession] = {}

    def get(self, user_id: str) -> NetworkSession:
        """Return the user's session, loading it on first access.

        A user seen for the first time gets the default network, which is
        persisted straight away.
        """
        session = self._sessions.get(user_id)
        if session is not None:
            return session

        logger.info(f"Loading network for {user_id}")
        session = NetworkSession(self.store, user_id)
        session.load()
        if session.dirty and not session.save():
            logger.warning(f"Could not persist initial network for {user_id}")
        self._sessions[user_id] = session
        return session

    def drop(self, user_id: str) -> None:
        self._sessions.pop(user_id, None)

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._sessions
