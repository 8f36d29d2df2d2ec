import sys

from loguru import logger

from netcircle.api import create_app
from netcircle.config import settings
from netcircle.stores.local import LocalSnapshotStore

logger.configure(handlers=[{"sink": sys.stderr, "level": settings.log_level}])

logger.info(f"Storing networks in {settings.snapshot_dir}")
store = LocalSnapshotStore(settings.snapshot_dir)
app = create_app(store=store)
