import tempfile
from pathlib import Path
from typing import Generator

import numpy as np
import pytest
from fastapi.testclient import TestClient

from netcircle.api import create_app
from netcircle.domain.person import Link, Person
from netcircle.domain.sample import sample_snapshot
from netcircle.domain.snapshot import NetworkSnapshot
from netcircle.layout.engine import LayoutEngine
from netcircle.network.model import NetworkModel
from netcircle.session import NetworkSession
from tests.fakes import FakeSnapshotStore


@pytest.fixture
def empty_model() -> NetworkModel:
    return NetworkModel(NetworkSnapshot.empty())


@pytest.fixture
def sample_model() -> NetworkModel:
    return NetworkModel(sample_snapshot())


@pytest.fixture
def bridge_snapshot() -> NetworkSnapshot:
    """Self plus A and C in family, B at work, with links A-B and A-C."""
    return NetworkSnapshot(
        nodes=[
            Person(id="me", name="Me", group="me"),
            Person(id="a", name="Ada", group="family"),
            Person(id="b", name="Ben", group="work"),
            Person(id="c", name="Cleo", group="family"),
        ],
        links=[
            Link(source="a", target="b", strength=5),
            Link(source="a", target="c", strength=5),
        ],
    )


@pytest.fixture
def layout_engine() -> LayoutEngine:
    return LayoutEngine(width=960, height=640, rng=np.random.default_rng(42))


@pytest.fixture
def fake_store() -> FakeSnapshotStore:
    return FakeSnapshotStore()


@pytest.fixture
def session(fake_store: FakeSnapshotStore) -> NetworkSession:
    """Loaded session on an empty network with a seeded layout."""
    session = NetworkSession(
        fake_store,
        "alice",
        engine=LayoutEngine(rng=np.random.default_rng(7)),
        snapshot_factory=NetworkSnapshot.empty,
    )
    session.load()
    return session


@pytest.fixture(autouse=True)
def mock_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Override settings for testing."""
    monkeypatch.setattr("netcircle.config.settings.layout_seed", 7)
    monkeypatch.setattr("netcircle.config.settings.seed_sample_network", True)
    monkeypatch.setattr("netcircle.config.settings.default_user_id", "local")


@pytest.fixture
def test_client(fake_store: FakeSnapshotStore) -> TestClient:
    """Create test client with a fake snapshot store."""
    app = create_app(store=fake_store)
    return TestClient(app)


@pytest.fixture
def temp_snapshot_dir() -> Generator[Path, None, None]:
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)
