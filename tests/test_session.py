"""Tests for NetworkSession: persistence, relayout and change notification."""

import numpy as np

from netcircle.domain.person import SELF_ID
from netcircle.domain.sample import sample_snapshot
from netcircle.domain.snapshot import NetworkSnapshot
from netcircle.layout.engine import LayoutEngine
from netcircle.session import NetworkSession
from tests.fakes import FakeSnapshotStore


def _session(store: FakeSnapshotStore, **kwargs) -> NetworkSession:
    return NetworkSession(
        store, "alice", engine=LayoutEngine(rng=np.random.default_rng(7)), **kwargs
    )


def test_load_existing_network() -> None:
    store = FakeSnapshotStore({"alice": sample_snapshot()})
    session = _session(store)

    session.load()

    assert len(session.model.nodes) == 15
    assert not session.dirty
    assert set(session.current_layout()) == {node.id for node in session.model.nodes}


def test_load_new_user_gets_sample_network() -> None:
    session = _session(FakeSnapshotStore())

    session.load()

    assert len(session.model.nodes) == 15
    assert session.dirty


def test_load_new_user_without_sample(monkeypatch) -> None:  # noqa: ANN001
    monkeypatch.setattr("netcircle.config.settings.seed_sample_network", False)
    session = _session(FakeSnapshotStore())

    session.load()

    assert [node.id for node in session.model.nodes] == [SELF_ID]


def test_load_failure_falls_back_to_default() -> None:
    session = _session(FakeSnapshotStore(fail_load=True), snapshot_factory=NetworkSnapshot.empty)

    session.load()

    assert [node.id for node in session.model.nodes] == [SELF_ID]
    assert session.current_layout()[SELF_ID] is not None


def test_mutation_relayouts_and_notifies(session: NetworkSession) -> None:
    changes = []
    session.on_change(changes.append)

    result = session.add_person("Alex", "friends")

    assert result.ok
    assert result.id in session.current_layout()
    assert len(changes) == 1
    assert any(node.id == result.id for node in changes[0].nodes)
    assert session.dirty


def test_rejected_mutation_does_not_notify(session: NetworkSession) -> None:
    changes = []
    session.on_change(changes.append)

    result = session.delete_person(SELF_ID)

    assert not result.ok
    assert changes == []


def test_end_to_end_first_friend(session: NetworkSession) -> None:
    alex_id = session.add_person("Alex", "friends").id
    session.add_link(SELF_ID, alex_id, 8)

    metrics = session.metrics_snapshot()

    assert len(session.model.nodes) == 2
    assert metrics.total_connections == 1
    assert metrics.avg_connections_per_person == 1.0
    assert metrics.density == 100.0
    assert session.metrics_snapshot() == metrics


def test_save_round_trip(session: NetworkSession, fake_store: FakeSnapshotStore) -> None:
    session.add_person("Alex", "friends")

    assert session.save()
    assert not session.dirty
    saved = fake_store.snapshots["alice"]
    assert [node.name for node in saved.nodes] == ["Me", "Alex"]
    assert saved.updated_at is not None


def test_save_failure_is_reported_and_not_fatal() -> None:
    store = FakeSnapshotStore(fail_save=True)
    session = _session(store, snapshot_factory=NetworkSnapshot.empty)
    session.load()
    errors = []
    session.on_save_error(errors.append)

    assert not session.save()
    assert len(errors) == 1
    assert isinstance(errors[0], OSError)

    # the in-memory network stays usable
    assert session.add_person("Alex", "friends").ok
    assert session.dirty


def test_delete_selected_person_clears_selection(session: NetworkSession) -> None:
    person_id = session.add_person("Alex", "friends").id
    session.surface.select(person_id)
    session.surface.pointer_enter(person_id)

    session.delete_person(person_id)

    assert session.surface.selected_id is None
    assert session.surface.hovered_id is None
    assert person_id not in session.current_layout()


def test_recenter(session: NetworkSession) -> None:
    person_id = session.add_person("Alex", "friends").id
    session.add_link(SELF_ID, person_id, 5)

    assert session.recenter(person_id).ok
    assert session.center_id == person_id
    assert session.engine.radius(person_id) == 32
    assert not session.recenter("ghost").ok
    assert session.center_id == person_id


def test_deleting_center_falls_back_to_self(session: NetworkSession) -> None:
    person_id = session.add_person("Alex", "friends").id
    session.recenter(person_id)

    session.delete_person(person_id)

    assert session.center_id == SELF_ID


def test_reset_restores_default_network(session: NetworkSession) -> None:
    session.add_person("Alex", "friends")
    changes = []
    session.on_change(changes.append)

    session.reset()

    assert [node.id for node in session.model.nodes] == [SELF_ID]
    assert len(changes) == 1


def test_category_changes_flow_through(session: NetworkSession) -> None:
    assert session.add_category("climbing", "Climbing", "#5a9a6b").ok
    person_id = session.add_person("Kim", "climbing").id

    legend = {entry.key: entry.count for entry in session.legend()}
    assert legend["climbing"] == 1
    assert [p.id for p in session.people_in_group("climbing")] == [person_id]

    assert session.delete_category("climbing").ok
    assert session.model.person(person_id).group == "friends"


def test_render_svg_reflects_selection(session: NetworkSession) -> None:
    person_id = session.add_person("Alex", "friends").id
    session.add_link(SELF_ID, person_id, 8)
    session.surface.select(person_id)

    svg = session.render_svg()

    assert f'data-id="{person_id}"' in svg
    assert 'stroke="#1e293b"' in svg
    assert session.connections(person_id)[0].person.id == SELF_ID
