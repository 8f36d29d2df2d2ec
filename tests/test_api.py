from fastapi.testclient import TestClient

from tests.fakes import FakeSnapshotStore

ALICE = {"X-User-Id": "alice"}


def test_health(test_client: TestClient) -> None:
    response = test_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_new_user_gets_sample_network(
    test_client: TestClient, fake_store: FakeSnapshotStore
) -> None:
    response = test_client.get("/api/network", headers=ALICE)

    assert response.status_code == 200
    data = response.json()
    assert len(data["nodes"]) == 15
    assert len(data["links"]) == 29
    assert "customCategories" in data
    # first access persists the sample network
    assert "alice" in fake_store.snapshots


def test_missing_header_uses_default_user(
    test_client: TestClient, fake_store: FakeSnapshotStore
) -> None:
    test_client.get("/api/network")

    assert "local" in fake_store.snapshots


def test_blank_user_id_is_rejected(test_client: TestClient) -> None:
    response = test_client.get("/api/network", headers={"X-User-Id": "  "})

    assert response.status_code == 401


def test_users_are_isolated(test_client: TestClient) -> None:
    test_client.post("/api/people", json={"name": "Alex", "group": "friends"}, headers=ALICE)

    bob = test_client.get("/api/network", headers={"X-User-Id": "bob"}).json()

    assert all(node["name"] != "Alex" for node in bob["nodes"])


def test_add_person_saves_in_background(
    test_client: TestClient, fake_store: FakeSnapshotStore
) -> None:
    response = test_client.post(
        "/api/people",
        json={"name": "Alex", "group": "friends", "details": "Climbing partner"},
        headers=ALICE,
    )

    assert response.status_code == 201
    result = response.json()
    assert result["ok"]
    saved = fake_store.snapshots["alice"]
    assert any(node.id == result["id"] for node in saved.nodes)

    layout = test_client.get("/api/layout", headers=ALICE).json()
    assert result["id"] in layout["positions"]


def test_add_person_unknown_category(test_client: TestClient) -> None:
    response = test_client.post(
        "/api/people", json={"name": "Alex", "group": "climbing"}, headers=ALICE
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown category: climbing"


def test_duplicate_link_is_rejected(test_client: TestClient) -> None:
    response = test_client.post(
        "/api/links", json={"source": "mom", "target": "me", "strength": 5}, headers=ALICE
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "This relationship already exists"


def test_link_lifecycle(test_client: TestClient) -> None:
    created = test_client.post(
        "/api/links", json={"source": "mom", "target": "gym", "strength": 3}, headers=ALICE
    )
    updated = test_client.patch("/api/links/gym/mom", json={"strength": 6}, headers=ALICE)
    deleted = test_client.delete("/api/links/mom/gym", headers=ALICE)
    missing = test_client.delete("/api/links/mom/gym", headers=ALICE)

    assert created.status_code == 201
    assert updated.status_code == 200
    assert deleted.status_code == 200
    assert missing.status_code == 404


def test_invalid_strength_is_rejected(test_client: TestClient) -> None:
    response = test_client.post(
        "/api/links", json={"source": "mom", "target": "gym", "strength": 11}, headers=ALICE
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Strength must be between 1 and 10"


def test_cannot_delete_self(test_client: TestClient) -> None:
    response = test_client.delete("/api/people/me", headers=ALICE)

    assert response.status_code == 400
    assert response.json()["detail"] == "You can't delete yourself from your own network"


def test_delete_person_cascades(test_client: TestClient) -> None:
    response = test_client.delete("/api/people/mom", headers=ALICE)

    assert response.status_code == 200
    links = test_client.get("/api/network", headers=ALICE).json()["links"]
    assert all("mom" not in (link["source"], link["target"]) for link in links)


def test_update_and_mark_contacted(test_client: TestClient) -> None:
    updated = test_client.patch("/api/people/dad", json={"name": "Papa"}, headers=ALICE)
    contacted = test_client.post(
        "/api/people/dad/contacted", json={"when": "2024-05-01T10:00:00Z"}, headers=ALICE
    )

    assert updated.status_code == 200
    assert contacted.status_code == 200
    dad = next(
        node
        for node in test_client.get("/api/network", headers=ALICE).json()["nodes"]
        if node["id"] == "dad"
    )
    assert dad["name"] == "Papa"
    assert dad["lastContacted"].startswith("2024-05-01T10:00:00")


def test_update_unknown_person(test_client: TestClient) -> None:
    response = test_client.patch("/api/people/ghost", json={"name": "Casper"}, headers=ALICE)

    assert response.status_code == 404


def test_bulk_add(test_client: TestClient) -> None:
    response = test_client.post(
        "/api/people/bulk",
        json={"names": ["Ana", "Bo"], "group": "work", "connectToMe": True},
        headers=ALICE,
    )

    assert response.status_code == 201
    assert len(response.json()["ids"]) == 2
    people = test_client.get("/api/groups/work/people", headers=ALICE).json()
    assert {"Ana", "Bo"} <= {person["name"] for person in people}


def test_connections(test_client: TestClient) -> None:
    response = test_client.get("/api/people/gym/connections", headers=ALICE)

    assert response.status_code == 200
    connections = response.json()
    assert len(connections) == 1
    assert connections[0]["person"]["id"] == "me"
    assert connections[0]["strength"] == 2
    assert test_client.get("/api/people/ghost/connections", headers=ALICE).status_code == 404


def test_metrics(test_client: TestClient) -> None:
    response = test_client.get("/api/metrics", headers=ALICE)

    assert response.status_code == 200
    metrics = response.json()
    assert metrics["totalPeople"] == 14
    assert metrics["totalConnections"] == 29
    assert metrics["strengthBuckets"]["veryStrong"] == 7
    assert len(metrics["neglectedLinks"]) == 4


def test_center_and_selection(test_client: TestClient) -> None:
    centered = test_client.put("/api/center", json={"personId": "mom"}, headers=ALICE)
    selected = test_client.put("/api/selection", json={"personId": "dad"}, headers=ALICE)
    unknown = test_client.put("/api/center", json={"personId": "ghost"}, headers=ALICE)

    assert centered.status_code == 200
    assert centered.json()["centerId"] == "mom"
    assert selected.json() == {"selectedId": "dad"}
    assert unknown.status_code == 404


def test_category_endpoints(test_client: TestClient) -> None:
    created = test_client.post(
        "/api/categories",
        json={"key": "climbing", "label": "Climbing", "color": "#5a9a6b"},
        headers=ALICE,
    )
    recolored = test_client.patch(
        "/api/categories/family", json={"color": "#112233"}, headers=ALICE
    )
    hidden = test_client.delete("/api/categories/work", headers=ALICE)
    protected = test_client.delete("/api/categories/friends", headers=ALICE)

    assert created.status_code == 201
    assert recolored.status_code == 200
    assert hidden.status_code == 200
    assert protected.status_code == 400

    categories = {
        c["key"]: c for c in test_client.get("/api/categories", headers=ALICE).json()
    }
    assert categories["climbing"]["kind"] == "custom"
    assert categories["family"]["color"] == "#112233"
    assert categories["work"]["hidden"]

    legend = [entry["key"] for entry in test_client.get("/api/legend", headers=ALICE).json()]
    assert "work" not in legend

    restored = test_client.post("/api/categories/work/restore", headers=ALICE)
    assert restored.status_code == 200


def test_reset(test_client: TestClient) -> None:
    test_client.delete("/api/people/mom", headers=ALICE)

    response = test_client.post("/api/network/reset", headers=ALICE)

    assert response.status_code == 200
    assert "mom" in response.json()["positions"]


def test_explicit_save_failure_is_reported(
    test_client: TestClient, fake_store: FakeSnapshotStore
) -> None:
    test_client.get("/api/network", headers=ALICE)
    fake_store.fail_save = True

    response = test_client.post("/api/network/save", headers=ALICE)
    still_usable = test_client.post(
        "/api/people", json={"name": "Alex", "group": "friends"}, headers=ALICE
    )

    assert response.json() == {"saved": False}
    assert still_usable.status_code == 201


def test_load_failure_falls_back(fake_store: FakeSnapshotStore, test_client: TestClient) -> None:
    fake_store.fail_load = True

    response = test_client.get("/api/network", headers=ALICE)

    assert response.status_code == 200
    assert len(response.json()["nodes"]) == 15


def test_graph_svg(test_client: TestClient) -> None:
    response = test_client.get("/graph.svg", params={"hovered": "bestfriend"}, headers=ALICE)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert 'data-id="bestfriend"' in response.text
    assert 'class="network-tooltip"' in response.text
    assert test_client.get("/graph.svg", params={"hovered": "ghost"}).status_code == 404


def test_saves_run_on_the_event_loop(
    test_client: TestClient, fake_store: FakeSnapshotStore
) -> None:
    test_client.post("/api/people", json={"name": "Alex", "group": "friends"}, headers=ALICE)
    test_client.post(
        "/api/links", json={"source": "mom", "target": "gym", "strength": 3}, headers=ALICE
    )
    test_client.delete("/api/people/dad", headers=ALICE)

    assert fake_store.save_calls == 4
    assert fake_store.threaded_save_calls == 0


def test_self_group_is_reserved(test_client: TestClient) -> None:
    response = test_client.post(
        "/api/people", json={"name": "Impostor", "group": "me"}, headers=ALICE
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Only you belong to your own group"
