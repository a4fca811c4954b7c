from app.core.config import get_settings


def register_and_login(client, email: str, role: str = "lecturer") -> dict[str, str]:
    client.post(
        "/api/auth/register",
        json={
            "email": email,
            "password": "password123",
            "firstName": "Sync",
            "lastName": "User",
            "role": role,
        },
    )
    response = client.post("/api/auth/login", json={"email": email, "password": "password123"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def exam_data(**overrides) -> dict:
    data = {
        "courseCode": "CS101",
        "courseName": "Intro to Computing",
        "date": "2024-12-15",
        "time": "09:00",
        "venue": "Room 101",
        "duration": 120,
    }
    data.update(overrides)
    return data


def test_offline_sync_requires_authentication(client):
    assert client.get("/api/offline-sync/snapshot").status_code == 401
    assert client.post("/api/offline-sync/sync", json={"changes": []}).status_code == 401


def test_sync_conflict_then_resolve(client):
    headers = register_and_login(client, "lecturer@example.com")
    client.post("/api/exams", json=exam_data(time="10:00", duration=60), headers=headers)

    response = client.post(
        "/api/offline-sync/sync",
        json={
            "deviceId": "tablet-7",
            "changes": [
                {"id": 1, "type": "exam", "action": "create", "data": exam_data(), "timestamp": "2024-12-01T10:00:00Z"},
                {"id": "c-2", "type": "exam", "action": "create", "data": exam_data(venue="Room 202", time="14:00")},
                {"id": "c-3", "type": "calendar", "action": "create", "data": {}},
            ],
        },
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["summary"] == {"total": 3, "processed": 3, "successful": 2, "failed": 1, "conflicts": 1}
    assert body["message"] == "Offline sync completed: 2 successful, 1 failed"
    assert [item["action"] for item in body["successful"]] == ["pending_resolution", "created"]
    assert body["conflicts"][0]["changeId"] == "1"
    assert body["failed"][0]["errorType"] == "UnknownChangeTypeError"

    pending = client.get("/api/offline-sync/pending-changes", headers=headers).json()["pendingChanges"]
    assert [(item["change_id"], item["change_type"], item["device_id"]) for item in pending] == [
        ("1", "exam", "tablet-7")
    ]

    status = client.get("/api/offline-sync/queue-status", headers=headers).json()["queueStatus"]
    assert status["hasPendingChanges"] is True
    assert status["examChanges"] == 1

    resolved = client.post(
        "/api/offline-sync/resolve-change/1",
        json={"resolution": "accept"},
        headers=headers,
    )
    assert resolved.status_code == 200
    assert resolved.json()["result"]["action"] == "created"

    assert client.get("/api/offline-sync/pending-changes", headers=headers).json()["pendingChanges"] == []
    assert len(client.get("/api/exams").json()) == 3


def test_pending_changes_are_private(client):
    owner = register_and_login(client, "owner@example.com")
    other = register_and_login(client, "other@example.com")
    client.post("/api/exams", json=exam_data(), headers=owner)
    client.post(
        "/api/offline-sync/sync",
        json={"changes": [{"id": "c-1", "type": "exam", "action": "create", "data": exam_data()}]},
        headers=owner,
    )

    assert client.get("/api/offline-sync/pending-changes", headers=other).json()["pendingChanges"] == []
    foreign = client.post("/api/offline-sync/resolve-change/c-1", json={"resolution": "accept"}, headers=other)
    assert foreign.status_code == 404


def test_resolve_modify_without_data_returns_400(client):
    headers = register_and_login(client, "lecturer@example.com")
    client.post("/api/exams", json=exam_data(), headers=headers)
    client.post(
        "/api/offline-sync/sync",
        json={"changes": [{"id": "c-1", "type": "exam", "action": "create", "data": exam_data()}]},
        headers=headers,
    )

    response = client.post("/api/offline-sync/resolve-change/c-1", json={"resolution": "modify"}, headers=headers)

    assert response.status_code == 400
    assert len(client.get("/api/offline-sync/pending-changes", headers=headers).json()["pendingChanges"]) == 1


def test_sync_rejects_oversized_batch(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "sync_max_batch_size", 2)
    headers = register_and_login(client, "lecturer@example.com")
    changes = [{"id": f"c-{index}", "type": "notification", "action": "mark_read", "data": {"id": "x"}} for index in range(3)]

    response = client.post("/api/offline-sync/sync", json={"changes": changes}, headers=headers)

    assert response.status_code == 400
    assert response.json()["details"] == {"received": 3, "max": 2}


def test_snapshot_endpoint(client):
    headers = register_and_login(client, "lecturer@example.com")
    client.post("/api/exams", json=exam_data(), headers=headers)
    # Sync leaves a summary notification behind.
    client.post("/api/offline-sync/sync", json={"changes": []}, headers=headers)

    snapshot = client.get("/api/offline-sync/snapshot", headers=headers).json()["snapshot"]
    assert snapshot["user"]["email"] == "lecturer@example.com"
    assert len(snapshot["data"]["exams"]) == 1
    assert snapshot["data"]["notifications"][0]["title"] == "Offline sync"
    assert snapshot["data"]["userPreferences"]["theme"] == "light"

    again = client.get("/api/offline-sync/snapshot", headers=headers).json()["snapshot"]
    assert again["version"] == snapshot["version"]

    exams_only = client.get(
        "/api/offline-sync/snapshot",
        params={"includeNotifications": "false"},
        headers=headers,
    ).json()["snapshot"]
    assert "notifications" not in exams_only["data"]
    assert "exams" in exams_only["data"]


def test_malformed_item_fails_alone(client):
    headers = register_and_login(client, "lecturer@example.com")

    response = client.post(
        "/api/offline-sync/sync",
        json={
            "changes": [
                {"id": "c-1", "type": "exam", "action": "create", "data": exam_data()},
                {"id": "c-2", "type": "exam", "action": "create", "data": None},
                {"id": "c-3", "type": "exam", "action": "create", "data": exam_data(venue="Room 202", time="14:00")},
            ]
        },
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["summary"]["failed"] == 1
    assert body["summary"]["successful"] == 2
    assert [item["changeId"] for item in body["successful"]] == ["c-1", "c-3"]
    assert body["failed"][0]["changeId"] == "c-2"
    assert body["failed"][0]["errorType"] == "ValidationError"
    assert len(client.get("/api/exams").json()) == 2


def test_items_with_wrong_shapes_are_reported_per_item(client):
    headers = register_and_login(client, "lecturer@example.com")

    response = client.post(
        "/api/offline-sync/sync",
        json={
            "changes": [
                {"id": "c-1", "type": 7, "action": "create", "data": exam_data()},
                {"id": "c-2", "type": "exam", "action": ["create"], "data": exam_data()},
                {"id": "c-3", "type": "exam", "action": "create", "data": [1, 2]},
                {"type": "exam", "action": "create", "data": exam_data()},
                "not-an-object",
                {"id": 6, "type": "exam", "action": "create", "data": exam_data(time="16:00", venue="Hall A")},
            ]
        },
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["summary"] == {"total": 6, "processed": 6, "successful": 1, "failed": 5, "conflicts": 0}
    assert [failure["errorType"] for failure in body["failed"]] == [
        "UnknownChangeTypeError",
        "UnknownActionError",
        "ValidationError",
        "ValidationError",
        "ValidationError",
    ]
    assert body["successful"][0]["changeId"] == "6"
