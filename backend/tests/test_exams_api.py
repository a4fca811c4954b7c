def register_and_login(client, email: str, role: str) -> dict[str, str]:
    client.post(
        "/api/auth/register",
        json={
            "email": email,
            "password": "password123",
            "firstName": "Test",
            "lastName": role.title(),
            "role": role,
        },
    )
    response = client.post("/api/auth/login", json={"email": email, "password": "password123"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def exam_payload(**overrides) -> dict:
    payload = {
        "courseCode": "CS101",
        "courseName": "Intro to Computing",
        "date": "2024-12-15",
        "time": "10:00",
        "venue": "Room 101",
        "duration": 60,
    }
    payload.update(overrides)
    return payload


def test_exam_crud_flow(client):
    headers = register_and_login(client, "lecturer@example.com", "lecturer")

    created = client.post("/api/exams", json=exam_payload(time="9:30"), headers=headers)
    assert created.status_code == 201
    exam = created.json()
    assert exam["time"] == "09:30"
    assert exam["status"] == "upcoming"
    assert exam["created_by_name"] == "Test Lecturer"

    assert client.get(f"/api/exams/{exam['id']}").json()["course_code"] == "CS101"
    assert [item["id"] for item in client.get("/api/exams").json()] == [exam["id"]]

    updated = client.put(f"/api/exams/{exam['id']}", json={"venue": "Hall A"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["venue"] == "Hall A"
    assert updated.json()["course_name"] == "Intro to Computing"

    deleted = client.delete(f"/api/exams/{exam['id']}", headers=headers)
    assert deleted.status_code == 200
    assert deleted.json()["success"] is True

    missing = client.get(f"/api/exams/{exam['id']}")
    assert missing.status_code == 404
    assert missing.json()["message"] == f"Exam with id {exam['id']} not found"


def test_exam_validation_errors(client):
    headers = register_and_login(client, "lecturer@example.com", "lecturer")

    assert client.post("/api/exams", json=exam_payload(time="25:00"), headers=headers).status_code == 422
    assert client.post("/api/exams", json=exam_payload(duration=10), headers=headers).status_code == 422
    assert client.post("/api/exams", json=exam_payload(duration=301), headers=headers).status_code == 422
    assert client.post("/api/exams", json=exam_payload(courseCode="  "), headers=headers).status_code == 422


def test_students_cannot_write_exams(client):
    headers = register_and_login(client, "student@example.com", "student")

    assert client.post("/api/exams", json=exam_payload(), headers=headers).status_code == 403
    check = client.post("/api/exams/check-conflicts", json=exam_payload(), headers=headers)
    assert check.status_code == 403


def test_only_owner_or_admin_can_modify(client):
    owner = register_and_login(client, "owner@example.com", "lecturer")
    other = register_and_login(client, "other@example.com", "lecturer")
    admin = register_and_login(client, "admin@example.com", "admin")
    exam_id = client.post("/api/exams", json=exam_payload(), headers=owner).json()["id"]

    denied = client.put(f"/api/exams/{exam_id}", json={"venue": "Hall B"}, headers=other)
    assert denied.status_code == 403
    assert denied.json()["message"] == "Permission denied: can only edit own exams"
    assert client.delete(f"/api/exams/{exam_id}", headers=other).status_code == 403

    assert client.put(f"/api/exams/{exam_id}", json={"venue": "Hall B"}, headers=admin).status_code == 200
    assert client.delete(f"/api/exams/{exam_id}", headers=admin).status_code == 200


def test_check_conflicts_endpoint(client):
    headers = register_and_login(client, "lecturer@example.com", "lecturer")
    existing = client.post("/api/exams", json=exam_payload(), headers=headers).json()

    response = client.post(
        "/api/exams/check-conflicts",
        json=exam_payload(courseCode="MATH201", time="09:00", duration=120),
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["hasConflicts"] is True
    assert body["conflicts"][0]["examId"] == existing["id"]
    assert body["conflicts"][0]["conflictType"] == "both"
    assert body["summary"] == {"total": 1, "errors": 1, "warnings": 0}

    excluded = client.post(
        "/api/exams/check-conflicts",
        json=exam_payload(excludeId=existing["id"]),
        headers=headers,
    )
    assert excluded.json()["hasConflicts"] is False


def test_conflict_report_endpoint(client):
    headers = register_and_login(client, "lecturer@example.com", "lecturer")
    client.post("/api/exams", json=exam_payload(), headers=headers)
    client.post("/api/exams", json=exam_payload(courseCode="MATH201", time="15:00"), headers=headers)
    client.post("/api/exams", json=exam_payload(courseCode="PHY101", date="2024-12-16"), headers=headers)

    report = client.get("/api/exams/conflicts", headers=headers).json()
    assert report["summary"] == {"total": 1, "errors": 1, "warnings": 0}
    assert report["conflicts"][0]["conflictType"] == "both"

    other_day = client.get("/api/exams/conflicts", params={"date": "2024-12-16"}, headers=headers).json()
    assert other_day["conflicts"] == []


def test_exam_range_listing(client):
    headers = register_and_login(client, "lecturer@example.com", "lecturer")
    client.post("/api/exams", json=exam_payload(date="2024-12-10"), headers=headers)
    client.post("/api/exams", json=exam_payload(date="2024-12-20"), headers=headers)

    in_range = client.get("/api/exams/range/2024-12-01/2024-12-15").json()
    assert [item["date"] for item in in_range] == ["2024-12-10"]

    assert client.get("/api/exams/range/2024-12-20/2024-12-01").status_code == 400
