def create(client, path, payload):
    response = client.post(f"/api/{path}", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def seed_directory(client):
    term = create(client, "terms", {"name": "Term 1"})
    teacher = create(client, "teachers", {"full_name": "Teacher T", "email": "T@example.com"})
    other_teacher = create(client, "teachers", {"full_name": "Teacher U", "email": "u@example.com"})
    class_a = create(client, "classes", {"name": "Class A", "grade_level": 4})
    class_b = create(client, "classes", {"name": "Class B", "grade_level": 4})
    math = create(client, "subjects", {"code": "MATH", "name": "Math", "teacher_id": teacher["id"]})
    science = create(client, "subjects", {"code": "SCI", "name": "Science"})
    return {
        "term": term["id"],
        "teacher": teacher["id"],
        "other_teacher": other_teacher["id"],
        "class_a": class_a["id"],
        "class_b": class_b["id"],
        "math": math["id"],
        "science": science["id"],
    }


def period_payload(ids, subject, classes, start, end, day="MONDAY", teacher=None):
    payload = {
        "class_section_ids": classes,
        "subject_id": subject,
        "day_of_week": day,
        "start_time": start,
        "end_time": end,
        "academic_term_id": ids["term"],
    }
    if teacher:
        payload["teacher_id"] = teacher
    return payload


def test_math_and_science_monday_scenario(client):
    ids = seed_directory(client)

    first = client.post("/api/timetables", json=period_payload(ids, ids["math"], [ids["class_a"]], "08:00", "09:00"))
    assert first.status_code == 201
    body = first.json()
    assert body["teacher_id"] == ids["teacher"]
    assert body["teacher_name"] == "Teacher T"
    assert body["subject_name"] == "Math"
    assert body["is_combined"] is False

    clash = client.post(
        "/api/timetables",
        json=period_payload(ids, ids["science"], [ids["class_b"]], "08:30", "09:30", teacher=ids["teacher"]),
    )
    assert clash.status_code == 409
    assert clash.json()["message"] == "Teacher is already booked for this time slot"
    assert clash.json()["details"]["conflict"]["id"] == body["id"]

    adjacent = client.post(
        "/api/timetables",
        json=period_payload(ids, ids["math"], [ids["class_a"]], "09:00", "10:00", teacher=ids["teacher"]),
    )
    assert adjacent.status_code == 201


def test_combined_period_is_listed_for_both_classes(client):
    ids = seed_directory(client)

    response = client.post(
        "/api/timetables",
        json=period_payload(ids, ids["math"], [ids["class_a"], ids["class_b"]], "11:00", "12:00", day="Fri"),
    )
    assert response.status_code == 201
    period = response.json()
    assert period["is_combined"] is True
    assert period["day_of_week"] == "FRIDAY"
    assert [item["name"] for item in period["classes"]] == ["Class A", "Class B"]

    for class_id in (ids["class_a"], ids["class_b"]):
        listing = client.get(f"/api/timetables/class/{class_id}", params={"term_id": ids["term"]})
        assert listing.status_code == 200
        assert [item["id"] for item in listing.json()] == [period["id"]]

    term_view = client.get(f"/api/timetables/term/{ids['term']}")
    assert [item["id"] for item in term_view.json()] == [period["id"]]


def test_class_conflict_reports_offending_section(client):
    ids = seed_directory(client)
    client.post("/api/timetables", json=period_payload(ids, ids["math"], [ids["class_b"]], "08:00", "09:00"))

    response = client.post(
        "/api/timetables",
        json=period_payload(
            ids, ids["science"], [ids["class_a"], ids["class_b"]], "08:30", "09:00", teacher=ids["other_teacher"]
        ),
    )
    assert response.status_code == 409
    assert response.json()["details"]["class_section_id"] == ids["class_b"]


def test_subject_without_teacher_returns_actionable_error(client):
    ids = seed_directory(client)

    response = client.post(
        "/api/timetables", json=period_payload(ids, ids["science"], [ids["class_a"]], "08:00", "09:00")
    )
    assert response.status_code == 400
    assert response.json()["details"]["subject_name"] == "Science"

    assigned = client.put(f"/api/subjects/{ids['science']}", json={"teacher_id": ids["other_teacher"]})
    assert assigned.status_code == 200

    retry = client.post(
        "/api/timetables", json=period_payload(ids, ids["science"], [ids["class_a"]], "08:00", "09:00")
    )
    assert retry.status_code == 201
    assert retry.json()["teacher_id"] == ids["other_teacher"]


def test_request_validation_failures(client):
    ids = seed_directory(client)

    bad_format = client.post(
        "/api/timetables", json=period_payload(ids, ids["math"], [ids["class_a"]], "8am", "09:00")
    )
    assert bad_format.status_code == 422

    trailing_newline = client.post(
        "/api/timetables", json=period_payload(ids, ids["math"], [ids["class_a"]], "08:00\n", "09:00")
    )
    assert trailing_newline.status_code == 422

    bad_day = client.post(
        "/api/timetables", json=period_payload(ids, ids["math"], [ids["class_a"]], "08:00", "09:00", day="Funday")
    )
    assert bad_day.status_code == 422

    empty_classes = client.post("/api/timetables", json=period_payload(ids, ids["math"], [], "08:00", "09:00"))
    assert empty_classes.status_code == 422

    duplicate_classes = client.post(
        "/api/timetables",
        json=period_payload(ids, ids["math"], [ids["class_a"], ids["class_a"]], "08:00", "09:00"),
    )
    assert duplicate_classes.status_code == 422

    inverted = client.post(
        "/api/timetables", json=period_payload(ids, ids["math"], [ids["class_a"]], "10:00", "09:00")
    )
    assert inverted.status_code == 400
    assert inverted.json()["message"] == "End time must be after start time"


def test_unknown_references_return_404(client):
    ids = seed_directory(client)

    response = client.post(
        "/api/timetables", json=period_payload(ids, ids["math"], ["missing-class"], "08:00", "09:00")
    )
    assert response.status_code == 404
    assert response.json()["details"]["resource_type"] == "ClassSection"

    assert client.get("/api/timetables/class/missing", params={"term_id": ids["term"]}).status_code == 404
    assert client.get("/api/timetables/teacher/missing", params={"term_id": ids["term"]}).status_code == 404


def test_term_id_is_required_for_class_and_teacher_views(client):
    ids = seed_directory(client)
    assert client.get(f"/api/timetables/class/{ids['class_a']}").status_code == 422
    assert client.get(f"/api/timetables/teacher/{ids['teacher']}").status_code == 422


def test_delete_is_idempotent_and_frees_the_slot(client):
    ids = seed_directory(client)
    created = client.post(
        "/api/timetables", json=period_payload(ids, ids["math"], [ids["class_a"]], "08:00", "09:00")
    ).json()

    assert client.delete(f"/api/timetables/{created['id']}").status_code == 204
    assert client.delete(f"/api/timetables/{created['id']}").status_code == 204
    assert client.delete("/api/timetables/never-existed").status_code == 204

    recreated = client.post(
        "/api/timetables", json=period_payload(ids, ids["math"], [ids["class_a"]], "08:30", "09:30")
    )
    assert recreated.status_code == 201


def test_teacher_views(client):
    ids = seed_directory(client)
    monday = client.post(
        "/api/timetables", json=period_payload(ids, ids["math"], [ids["class_a"]], "10:00", "11:00")
    ).json()
    tuesday = client.post(
        "/api/timetables",
        json=period_payload(ids, ids["math"], [ids["class_b"]], "08:00", "09:00", day="TUESDAY"),
    ).json()

    week = client.get(f"/api/timetables/teacher/{ids['teacher']}", params={"term_id": ids["term"]})
    assert [item["id"] for item in week.json()] == [tuesday["id"], monday["id"]]

    day = client.get(f"/api/timetables/teacher/{ids['teacher']}/day/MONDAY", params={"term_id": ids["term"]})
    assert day.status_code == 200
    assert [item["id"] for item in day.json()] == [monday["id"]]


def test_deleting_a_term_cascades_to_its_periods(client):
    ids = seed_directory(client)
    client.post("/api/timetables", json=period_payload(ids, ids["math"], [ids["class_a"]], "08:00", "09:00"))

    response = client.delete(f"/api/terms/{ids['term']}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "deleted_periods": 1}

    assert client.get(f"/api/timetables/term/{ids['term']}").json() == []
    assert client.delete(f"/api/terms/{ids['term']}").status_code == 404


def test_directory_uniqueness_is_enforced(client):
    seed_directory(client)
    assert client.post("/api/terms", json={"name": "Term 1"}).status_code == 409
    assert client.post("/api/classes", json={"name": "Class A"}).status_code == 409
    assert client.post("/api/subjects", json={"code": "MATH", "name": "Maths"}).status_code == 409
    assert (
        client.post("/api/teachers", json={"full_name": "Dup", "email": "t@example.com"}).status_code == 409
    )
    assert client.post("/api/subjects", json={"code": "GEO", "name": "Geo", "teacher_id": "nobody"}).status_code == 404

    teachers = client.get("/api/teachers").json()
    assert [item["email"] for item in teachers] == ["t@example.com", "u@example.com"]
