"""Tests for task CRUD, ordering and stats."""
import pytest
from conftest import assign_clients, create_client, create_project


@pytest.fixture
def project(client, admin_headers):
    acme = create_client(client, admin_headers)
    return create_project(client, admin_headers, [acme["id"]])


def create_task(client, headers, project_id, **fields):
    payload = {"title": "Draft wireframes", "project_id": project_id, "due_date": "2030-05-01"}
    payload.update(fields)
    res = client.post("/api/tasks/", json=payload, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["data"]


class TestTaskCreate:
    """Required fields and defaults."""

    def test_defaults(self, client, admin, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])
        assert task["status"] == "todo"
        assert task["priority"] == "medium"
        assert task["user_id"] == str(admin.id)
        assert task["project_id"] == project["id"]
        assert task["due_date"] == "2030-05-01"

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"title": "  "}, "Task title is required"),
            ({"project_id": None}, "Project is required"),
            ({"due_date": ""}, "Due date is required"),
            ({"estimated_hours": -2}, "Estimated hours cannot be negative"),
            ({"actual_hours": -0.5}, "Actual hours cannot be negative"),
        ],
    )
    def test_rejected_fields(self, client, admin_headers, project, overrides, message):
        payload = {"title": "Draft wireframes", "project_id": project["id"], "due_date": "2030-05-01"}
        payload.update(overrides)
        res = client.post("/api/tasks/", json=payload, headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["error"] == message

    def test_invisible_project(self, client, admin_headers, project, make_user):
        member = make_user()
        res = client.post(
            "/api/tasks/",
            json={"title": "Sneaky", "project_id": project["id"], "due_date": "2030-05-01"},
            headers=member.headers,
        )
        assert res.status_code == 404
        assert res.json()["error"] == "Project not found"

    def test_member_on_assigned_project(self, client, admin_headers, project, make_user):
        member = make_user()
        assign_clients(client, admin_headers, member.id, [project["client_id"]])
        task = create_task(client, member.headers, project["id"])
        assert task["user_id"] == str(member.id)


class TestTaskPositions:
    """Positions grow per user and are never handed out twice."""

    def test_sequential_positions(self, client, admin_headers, project):
        first = create_task(client, admin_headers, project["id"], title="One")
        second = create_task(client, admin_headers, project["id"], title="Two")
        assert first["position"] == 1
        assert second["position"] == 2

    def test_deleted_position_not_reused(self, client, admin_headers, project):
        create_task(client, admin_headers, project["id"], title="One")
        second = create_task(client, admin_headers, project["id"], title="Two")
        client.delete(f"/api/tasks/{second['id']}", headers=admin_headers)

        third = create_task(client, admin_headers, project["id"], title="Three")
        assert third["position"] == 3

    def test_positions_are_per_user(self, client, admin_headers, project, make_user):
        create_task(client, admin_headers, project["id"])
        member = make_user()
        assign_clients(client, admin_headers, member.id, [project["client_id"]])
        assert create_task(client, member.headers, project["id"])["position"] == 1

    def test_list_orders_by_position(self, client, admin_headers, project):
        a = create_task(client, admin_headers, project["id"], title="A")
        b = create_task(client, admin_headers, project["id"], title="B")
        c = create_task(client, admin_headers, project["id"], title="C")
        client.put(f"/api/tasks/{c['id']}", json={"position": 0}, headers=admin_headers)

        data = client.get("/api/tasks/", headers=admin_headers).json()["data"]
        assert [t["id"] for t in data["tasks"]] == [c["id"], a["id"], b["id"]]
        assert data["limit"] == 50


class TestTaskUpdateAndOwnership:
    """Tasks belong to whoever created them."""

    def test_update(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])
        res = client.put(
            f"/api/tasks/{task['id']}",
            json={"status": "in_progress", "priority": "urgent", "actual_hours": 1.5},
            headers=admin_headers,
        )
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["status"] == "in_progress"
        assert data["priority"] == "urgent"
        assert data["actual_hours"] == 1.5
        assert data["title"] == task["title"]

    def test_update_blank_title(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])
        res = client.put(f"/api/tasks/{task['id']}", json={"title": ""}, headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["error"] == "Task title cannot be empty"

    def test_update_negative_hours(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"])
        res = client.put(f"/api/tasks/{task['id']}", json={"estimated_hours": -1}, headers=admin_headers)
        assert res.status_code == 400

    def test_other_users_task_is_hidden(self, client, admin_headers, project, make_user):
        task = create_task(client, admin_headers, project["id"])
        member = make_user()

        assert client.get(f"/api/tasks/{task['id']}", headers=member.headers).status_code == 404
        res = client.put(f"/api/tasks/{task['id']}", json={"title": "Mine"}, headers=member.headers)
        assert res.status_code == 404
        assert res.json()["error"] == "Task not found"
        assert client.delete(f"/api/tasks/{task['id']}", headers=member.headers).status_code == 404
        assert client.get("/api/tasks/", headers=member.headers).json()["data"]["tasks"] == []


class TestTaskListing:
    """Filters and stats."""

    def test_filters(self, client, admin_headers, project):
        other = create_project(client, admin_headers, [project["client_id"]], name="Other")
        create_task(client, admin_headers, project["id"], title="Write copy", status="done")
        create_task(client, admin_headers, project["id"], title="Review COPY deck", priority="high")
        create_task(client, admin_headers, other["id"], title="Invoice")

        def titles(**params):
            data = client.get("/api/tasks/", params=params, headers=admin_headers).json()["data"]
            return sorted(t["title"] for t in data["tasks"])

        assert titles(project_id=other["id"]) == ["Invoice"]
        assert titles(status="done") == ["Write copy"]
        assert titles(priority="high") == ["Review COPY deck"]
        assert titles(search="copy") == ["Review COPY deck", "Write copy"]

    def test_stats(self, client, admin_headers, project):
        other = create_project(client, admin_headers, [project["client_id"]], name="Other")
        create_task(client, admin_headers, project["id"], status="done")
        create_task(client, admin_headers, project["id"], status="review")
        create_task(client, admin_headers, other["id"])

        stats = client.get("/api/tasks/stats", headers=admin_headers).json()["data"]
        assert stats == {"todo": 1, "in_progress": 0, "review": 1, "done": 1, "total": 3}

        scoped = client.get("/api/tasks/stats", params={"project_id": project["id"]}, headers=admin_headers)
        assert scoped.json()["data"]["total"] == 2
        assert scoped.json()["data"]["todo"] == 0


class TestTaskHourValues:
    """Hour estimates must be finite numbers."""

    @pytest.mark.parametrize("field", ["estimated_hours", "actual_hours"])
    def test_nan_rejected_on_create(self, client, admin_headers, project, field):
        body = '{"title": "Plan", "project_id": "%s", "due_date": "2030-05-01", "%s": NaN}' % (project["id"], field)
        res = client.post("/api/tasks/", content=body, headers={**admin_headers, "Content-Type": "application/json"})
        assert res.status_code == 400
        assert field in res.json()["error"]

    def test_infinity_rejected_on_update(self, client, admin_headers, project):
        task = create_task(client, admin_headers, project["id"], estimated_hours=3)
        res = client.put(
            f"/api/tasks/{task['id']}",
            content='{"estimated_hours": Infinity}',
            headers={**admin_headers, "Content-Type": "application/json"},
        )
        assert res.status_code == 400
        fetched = client.get(f"/api/tasks/{task['id']}", headers=admin_headers).json()["data"]
        assert fetched["estimated_hours"] == 3
