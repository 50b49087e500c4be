"""Tests for client CRUD, visibility and stats."""
import uuid
from datetime import datetime, timezone

from conftest import assign_clients, create_client, create_project

from models.models import Client, Project, Role


class TestClientCrud:
    """Admin create/read/update/delete."""

    def test_create_then_fetch_returns_same_fields(self, client, admin, admin_headers):
        fields = {
            "name": "Globex",
            "email": "ops@globex.com",
            "phone": "+1 555 0100",
            "company": "Globex Corporation",
            "address": "1 Globex Way",
            "status": "inactive",
            "notes": "Prefers email",
        }
        created = create_client(client, admin_headers, **fields)
        fetched = client.get(f"/api/clients/{created['id']}", headers=admin_headers).json()["data"]

        for key, value in fields.items():
            assert fetched[key] == value
        assert fetched == created
        assert fetched["user_id"] == str(admin.id)

    def test_blank_optional_fields_become_null(self, client, admin_headers):
        created = create_client(client, admin_headers, email="", phone="  ", company="")
        assert created["email"] is None
        assert created["phone"] is None
        assert created["company"] is None

    def test_blank_name_rejected(self, client, admin_headers):
        res = client.post("/api/clients/", json={"name": "   "}, headers=admin_headers)
        assert res.status_code == 400
        assert res.json() == {"success": False, "error": "Client name is required"}

    def test_invalid_email_rejected(self, client, admin_headers):
        res = client.post("/api/clients/", json={"name": "Bad", "email": "not-an-email"}, headers=admin_headers)
        assert res.status_code == 400

    def test_member_cannot_create(self, client, make_user):
        member = make_user()
        res = client.post("/api/clients/", json={"name": "Nope"}, headers=member.headers)
        assert res.status_code == 403

    def test_update(self, client, admin_headers):
        created = create_client(client, admin_headers, name="Initech")
        res = client.put(
            f"/api/clients/{created['id']}", json={"status": "archived", "notes": "Closed"}, headers=admin_headers
        )
        assert res.status_code == 200
        data = res.json()["data"]
        assert data["status"] == "archived"
        assert data["notes"] == "Closed"
        assert data["name"] == "Initech"

    def test_update_blank_name(self, client, admin_headers):
        created = create_client(client, admin_headers)
        res = client.put(f"/api/clients/{created['id']}", json={"name": ""}, headers=admin_headers)
        assert res.status_code == 400
        assert res.json()["error"] == "Client name cannot be empty"

    def test_delete(self, client, admin_headers):
        created = create_client(client, admin_headers)
        res = client.delete(f"/api/clients/{created['id']}", headers=admin_headers)
        assert res.status_code == 200
        assert client.get(f"/api/clients/{created['id']}", headers=admin_headers).status_code == 404

    def test_missing_client(self, client, admin_headers):
        res = client.get("/api/clients/0b5e7c1e-1111-4a4a-9c9c-00000000000a", headers=admin_headers)
        assert res.status_code == 404
        assert res.json()["error"] == "Client not found"

    def test_malformed_id(self, client, admin_headers):
        res = client.get("/api/clients/not-a-uuid", headers=admin_headers)
        assert res.status_code == 400


class TestClientVisibility:
    """Who can see which clients."""

    def test_other_admin_sees_404(self, client, admin_headers, make_user):
        other_admin = make_user(role=Role.ADMIN)
        created = create_client(client, admin_headers)

        assert client.get(f"/api/clients/{created['id']}", headers=other_admin.headers).status_code == 404
        res = client.put(f"/api/clients/{created['id']}", json={"name": "Hijack"}, headers=other_admin.headers)
        assert res.status_code == 404
        assert client.delete(f"/api/clients/{created['id']}", headers=other_admin.headers).status_code == 404
        listed = client.get("/api/clients/", headers=other_admin.headers).json()["data"]
        assert listed["clients"] == []

    def test_member_sees_only_assigned(self, client, admin_headers, make_user):
        member = make_user()
        mine = create_client(client, admin_headers, name="Assigned Co")
        create_client(client, admin_headers, name="Hidden Co")

        empty = client.get("/api/clients/", headers=member.headers).json()["data"]
        assert empty["clients"] == []
        assert empty["total"] == 0

        assign_clients(client, admin_headers, member.id, [mine["id"]])
        listed = client.get("/api/clients/", headers=member.headers).json()["data"]
        assert [c["name"] for c in listed["clients"]] == ["Assigned Co"]
        assert client.get(f"/api/clients/{mine['id']}", headers=member.headers).status_code == 200


class TestClientListing:
    """Filters, search and pagination."""

    def test_search_is_case_insensitive_over_name_email_company(self, client, admin_headers):
        create_client(client, admin_headers, name="Wayne Enterprises")
        create_client(client, admin_headers, name="Stark", email="tony@starkindustries.com")
        create_client(client, admin_headers, name="Umbrella", company="Umbrella WAYNE Holdings")
        create_client(client, admin_headers, name="Unrelated")

        res = client.get("/api/clients/", params={"search": "wayne"}, headers=admin_headers).json()["data"]
        assert sorted(c["name"] for c in res["clients"]) == ["Umbrella", "Wayne Enterprises"]

        res = client.get("/api/clients/", params={"search": "STARKIND"}, headers=admin_headers).json()["data"]
        assert [c["name"] for c in res["clients"]] == ["Stark"]

    def test_status_filter(self, client, admin_headers):
        create_client(client, admin_headers, name="On", status="active")
        create_client(client, admin_headers, name="Off", status="inactive")
        res = client.get("/api/clients/", params={"status": "inactive"}, headers=admin_headers).json()["data"]
        assert [c["name"] for c in res["clients"]] == ["Off"]

    def test_pagination_meta(self, client, admin_headers):
        for i in range(5):
            create_client(client, admin_headers, name=f"Client {i}")

        res = client.get("/api/clients/", params={"page": 3, "limit": 2}, headers=admin_headers).json()["data"]
        assert res["total"] == 5
        assert res["page"] == 3
        assert res["limit"] == 2
        assert res["totalPages"] == 3
        assert len(res["clients"]) == 1

    def test_pages_are_stable_when_timestamps_tie(self, client, db, admin, admin_headers):
        stamp = datetime(2030, 1, 1, tzinfo=timezone.utc)
        with db.session() as session:
            for i in range(5):
                session.add(Client(user_id=admin.id, name=f"Tied {i}", created_at=stamp, updated_at=stamp))
            session.commit()

        seen = []
        for page in (1, 2, 3):
            res = client.get("/api/clients/", params={"page": page, "limit": 2}, headers=admin_headers)
            seen.extend(c["id"] for c in res.json()["data"]["clients"])
        assert len(seen) == 5
        assert len(set(seen)) == 5

    def test_pagination_bounds(self, client, admin_headers):
        assert client.get("/api/clients/", params={"page": 0}, headers=admin_headers).status_code == 400
        assert client.get("/api/clients/", params={"limit": 0}, headers=admin_headers).status_code == 400
        assert client.get("/api/clients/", params={"limit": 101}, headers=admin_headers).status_code == 400
        assert client.get("/api/clients/", params={"limit": 100}, headers=admin_headers).status_code == 200

    def test_stats(self, client, admin_headers, make_user):
        create_client(client, admin_headers, status="active")
        create_client(client, admin_headers, status="active")
        create_client(client, admin_headers, status="archived")
        other_admin = make_user(role=Role.ADMIN)
        create_client(client, other_admin.headers, status="inactive")

        stats = client.get("/api/clients/stats", headers=admin_headers).json()["data"]
        assert stats == {"active": 2, "inactive": 0, "archived": 1, "total": 3}


class TestClientDeleteResync:
    """Deleting a client keeps project.client_id pointing at a remaining client."""

    def test_primary_client_moves_to_next(self, client, db, admin_headers):
        first = create_client(client, admin_headers, name="First")
        second = create_client(client, admin_headers, name="Second")
        project = create_project(client, admin_headers, [first["id"], second["id"]])
        assert project["client_id"] == first["id"]

        client.delete(f"/api/clients/{first['id']}", headers=admin_headers)

        data = client.get(f"/api/projects/{project['id']}", headers=admin_headers).json()["data"]
        assert data["client_id"] == second["id"]
        assert data["client_ids"] == [second["id"]]

    def test_last_client_leaves_null(self, client, db, admin_headers):
        only = create_client(client, admin_headers, name="Only")
        project = create_project(client, admin_headers, [only["id"]])

        client.delete(f"/api/clients/{only['id']}", headers=admin_headers)

        with db.session() as session:
            stored = session.get(Project, uuid.UUID(project["id"]))
            assert stored is not None
            assert stored.client_id is None
