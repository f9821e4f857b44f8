"""
Integration Tests for the full team workflow
"""
import pytest
from httpx import AsyncClient
from faker import Faker

fake = Faker()

PASSWORD = "securePassword123!"


async def register(client: AsyncClient, admin_key: str = None) -> dict:
    payload = {
        "name": fake.first_name(),
        "lastname": fake.last_name(),
        "email": fake.unique.email(),
        "password": PASSWORD,
        "c_password": PASSWORD,
    }
    if admin_key:
        payload["admin_key"] = admin_key

    response = await client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return {"email": payload["email"], **response.json()}


async def login(client: AsyncClient, email: str) -> dict:
    response = await client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


class TestAuthenticationFlow:
    """Register, login and read the profile back"""

    @pytest.mark.asyncio
    async def test_register_login_me(self, client: AsyncClient):
        account = await register(client)
        headers = await login(client, account["email"])

        me = await client.get("/api/auth/me", headers=headers)

        assert me.status_code == 200
        assert me.json()["id"] == account["user"]["id"]
        assert me.json()["is_admin"] is False

    @pytest.mark.asyncio
    async def test_admin_registration(self, client: AsyncClient):
        account = await register(client, admin_key="test-admin-key")

        assert account["user"]["is_admin"] is True


class TestCapacityFlow:
    """Capacity is enforced across join and leave"""

    @pytest.mark.asyncio
    async def test_capstone_single_seat(self, client: AsyncClient):
        admin = await register(client, admin_key="test-admin-key")
        a = await register(client)
        b = await register(client)
        admin_headers = await login(client, admin["email"])
        a_headers = await login(client, a["email"])
        b_headers = await login(client, b["email"])

        created = await client.post(
            "/api/projects",
            json={"name": "Capstone", "description": "Final year project", "capacity": 1},
            headers=admin_headers
        )
        assert created.status_code == 201
        project_id = created.json()["id"]

        joined = await client.post(f"/api/projects/{project_id}/join", headers=a_headers)
        assert joined.status_code == 200
        assert [m["id"] for m in joined.json()["members"]] == [a["user"]["id"]]

        full = await client.post(f"/api/projects/{project_id}/join", headers=b_headers)
        assert full.status_code == 400
        assert full.json()["code"] == "PROJECT_FULL"

        left = await client.post(f"/api/projects/{project_id}/leave", headers=a_headers)
        assert left.status_code == 200
        assert left.json()["members"] == []

        rejoined = await client.post(f"/api/projects/{project_id}/join", headers=b_headers)
        assert rejoined.status_code == 200
        assert [m["id"] for m in rejoined.json()["members"]] == [b["user"]["id"]]


class TestProjectLifecycle:
    """Apply, approve, plan work and close the project"""

    @pytest.mark.asyncio
    async def test_apply_approve_work_and_end(self, client: AsyncClient):
        admin = await register(client, admin_key="test-admin-key")
        member = await register(client)
        admin_headers = await login(client, admin["email"])
        headers = await login(client, member["email"])

        project = (await client.post(
            "/api/projects",
            json={"name": "Portal", "description": "Student portal", "capacity": 3},
            headers=admin_headers
        )).json()

        application = (await client.post(
            "/api/applications",
            json={"project_id": project["id"], "idea": "Timetable view", "description": "Weekly grid"},
            headers=headers
        )).json()
        approved = await client.put(f"/api/applications/{application['id']}/approve", headers=admin_headers)
        assert approved.status_code == 200

        mine = await client.get("/api/projects/my", headers=headers)
        assert [p["id"] for p in mine.json()] == [project["id"]]

        task = (await client.post(
            "/api/tasks",
            json={
                "project_id": project["id"],
                "application_id": application["id"],
                "name": "Build grid",
                "deadline": "2030-05-01T10:00:00Z",
            },
            headers=headers
        )).json()
        done = await client.put(f"/api/tasks/{task['id']}", json={"status": "completed"}, headers=headers)
        assert done.status_code == 200

        events = await client.get("/api/calendar/events", headers=headers)
        titles = [e["title"] for e in events.json()]
        assert "Task deadline: Build grid" in titles

        ended = await client.post(f"/api/projects/{project['id']}/end", headers=admin_headers)
        assert ended.status_code == 200
        summary = ended.json()["summary"]
        assert summary["total_tasks"] == 1
        assert summary["completion_rate"] == "100.0"
        assert summary["members"][0]["completed"] == 1

        assert (await client.get("/api/projects/my", headers=headers)).json() == []
        assert (await client.get("/api/tasks/my", headers=headers)).json() == []
        remaining = await client.get("/api/calendar/events", headers=headers)
        assert "Task deadline: Build grid" not in [e["title"] for e in remaining.json()]
