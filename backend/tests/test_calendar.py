import pytest
from httpx import AsyncClient


async def _create_event(client: AsyncClient, headers: dict, **fields) -> dict:
    response = await client.post("/api/calendar/events", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_event(client: AsyncClient, test_user, auth_headers):
    event = await _create_event(client, auth_headers, title="Standup", date="2030-01-02T09:00:00")

    assert event["title"] == "Standup"
    assert event["kind"] == "event"
    assert event["send_alert"] is False
    assert event["created_by"]["id"] == test_user.id


@pytest.mark.asyncio
async def test_create_event_validation(client: AsyncClient, auth_headers):
    no_date = await client.post("/api/calendar/events", json={"title": "x"}, headers=auth_headers)
    bad_project = await client.post(
        "/api/calendar/events",
        json={"title": "x", "date": "2030-01-01T00:00:00", "project_id": "missing"},
        headers=auth_headers
    )

    assert no_date.status_code == 400
    assert bad_project.status_code == 404


@pytest.mark.asyncio
async def test_events_sorted_with_project_deadlines(client: AsyncClient, auth_headers, create_project):
    await _create_event(client, auth_headers, title="Later", date="2030-03-01T00:00:00")
    await _create_event(client, auth_headers, title="Sooner", date="2030-01-01T00:00:00")
    project = await create_project(name="Launch", deadline="2030-02-01T00:00:00")
    await create_project(name="Open ended")

    response = await client.get("/api/calendar/events", headers=auth_headers)

    assert response.status_code == 200
    events = response.json()
    assert [e["title"] for e in events] == ["Sooner", "Project deadline: Launch", "Later"]
    deadline = events[1]
    assert deadline["kind"] == "project-deadline"
    assert deadline["project"]["id"] == project["id"]


@pytest.mark.asyncio
async def test_events_without_deadlines(client: AsyncClient, auth_headers, create_project):
    await _create_event(client, auth_headers, title="Only", date="2030-03-01T00:00:00")
    await create_project(deadline="2030-02-01T00:00:00")

    response = await client.get("/api/calendar/events", params={"include_deadlines": "false"}, headers=auth_headers)

    assert [e["title"] for e in response.json()] == ["Only"]


@pytest.mark.asyncio
async def test_delete_event_owner_or_admin(
    client: AsyncClient, auth_headers, other_auth_headers, admin_auth_headers
):
    first = await _create_event(client, auth_headers, title="Mine", date="2030-01-01T00:00:00")
    second = await _create_event(client, auth_headers, title="Also mine", date="2030-01-01T00:00:00")

    denied = await client.delete(f"/api/calendar/events/{first['id']}", headers=other_auth_headers)
    by_owner = await client.delete(f"/api/calendar/events/{first['id']}", headers=auth_headers)
    by_admin = await client.delete(f"/api/calendar/events/{second['id']}", headers=admin_auth_headers)
    missing = await client.delete(f"/api/calendar/events/{first['id']}", headers=auth_headers)

    assert denied.status_code == 403
    assert by_owner.status_code == 200
    assert by_admin.status_code == 200
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_event_task_must_belong_to_event_project(client: AsyncClient, auth_headers, create_project):
    home = await create_project(name="Home")
    elsewhere = await create_project(name="Elsewhere")
    task = (await client.post(
        "/api/tasks",
        json={"project_id": elsewhere["id"], "name": "Foreign task"},
        headers=auth_headers
    )).json()

    mismatched = await client.post(
        "/api/calendar/events",
        json={"title": "x", "date": "2030-01-01T00:00:00", "project_id": home["id"], "task_id": task["id"]},
        headers=auth_headers
    )
    matched = await client.post(
        "/api/calendar/events",
        json={"title": "x", "date": "2030-01-01T00:00:00", "project_id": elsewhere["id"], "task_id": task["id"]},
        headers=auth_headers
    )

    assert mismatched.status_code == 400
    assert mismatched.json()["details"] == {"field": "task_id"}
    assert matched.status_code == 201
