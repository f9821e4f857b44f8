import pytest
from httpx import AsyncClient
from sqlalchemy import select

from app.models.event import Event


async def _create_task(client: AsyncClient, headers: dict, **fields) -> dict:
    response = await client.post("/api/tasks", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_task_defaults(client: AsyncClient, test_user, auth_headers, create_project):
    project = await create_project()

    task = await _create_task(client, auth_headers, project_id=project["id"], name="Write docs")

    assert task["status"] == "not-started"
    assert task["priority"] == "medium"
    assert task["is_archived"] is False
    assert task["project"]["id"] == project["id"]
    assert task["created_by"]["id"] == test_user.id


@pytest.mark.asyncio
async def test_create_task_requires_project(client: AsyncClient, auth_headers):
    response = await client.post("/api/tasks", json={"project_id": "missing", "name": "x"}, headers=auth_headers)
    assert response.status_code == 404

    response = await client.post("/api/tasks", json={"name": "x"}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_task_rejects_application_from_other_project(client: AsyncClient, auth_headers, create_project):
    project = await create_project(name="One")
    other = await create_project(name="Two")
    application = await client.post(
        "/api/applications",
        json={"project_id": other["id"], "idea": "Idea", "description": "Details"},
        headers=auth_headers
    )

    response = await client.post(
        "/api/tasks",
        json={"project_id": project["id"], "name": "x", "application_id": application.json()["id"]},
        headers=auth_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_deadline_fans_out_one_event_per_member(
    client: AsyncClient, db_session, test_user, other_user, auth_headers, other_auth_headers, create_project
):
    project = await create_project(capacity=5)
    await client.post(f"/api/projects/{project['id']}/join", headers=auth_headers)
    await client.post(f"/api/projects/{project['id']}/join", headers=other_auth_headers)

    task = await _create_task(
        client, auth_headers,
        project_id=project["id"], name="Ship it", deadline="2030-03-01T09:00:00+02:00"
    )

    events = (await db_session.execute(select(Event).where(Event.task_id == task["id"]))).scalars().all()
    assert len(events) == 2
    assert all(e.title == "Task deadline: Ship it" for e in events)
    assert all(e.send_alert for e in events)
    # stored as naive UTC
    assert events[0].date.hour == 7

    owners = sorted(str(e.created_by_id) for e in events)
    assert owners == sorted([test_user.id, other_user.id])

    by_owner = {str(e.created_by_id): e.id for e in events}
    others_reminder = await client.delete(
        f"/api/calendar/events/{by_owner[test_user.id]}", headers=other_auth_headers
    )
    own_reminder = await client.delete(
        f"/api/calendar/events/{by_owner[other_user.id]}", headers=other_auth_headers
    )

    assert others_reminder.status_code == 403
    assert own_reminder.status_code == 200


@pytest.mark.asyncio
async def test_no_deadline_no_events(client: AsyncClient, db_session, auth_headers, create_project):
    project = await create_project()
    await client.post(f"/api/projects/{project['id']}/join", headers=auth_headers)

    task = await _create_task(client, auth_headers, project_id=project["id"], name="Whenever")

    events = (await db_session.execute(select(Event).where(Event.task_id == task["id"]))).scalars().all()
    assert events == []


@pytest.mark.asyncio
async def test_update_task(client: AsyncClient, auth_headers, create_project):
    project = await create_project()
    task = await _create_task(client, auth_headers, project_id=project["id"], name="Draft")

    response = await client.put(
        f"/api/tasks/{task['id']}",
        json={"status": "completed", "priority": "high"},
        headers=auth_headers
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["priority"] == "high"
    assert data["name"] == "Draft"


@pytest.mark.asyncio
async def test_status_transitions_are_unconstrained(client: AsyncClient, auth_headers, create_project):
    project = await create_project()
    task = await _create_task(client, auth_headers, project_id=project["id"], name="Loop", status="completed")

    response = await client.put(f"/api/tasks/{task['id']}", json={"status": "not-started"}, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "not-started"


@pytest.mark.asyncio
async def test_update_task_rejects_unknown_fields_and_bad_enum(client: AsyncClient, auth_headers, create_project):
    project = await create_project()
    task = await _create_task(client, auth_headers, project_id=project["id"], name="Strict")

    unknown = await client.put(f"/api/tasks/{task['id']}", json={"project_id": "x"}, headers=auth_headers)
    bad_status = await client.put(f"/api/tasks/{task['id']}", json={"status": "done"}, headers=auth_headers)

    assert unknown.status_code == 400
    assert bad_status.status_code == 400


@pytest.mark.asyncio
async def test_outsider_cannot_update_task(client: AsyncClient, auth_headers, other_auth_headers, create_project):
    project = await create_project()
    task = await _create_task(client, auth_headers, project_id=project["id"], name="Mine")

    response = await client.put(f"/api/tasks/{task['id']}", json={"name": "Hijacked"}, headers=other_auth_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_project_member_can_update_task(client: AsyncClient, auth_headers, other_auth_headers, create_project):
    project = await create_project()
    await client.post(f"/api/projects/{project['id']}/join", headers=other_auth_headers)
    task = await _create_task(client, auth_headers, project_id=project["id"], name="Shared")

    response = await client.put(f"/api/tasks/{task['id']}", json={"status": "in-progress"}, headers=other_auth_headers)

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_delete_task_removes_its_events(client: AsyncClient, db_session, auth_headers, create_project):
    project = await create_project()
    await client.post(f"/api/projects/{project['id']}/join", headers=auth_headers)
    task = await _create_task(
        client, auth_headers, project_id=project["id"], name="Gone", deadline="2030-01-01T00:00:00"
    )

    response = await client.delete(f"/api/tasks/{task['id']}", headers=auth_headers)

    assert response.status_code == 200
    missing = await client.get(f"/api/tasks/{task['id']}", headers=auth_headers)
    assert missing.status_code == 404
    events = (await db_session.execute(select(Event).where(Event.task_id == task["id"]))).scalars().all()
    assert events == []


@pytest.mark.asyncio
async def test_only_creator_or_admin_can_delete(
    client: AsyncClient, auth_headers, other_auth_headers, admin_auth_headers, create_project
):
    project = await create_project()
    await client.post(f"/api/projects/{project['id']}/join", headers=other_auth_headers)
    task = await _create_task(client, auth_headers, project_id=project["id"], name="Keep")

    denied = await client.delete(f"/api/tasks/{task['id']}", headers=other_auth_headers)
    allowed = await client.delete(f"/api/tasks/{task['id']}", headers=admin_auth_headers)

    assert denied.status_code == 403
    assert allowed.status_code == 200


@pytest.mark.asyncio
async def test_archive_hides_task_from_my_tasks(client: AsyncClient, auth_headers, create_project):
    project = await create_project()
    await client.post(f"/api/projects/{project['id']}/join", headers=auth_headers)
    task = await _create_task(client, auth_headers, project_id=project["id"], name="Old news")

    response = await client.put(f"/api/tasks/{task['id']}/archive", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["is_archived"] is True
    assert response.json()["archived_at"] is not None

    my = await client.get("/api/tasks/my", headers=auth_headers)
    assert task["id"] not in [t["id"] for t in my.json()]

    everything = await client.get("/api/tasks", headers=auth_headers)
    assert task["id"] in [t["id"] for t in everything.json()]


@pytest.mark.asyncio
async def test_my_tasks_scope(client: AsyncClient, test_user, auth_headers, other_auth_headers, create_project):
    joined = await create_project(name="Joined")
    elsewhere = await create_project(name="Elsewhere")
    await client.post(f"/api/projects/{joined['id']}/join", headers=auth_headers)

    in_my_project = await _create_task(client, other_auth_headers, project_id=joined["id"], name="Team task")
    assigned = await _create_task(
        client, other_auth_headers, project_id=elsewhere["id"], name="For me", assignee_id=test_user.id
    )
    unrelated = await _create_task(client, other_auth_headers, project_id=elsewhere["id"], name="Not mine")

    my = await client.get("/api/tasks/my", headers=auth_headers)
    ids = {t["id"] for t in my.json()}

    assert in_my_project["id"] in ids
    assert assigned["id"] in ids
    assert unrelated["id"] not in ids


@pytest.mark.asyncio
async def test_tasks_for_project_and_application(client: AsyncClient, auth_headers, other_auth_headers, create_project):
    project = await create_project()
    application = (await client.post(
        "/api/applications",
        json={"project_id": project["id"], "idea": "Idea", "description": "Details"},
        headers=auth_headers
    )).json()
    mine = await _create_task(
        client, auth_headers, project_id=project["id"], name="Mine", application_id=application["id"]
    )
    await _create_task(
        client, other_auth_headers, project_id=project["id"], name="Theirs", application_id=application["id"]
    )

    response = await client.get(
        f"/api/tasks/project/{project['id']}/application/{application['id']}",
        headers=auth_headers
    )

    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == [mine["id"]]
    assert response.json()[0]["application"]["idea"] == "Idea"


@pytest.mark.asyncio
async def test_by_user_query_is_admin_only(
    client: AsyncClient, test_user, auth_headers, other_auth_headers, admin_auth_headers, create_project
):
    project = await create_project()
    mine = await _create_task(client, auth_headers, project_id=project["id"], name="Mine")
    await _create_task(client, other_auth_headers, project_id=project["id"], name="Theirs")

    denied = await client.get("/api/tasks/by-user", params={"created_by": test_user.id}, headers=auth_headers)
    response = await client.get(
        "/api/tasks/by-user",
        params={"created_by": test_user.id, "project_id": project["id"]},
        headers=admin_auth_headers
    )

    assert denied.status_code == 403
    assert response.status_code == 200
    assert [t["id"] for t in response.json()] == [mine["id"]]
