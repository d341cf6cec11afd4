from __future__ import annotations

import pytest

from tests.conftest import create_project, make_settings, running_client, start_survey, user_headers


@pytest.mark.asyncio
async def test_create_then_list(client) -> None:
    r = await client.post("/api/projects", json={"name": "  Apollo  "}, headers=user_headers())
    assert r.status_code == 201
    project = r.json()["project"]
    assert project["name"] == "Apollo"
    assert project["responsesCount"] == 0
    assert project["lastResponseAt"] is None
    assert project["createdAt"].endswith("Z") or project["createdAt"].endswith("+00:00")

    r = await client.get("/api/projects", headers=user_headers())
    assert r.status_code == 200
    assert [p["name"] for p in r.json()["projects"]] == ["Apollo"]


@pytest.mark.asyncio
async def test_create_is_case_insensitive_get_or_create(client) -> None:
    first = await client.post("/api/projects", json={"name": "Apollo"}, headers=user_headers())
    again = await client.post("/api/projects", json={"name": "APOLLO"}, headers=user_headers())

    assert first.status_code == 201
    assert again.status_code == 200
    assert again.json()["project"]["id"] == first.json()["project"]["id"]
    assert again.json()["project"]["name"] == "Apollo"


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", " x ", "y" * 121])
async def test_create_rejects_bad_names(client, name) -> None:
    r = await client.post("/api/projects", json={"name": name}, headers=user_headers())
    assert r.status_code == 400
    assert r.json()["error"] == "Invalid request payload"


@pytest.mark.asyncio
async def test_search_and_limit(client) -> None:
    for name in ("Apollo", "Gemini", "Mercury", "Apollo Soyuz"):
        await create_project(client, name)

    r = await client.get("/api/projects", params={"search": "apol"}, headers=user_headers())
    assert sorted(p["name"] for p in r.json()["projects"]) == ["Apollo", "Apollo Soyuz"]

    r = await client.get("/api/projects", params={"search": "zzz"}, headers=user_headers())
    assert r.json()["projects"] == []

    r = await client.get("/api/projects", params={"limit": 2}, headers=user_headers())
    assert len(r.json()["projects"]) == 2

    # Out-of-range limits are clamped rather than rejected.
    r = await client.get("/api/projects", params={"limit": 0}, headers=user_headers())
    assert len(r.json()["projects"]) == 1
    r = await client.get("/api/projects", params={"limit": 1000}, headers=user_headers())
    assert len(r.json()["projects"]) == 4


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(client) -> None:
    await create_project(client, "100% uptime")
    await create_project(client, "Billing")

    r = await client.get("/api/projects", params={"search": "%"}, headers=user_headers())
    assert [p["name"] for p in r.json()["projects"]] == ["100% uptime"]


@pytest.mark.asyncio
async def test_recent_responses_sort_first(client) -> None:
    old = await create_project(client, "Older")
    await create_project(client, "Newer")
    await start_survey(client, old)

    r = await client.get("/api/projects", headers=user_headers())
    projects = r.json()["projects"]
    assert projects[0]["name"] == "Older"
    assert projects[0]["responsesCount"] == 1
    assert projects[0]["lastResponseAt"] is not None


@pytest.mark.asyncio
async def test_projects_require_identity(client) -> None:
    assert (await client.get("/api/projects")).status_code == 401
    r = await client.post("/api/projects", json={"name": "Apollo"})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_project_creation_flag(tmp_path) -> None:
    settings = make_settings(tmp_path, feature_flags={"projectCreation": False})
    async with running_client(settings) as (_, client):
        r = await client.post("/api/projects", json={"name": "Apollo"}, headers=user_headers())
        assert r.status_code == 403
        assert r.json() == {"error": "Project creation is disabled"}

        flags = await client.get("/api/feature-flags", headers=user_headers())
        assert flags.json()["featureFlags"]["projectCreation"] is False
        assert flags.json()["featureFlags"]["responseEditing"] is True


@pytest.mark.asyncio
async def test_non_ascii_name_is_get_or_create(client) -> None:
    body = {"name": "Проект Альфа"}
    first = await client.post("/api/projects", json=body, headers=user_headers())
    again = await client.post("/api/projects", json=body, headers=user_headers())

    assert first.status_code == 201
    assert again.status_code == 200
    assert again.json()["project"]["id"] == first.json()["project"]["id"]

    r = await client.get("/api/projects", params={"search": "Проект"}, headers=user_headers())
    assert [p["name"] for p in r.json()["projects"]] == ["Проект Альфа"]
    r = await client.get("/api/projects", params={"search": "Альф"}, headers=user_headers())
    assert [p["name"] for p in r.json()["projects"]] == ["Проект Альфа"]


@pytest.mark.asyncio
async def test_search_treats_underscore_literally(client) -> None:
    await create_project(client, "core_api")
    await create_project(client, "coreXapi")

    r = await client.get("/api/projects", params={"search": "e_a"}, headers=user_headers())
    assert [p["name"] for p in r.json()["projects"]] == ["core_api"]
