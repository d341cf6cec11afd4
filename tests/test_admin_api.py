"""
tests.test_admin_api

Admin dashboard and moderation endpoints, guarded by the static admin token.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import delete, func, select

from enps_survey.db.models import Project, Survey
from tests.conftest import (
    ADMIN_HEADERS,
    ADMIN_TOKEN,
    backdate_survey,
    create_project,
    make_settings,
    running_client,
    start_survey,
    user_headers,
)


async def answer(client, survey_id: int, user_id: int, **body) -> None:
    r = await client.patch(
        f"/api/surveys/{survey_id}", json=body, headers=user_headers(user_id=user_id)
    )
    assert r.status_code == 200, r.text


async def seed_portfolio(client) -> dict[str, int]:
    alpha = await create_project(client, "Alpha")
    beta = await create_project(client, "Beta")
    gamma = await create_project(client, "Gamma")

    rows = [
        (101, 8, "yes"),
        (102, None, "yes"),
        (103, 6, "no"),
    ]
    for user_id, rating, contribution in rows:
        survey = await start_survey(client, alpha, user_id=user_id)
        await answer(
            client,
            survey["record"]["id"],
            user_id,
            projectRecommendation=rating,
            contributionValued=contribution,
        )

    survey = await start_survey(client, beta, user_id=101)
    await answer(client, survey["record"]["id"], 101, projectRecommendation=10)
    return {"alpha": alpha, "beta": beta, "gamma": gamma}


@pytest.mark.asyncio
async def test_dashboard_stats(client) -> None:
    ids = await seed_portfolio(client)

    r = await client.get("/api/admin/projects", headers=ADMIN_HEADERS)
    assert r.status_code == 200
    body = r.json()
    by_name = {p["name"]: p for p in body["projects"]}

    alpha = by_name["Alpha"]
    assert alpha["id"] == ids["alpha"]
    assert alpha["responsesCount"] == 3
    assert alpha["uniqueRespondents"] == 3
    assert alpha["averages"]["projectRecommendation"] == pytest.approx(7.0)
    assert alpha["averages"]["managerEffectiveness"] is None
    assert alpha["contributionBreakdown"] == {"yes": 2, "partial": 0, "no": 1}

    gamma = by_name["Gamma"]
    assert gamma["responsesCount"] == 0
    assert gamma["uniqueRespondents"] == 0
    assert gamma["lastResponseAt"] is None
    assert gamma["averages"]["projectRecommendation"] is None
    assert gamma["contributionBreakdown"] == {"yes": 0, "partial": 0, "no": 0}

    # (7.0 * 3 + 10.0 * 1) / 4
    assert body["overallScore"] == pytest.approx(7.75)


@pytest.mark.asyncio
async def test_overall_score_is_null_without_ratings(client) -> None:
    await create_project(client, "Empty")
    r = await client.get("/api/admin/projects", headers=ADMIN_HEADERS)
    assert r.json()["overallScore"] is None


@pytest.mark.asyncio
async def test_bearer_token_is_accepted(client) -> None:
    r = await client.get(
        "/api/admin/projects", headers={"authorization": f"Bearer {ADMIN_TOKEN}"}
    )
    assert r.status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "headers",
    [{}, {"x-admin-token": "nope"}, {"authorization": "Bearer nope"}],
)
async def test_admin_token_required(client, headers) -> None:
    r = await client.get("/api/admin/projects", headers=headers)
    assert r.status_code == 401
    assert r.json() == {"error": "Invalid admin token"}


@pytest.mark.asyncio
async def test_admin_unconfigured(tmp_path) -> None:
    settings = make_settings(tmp_path, admin_token="")
    async with running_client(settings) as (_, client):
        r = await client.get("/api/admin/projects", headers={"x-admin-token": "anything"})
        assert r.status_code == 503
        assert r.json() == {"error": "Admin access is not configured"}

        r = await client.get("/api/admin/debug-token")
        assert r.status_code == 503


@pytest.mark.asyncio
async def test_debug_token(client) -> None:
    r = await client.get("/api/admin/debug-token")
    assert r.status_code == 200
    assert r.json() == {"token": ADMIN_TOKEN}


@pytest.mark.asyncio
async def test_debug_token_hidden_in_secure_mode(tmp_path) -> None:
    settings = make_settings(tmp_path, allow_insecure_init_data=False)
    async with running_client(settings) as (_, client):
        assert (await client.get("/api/admin/debug-token")).status_code == 404


@pytest.mark.asyncio
async def test_rename_project(client) -> None:
    alpha = await create_project(client, "Alpha")
    await create_project(client, "Beta")

    r = await client.patch(
        f"/api/admin/projects/{alpha}", json={"name": "Alpha Prime"}, headers=ADMIN_HEADERS
    )
    assert r.status_code == 200
    assert r.json()["project"]["name"] == "Alpha Prime"

    # Case-only rename of the same project is allowed.
    r = await client.patch(
        f"/api/admin/projects/{alpha}", json={"name": "ALPHA PRIME"}, headers=ADMIN_HEADERS
    )
    assert r.status_code == 200

    r = await client.patch(
        f"/api/admin/projects/{alpha}", json={"name": "beta"}, headers=ADMIN_HEADERS
    )
    assert r.status_code == 409
    assert r.json() == {"error": "Project with this name already exists"}

    r = await client.patch(
        "/api/admin/projects/9999", json={"name": "Ghost"}, headers=ADMIN_HEADERS
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_delete_project_removes_surveys(client) -> None:
    ids = await seed_portfolio(client)

    r = await client.delete(f"/api/admin/projects/{ids['alpha']}", headers=ADMIN_HEADERS)
    assert r.status_code == 204

    listed = await client.get("/api/projects", headers=user_headers())
    assert "Alpha" not in [p["name"] for p in listed.json()["projects"]]

    own = await client.get("/api/surveys", headers=user_headers(user_id=102))
    assert own.json()["surveys"] == []

    r = await client.get(f"/api/admin/projects/{ids['alpha']}/responses", headers=ADMIN_HEADERS)
    assert r.status_code == 404

    r = await client.delete(f"/api/admin/projects/{ids['alpha']}", headers=ADMIN_HEADERS)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_project_responses(client) -> None:
    ids = await seed_portfolio(client)

    r = await client.get(f"/api/admin/projects/{ids['alpha']}/responses", headers=ADMIN_HEADERS)
    assert r.status_code == 200
    surveys = r.json()["surveys"]
    assert len(surveys) == 3
    assert {s["user"]["id"] for s in surveys} == {101, 102, 103}
    assert all(s["projectName"] == "Alpha" for s in surveys)

    r = await client.get(
        f"/api/admin/projects/{ids['alpha']}/responses",
        params={"completed": "true"},
        headers=ADMIN_HEADERS,
    )
    assert r.json()["surveys"] == []


@pytest.mark.asyncio
async def test_admin_edits_ignore_window(app, client) -> None:
    project_id = await create_project(client)
    survey_id = (await start_survey(client, project_id))["record"]["id"]
    await backdate_survey(app, survey_id, timedelta(days=10))

    r = await client.patch(
        f"/api/admin/surveys/{survey_id}",
        json={"teamComfort": 2, "improvementIdeas": "  "},
        headers=ADMIN_HEADERS,
    )
    assert r.status_code == 200
    survey = r.json()["survey"]
    assert survey["teamComfort"] == 2
    assert survey["improvementIdeas"] is None
    assert survey["canEdit"] is False

    r = await client.patch(
        "/api/admin/surveys/9999", json={"teamComfort": 2}, headers=ADMIN_HEADERS
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_admin_delete_survey(client) -> None:
    project_id = await create_project(client)
    survey_id = (await start_survey(client, project_id))["record"]["id"]

    r = await client.delete(f"/api/admin/surveys/{survey_id}", headers=ADMIN_HEADERS)
    assert r.status_code == 204
    assert (await client.get(f"/api/surveys/{survey_id}", headers=user_headers())).status_code == 404

    r = await client.delete(f"/api/admin/surveys/{survey_id}", headers=ADMIN_HEADERS)
    assert r.status_code == 404
    assert r.json() == {"error": "Survey not found"}

    # Deleting today's survey lets the user start a fresh one.
    again = await start_survey(client, project_id)
    assert again["wasCreated"] is True


@pytest.mark.asyncio
async def test_schema_cascades_survey_rows(app, client) -> None:
    ids = await seed_portfolio(client)

    # Bypass the repository so only the foreign key removes the surveys.
    async with app.state.sessionmaker() as session:
        await session.execute(delete(Project).where(Project.id == ids["alpha"]))
        await session.commit()

        remaining = await session.execute(
            select(Survey.project_id, func.count()).group_by(Survey.project_id)
        )
        assert dict(remaining.all()) == {ids["beta"]: 1}
