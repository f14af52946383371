"""
Integration tests for /api/v1/summaries.

Covered:
- GET /summaries/{week_start}: null when nothing was generated
- PUT /summaries: upsert on (user, week_start), second write wins
- summaries are per user
"""

import pytest

pytestmark = pytest.mark.integration


def summary(comparison: str = "Better than last week", total: int = 50, week: str = "2024-01-01") -> dict:
    return {
        "week_start": week,
        "total_duration": total,
        "exercise_stats": {"squat": 22},
        "comparison_with_last_week": comparison,
        "improvement_suggestions": "Stretch more",
        "generated_at": "2024-01-07T20:00:00",
    }


@pytest.mark.asyncio
async def test_get_absent_summary_returns_null(user_client):
    response = await user_client.get("/api/v1/summaries/2024-01-01")

    assert response.status_code == 200
    assert response.json() is None


@pytest.mark.asyncio
async def test_put_then_get_summary(user_client, user_fixture):
    saved = await user_client.put("/api/v1/summaries", json=summary())
    assert saved.status_code == 200
    assert saved.json()["user_id"] == user_fixture.id

    response = await user_client.get("/api/v1/summaries/2024-01-01")
    data = response.json()
    assert data["total_duration"] == 50
    assert data["exercise_stats"] == {"squat": 22}
    assert data["comparison_with_last_week"] == "Better than last week"


@pytest.mark.asyncio
async def test_second_save_overwrites_first(user_client):
    first = (await user_client.put("/api/v1/summaries", json=summary("first", total=10))).json()
    second = (await user_client.put("/api/v1/summaries", json=summary("second", total=20))).json()

    assert second["id"] == first["id"]
    data = (await user_client.get("/api/v1/summaries/2024-01-01")).json()
    assert data["comparison_with_last_week"] == "second"
    assert data["total_duration"] == 20


@pytest.mark.asyncio
async def test_summaries_are_scoped_to_user(user_client, other_client):
    await user_client.put("/api/v1/summaries", json=summary())

    response = await other_client.get("/api/v1/summaries/2024-01-01")
    assert response.json() is None


@pytest.mark.asyncio
async def test_summary_requires_authentication(client):
    response = await client.get("/api/v1/summaries/2024-01-01")
    assert response.status_code == 401
