"""
Integration tests for /api/v1/entries.

Covered:
- POST /entries: one row per set, duration on the first row, shared submission id
- GET /entries: range filter and ordering, bad range
- GET /entries/week/{day}: seven day records
- GET /entries/{id}/form and PUT /entries/{id}: whole submission edited at once
- DELETE /entries/{id}
- rows of another user behave as absent
"""

import pytest

pytestmark = pytest.mark.integration


def form(day: str = "2024-01-03", exercise: str = "Squats", sets=((None, 10),), duration: int = 30,
         feeling: str = "") -> dict:
    return {
        "date": day,
        "exercise": exercise,
        "sets": [{"weight": w, "count": c} for w, c in sets],
        "duration": duration,
        "feeling": feeling,
    }


async def create(client, payload: dict) -> list:
    response = await client.post("/api/v1/entries", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def list_week(client, start: str = "2024-01-01", end: str = "2024-01-07") -> list:
    response = await client.get("/api/v1/entries", params={"start": start, "end": end})
    assert response.status_code == 200
    return response.json()


# ---------------------------------------------------------------------------
# POST /entries
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_multi_set_submission(user_client, user_fixture):
    rows = await create(user_client, form(sets=((20.0, 12), (22.5, 10), (25.0, 8)), duration=40))

    assert len(rows) == 3
    assert [row["duration"] for row in rows] == [40, 0, 0]
    assert [(row["weight"], row["count"]) for row in rows] == [(20.0, 12), (22.5, 10), (25.0, 8)]
    assert [row["set_index"] for row in rows] == [0, 1, 2]
    assert len({row["submission_id"] for row in rows}) == 1
    assert all(row["user_id"] == user_fixture.id for row in rows)


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    form(exercise="   "),
    form(sets=()),
    form(duration=-1),
    form(sets=((None, -3),)),
])
async def test_create_invalid_form_returns_422(user_client, payload):
    response = await user_client.post("/api/v1/entries", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_requires_authentication(client):
    response = await client.post("/api/v1/entries", json=form())
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# GET /entries, GET /entries/week/{day}
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_filters_range_and_orders_by_date(user_client):
    await create(user_client, form(day="2024-01-05", exercise="Plank"))
    await create(user_client, form(day="2024-01-02", exercise="Squats"))
    await create(user_client, form(day="2024-01-09", exercise="Running"))

    rows = await list_week(user_client)

    assert [row["exercise"] for row in rows] == ["Squats", "Plank"]


@pytest.mark.asyncio
async def test_list_keeps_set_order_within_submission(user_client):
    await create(user_client, form(sets=((None, 1), (None, 2), (None, 3))))

    rows = await list_week(user_client)

    assert [row["count"] for row in rows] == [1, 2, 3]


@pytest.mark.asyncio
async def test_list_rejects_reversed_range(user_client):
    response = await user_client.get("/api/v1/entries", params={"start": "2024-01-07", "end": "2024-01-01"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_week_view_has_seven_days_with_totals(user_client):
    await create(user_client, form(day="2024-01-03", sets=((None, 10), (None, 8)), duration=30))
    await create(user_client, form(day="2024-01-03", exercise="Plank", duration=5))

    response = await user_client.get("/api/v1/entries/week/2024-01-04")

    assert response.status_code == 200
    week = response.json()
    assert week["week_start"] == "2024-01-01"
    assert week["week_end"] == "2024-01-07"
    assert len(week["days"]) == 7
    wednesday = week["days"][2]
    assert wednesday["date"] == "2024-01-03"
    assert len(wednesday["entries"]) == 3
    assert wednesday["total_duration"] == 35
    assert week["days"][0]["entries"] == []


# ---------------------------------------------------------------------------
# GET /entries/{id}/form, PUT /entries/{id}
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_form_rebuilds_every_set(user_client):
    rows = await create(user_client, form(sets=((20.0, 12), (22.5, 10)), duration=40, feeling="heavy"))

    response = await user_client.get(f"/api/v1/entries/{rows[1]['id']}/form")

    assert response.status_code == 200
    data = response.json()
    assert data["sets"] == [{"weight": 20.0, "count": 12}, {"weight": 22.5, "count": 10}]
    assert data["duration"] == 40
    assert data["feeling"] == "heavy"


@pytest.mark.asyncio
async def test_replace_swaps_whole_submission(user_client):
    rows = await create(user_client, form(sets=((20.0, 12), (22.5, 10), (25.0, 8)), duration=40))
    other = await create(user_client, form(day="2024-01-04", exercise="Plank", duration=5))

    response = await user_client.put(
        f"/api/v1/entries/{rows[2]['id']}",
        json=form(sets=((30.0, 5), (30.0, 5)), duration=25),
    )

    assert response.status_code == 200
    new_rows = response.json()
    assert len(new_rows) == 2
    assert {row["submission_id"] for row in new_rows} == {rows[0]["submission_id"]}
    assert all(row["created_at"] == rows[0]["created_at"] for row in new_rows)

    listed = await list_week(user_client)
    assert [row["id"] for row in listed] == [row["id"] for row in new_rows] + [other[0]["id"]]
    assert sum(row["duration"] for row in listed) == 30


@pytest.mark.asyncio
async def test_replace_unknown_entry_returns_404(user_client):
    response = await user_client.put("/api/v1/entries/does-not-exist", json=form())
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# DELETE /entries/{id}
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_delete_removes_single_row(user_client):
    rows = await create(user_client, form(sets=((None, 10), (None, 8))))

    response = await user_client.delete(f"/api/v1/entries/{rows[1]['id']}")
    assert response.status_code == 204

    listed = await list_week(user_client)
    assert [row["id"] for row in listed] == [rows[0]["id"]]

    again = await user_client.delete(f"/api/v1/entries/{rows[1]['id']}")
    assert again.status_code == 404


# ---------------------------------------------------------------------------
# Ownership
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_foreign_entries_are_invisible(user_client, other_client):
    rows = await create(user_client, form())
    entry_id = rows[0]["id"]

    assert await list_week(other_client) == []
    assert (await other_client.get(f"/api/v1/entries/{entry_id}/form")).status_code == 404
    assert (await other_client.put(f"/api/v1/entries/{entry_id}", json=form())).status_code == 404
    assert (await other_client.delete(f"/api/v1/entries/{entry_id}")).status_code == 404

    assert len(await list_week(user_client)) == 1
