"""
Integration tests for rating history endpoints.

Tests:
- POST /members/{handle}/stats/history
- PATCH /members/{handle}/stats/history
- GET /members/{handle}/stats/history
"""

import pytest
from sqlalchemy import select

from member_stats.api.models import DataScienceHistoryEntry, DevelopHistoryEntry

HISTORY_URL = "/members/alice/stats/history"


def develop_entry(challenge_id, name, rating, **extra):
    return {
        "challengeId": challenge_id,
        "challengeName": name,
        "ratingDate": "2024-03-01T00:00:00Z",
        "newRating": rating,
        "subTrack": "CODE",
        "subTrackId": 39,
        **extra,
    }


def srm_entry(challenge_id, name):
    return {
        "challengeId": challenge_id,
        "challengeName": name,
        "date": "2024-03-01T00:00:00Z",
        "rating": 1200,
        "placement": 4,
        "percentile": 75.5,
        "subTrack": "SRM",
        "subTrackId": 1,
    }


async def entry_ids(session_factory, model):
    async with session_factory() as session:
        result = await session.execute(select(model.id).order_by(model.id))
        return list(result.scalars().all())


class TestCreateHistoryStats:
    """POST /members/{handle}/stats/history"""

    @pytest.mark.asyncio
    async def test_creates_history(self, client, member, user_headers):
        response = await client.post(HISTORY_URL, headers=user_headers(), json={
            "develop": [develop_entry(1, "C", 1500)],
        })

        assert response.status_code == 201
        data = response.json()
        assert data["groupId"] == 10
        assert data["handleLower"] == "alice"
        history = data["DEVELOP"]["subTracks"][0]
        assert history["id"] == 39
        assert history["name"] == "CODE"
        assert history["history"][0]["challengeName"] == "C"
        assert history["history"][0]["newRating"] == 1500
        assert history["history"][0]["ratingDate"] == 1709251200000
        assert "DATA_SCIENCE" not in data

    @pytest.mark.asyncio
    async def test_data_science_history(self, client, member, admin_headers):
        response = await client.post(HISTORY_URL, headers=admin_headers, json={
            "dataScience": [srm_entry(5, "SRM 850")],
        })

        assert response.status_code == 201
        data = response.json()
        assert data["createdBy"] == "boss"
        assert data["DATA_SCIENCE"]["SRM"]["history"][0]["percentile"] == 75.5

    @pytest.mark.asyncio
    async def test_unknown_data_science_subtrack_rejected(self, client, member, user_headers):
        response = await client.post(HISTORY_URL, headers=user_headers(), json={
            "dataScience": [srm_entry(5, "SRM 850"), {**srm_entry(6, "Other"), "subTrack": "BOGUS"}],
        })

        assert response.status_code == 400
        assert response.json()["detail"]["error_code"] == "BAD_REQUEST"

    @pytest.mark.asyncio
    async def test_entry_fields_are_required(self, client, member, user_headers):
        response = await client.post(HISTORY_URL, headers=user_headers(), json={
            "develop": [{"challengeId": 1, "challengeName": "C"}],
        })

        assert response.status_code == 400
        assert response.json()["detail"]["error_code"] == "BAD_REQUEST"

    @pytest.mark.asyncio
    async def test_duplicate_scope_rejected(self, client, member, user_headers):
        await client.post(HISTORY_URL, headers=user_headers(), json={"develop": []})

        response = await client.post(HISTORY_URL, headers=user_headers(), json={"develop": []})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_other_member_forbidden(self, client, member, user_headers):
        response = await client.post(HISTORY_URL, headers=user_headers("bob"), json={"develop": []})

        assert response.status_code == 403
        assert response.json()["detail"]["message"] == (
            "You are not allowed to create the member history statistics."
        )


class TestUpdateHistoryStats:
    """PATCH /members/{handle}/stats/history"""

    @pytest.mark.asyncio
    async def test_reconciles_develop_entries(self, client, member, user_headers, session_factory):
        await client.post(HISTORY_URL, headers=user_headers(), json={
            "develop": [develop_entry(1, "A", 1200), develop_entry(2, "B", 1300)],
            "dataScience": [srm_entry(5, "SRM 850")],
        })
        a_id, b_id = await entry_ids(session_factory, DevelopHistoryEntry)

        response = await client.patch(HISTORY_URL, headers=user_headers(), json={
            "develop": [
                develop_entry(1, "A", 1250, id=a_id),
                develop_entry(3, "D", 1400),
            ],
        })

        assert response.status_code == 200
        history = response.json()["DEVELOP"]["subTracks"][0]["history"]
        assert [(h["challengeName"], h["newRating"]) for h in history] == [("A", 1250), ("D", 1400)]
        assert b_id not in await entry_ids(session_factory, DevelopHistoryEntry)
        # dataScience was not sent, so its entries are gone
        assert await entry_ids(session_factory, DataScienceHistoryEntry) == []
        assert "DATA_SCIENCE" not in response.json()
        assert response.json()["updatedBy"] == "alice"

    @pytest.mark.asyncio
    async def test_empty_list_clears_collection(self, client, member, user_headers, session_factory):
        await client.post(HISTORY_URL, headers=user_headers(), json={
            "develop": [develop_entry(1, "A", 1200)],
        })

        response = await client.patch(HISTORY_URL, headers=user_headers(), json={"develop": []})

        assert response.status_code == 200
        assert "DEVELOP" not in response.json()
        assert await entry_ids(session_factory, DevelopHistoryEntry) == []

    @pytest.mark.asyncio
    async def test_unknown_entry_id(self, client, member, user_headers, session_factory):
        await client.post(HISTORY_URL, headers=user_headers(), json={
            "develop": [develop_entry(1, "A", 1200)],
        })
        before = await entry_ids(session_factory, DevelopHistoryEntry)

        response = await client.patch(HISTORY_URL, headers=user_headers(), json={
            "develop": [develop_entry(9, "Z", 1000, id=4242)],
        })

        assert response.status_code == 404
        assert await entry_ids(session_factory, DevelopHistoryEntry) == before

    @pytest.mark.asyncio
    async def test_deleted_entry_id_is_not_reused(self, client, member, user_headers, session_factory):
        await client.post(HISTORY_URL, headers=user_headers(), json={
            "develop": [develop_entry(1, "A", 1200), develop_entry(2, "B", 1300)],
        })
        a_id, b_id = await entry_ids(session_factory, DevelopHistoryEntry)
        await client.patch(HISTORY_URL, headers=user_headers(), json={
            "develop": [develop_entry(1, "A", 1200, id=a_id), develop_entry(3, "C", 1400)],
        })
        after_first = await entry_ids(session_factory, DevelopHistoryEntry)
        assert b_id not in after_first

        response = await client.patch(HISTORY_URL, headers=user_headers(), json={
            "develop": [develop_entry(1, "A", 1200, id=a_id), develop_entry(2, "B-stale", 1300, id=b_id)],
        })

        assert response.status_code == 404
        assert await entry_ids(session_factory, DevelopHistoryEntry) == after_first

    @pytest.mark.asyncio
    async def test_no_record_for_scope(self, client, member, user_headers):
        response = await client.patch(HISTORY_URL, headers=user_headers(), json={"groupId": 20})

        assert response.status_code == 404


class TestGetHistoryStats:
    """GET /members/{handle}/stats/history"""

    @pytest.mark.asyncio
    async def test_public_history(self, client, member, user_headers):
        await client.post(HISTORY_URL, headers=user_headers(), json={
            "develop": [develop_entry(1, "A", 1200)],
        })

        response = await client.get(HISTORY_URL, params={"fields": "handle,DEVELOP"})

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert set(data[0]) == {"handle", "DEVELOP"}

    @pytest.mark.asyncio
    async def test_history_fields_allow_list(self, client, member):
        response = await client.get(HISTORY_URL, params={"fields": "COPILOT"})

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Invalid value: COPILOT"
