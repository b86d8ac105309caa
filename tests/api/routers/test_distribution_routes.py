"""
Integration tests for GET /members/stats/distribution.
"""

from datetime import datetime, timezone

import pytest

from member_stats.api.models import DistributionStats

DISTRIBUTION_URL = "/members/stats/distribution"


@pytest.fixture
async def distributions(session_factory):
    async with session_factory() as session:
        session.add_all([
            DistributionStats(
                track="DEVELOP", sub_track="CODE",
                distribution={"ratingRange0To099": 3, "ratingRange100To199": 1},
                created_at=datetime(2020, 1, 1, tzinfo=timezone.utc), created_by="first",
                updated_at=datetime(2021, 1, 1, tzinfo=timezone.utc), updated_by="early",
            ),
            DistributionStats(
                track="DEVELOP", sub_track="CODE_REVIEW",
                distribution={"ratingRange0To099": 2, "ratingRange200To299": 5},
                created_at=datetime(2020, 6, 1, tzinfo=timezone.utc), created_by="second",
                updated_at=datetime(2022, 1, 1, tzinfo=timezone.utc), updated_by="late",
            ),
            DistributionStats(
                track="DATA_SCIENCE", sub_track="SRM",
                distribution={"ratingRange0To099": 100},
                created_by="third",
            ),
        ])
        await session.commit()


class TestGetDistribution:

    @pytest.mark.asyncio
    async def test_sums_matching_rows(self, client, distributions):
        response = await client.get(DISTRIBUTION_URL, params={"track": "develop", "subTrack": "code"})

        assert response.status_code == 200
        data = response.json()
        assert data["track"] == "develop"
        assert data["subTrack"] == "code"
        assert data["distribution"] == {
            "ratingRange0To099": 5,
            "ratingRange100To199": 1,
            "ratingRange200To299": 5,
        }
        assert data["createdAt"] == 1577836800000
        assert data["createdBy"] == "first"
        assert data["updatedAt"] == 1640995200000
        assert data["updatedBy"] == "late"

    @pytest.mark.asyncio
    async def test_exact_subtrack(self, client, distributions):
        data = (await client.get(DISTRIBUTION_URL, params={"track": "DATA", "subTrack": "SRM"})).json()

        assert data["distribution"] == {"ratingRange0To099": 100}
        assert data["updatedAt"] is None

    @pytest.mark.asyncio
    async def test_fields_filter(self, client, distributions):
        data = (await client.get(
            DISTRIBUTION_URL, params={"track": "develop", "fields": "distribution"},
        )).json()

        assert list(data) == ["distribution"]

    @pytest.mark.asyncio
    async def test_nothing_matches(self, client, distributions):
        response = await client.get(DISTRIBUTION_URL, params={"track": "DESIGN"})

        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "No member distribution statistics is found."

    @pytest.mark.asyncio
    async def test_bad_fields(self, client, distributions):
        response = await client.get(DISTRIBUTION_URL, params={"fields": "track,nope"})

        assert response.status_code == 400
