"""
Integration tests for member skill endpoints.

Tests:
- GET /members/{handle}/skills
- POST /members/{handle}/skills
- PATCH /members/{handle}/skills
"""

import uuid

import pytest

from member_stats.api.models import DisplayMode, Skill, SkillCategory, SkillLevel

SKILLS_URL = "/members/alice/skills"


@pytest.fixture
async def catalogue(session_factory):
    """One skill with a category, two display modes and two levels."""
    category = SkillCategory(id=uuid.uuid4(), name="Programming")
    python = Skill(id=uuid.uuid4(), name="Python", category_id=category.id)
    principal = DisplayMode(id=uuid.uuid4(), name="principal")
    additional = DisplayMode(id=uuid.uuid4(), name="additional")
    verified = SkillLevel(id=uuid.uuid4(), name="verified", description="Verified by challenges")
    self_declared = SkillLevel(id=uuid.uuid4(), name="self-declared", description="Self declared")

    async with session_factory() as session:
        session.add_all([category, python, principal, additional, verified, self_declared])
        await session.commit()

    return {
        "skill": python.id,
        "principal": principal.id,
        "additional": additional.id,
        "verified": verified.id,
        "self_declared": self_declared.id,
    }


class TestCreateMemberSkill:
    """POST /members/{handle}/skills"""

    @pytest.mark.asyncio
    async def test_adds_skill(self, client, member, catalogue, user_headers):
        response = await client.post(SKILLS_URL, headers=user_headers(), json={
            "skillId": str(catalogue["skill"]),
            "displayModeId": str(catalogue["principal"]),
            "levels": [str(catalogue["verified"])],
        })

        assert response.status_code == 200
        skills = response.json()
        assert len(skills) == 1
        assert skills[0]["name"] == "Python"
        assert skills[0]["category"]["name"] == "Programming"
        assert skills[0]["displayMode"]["name"] == "principal"
        assert [level["name"] for level in skills[0]["levels"]] == ["verified"]

    @pytest.mark.asyncio
    async def test_duplicate_skill(self, client, member, catalogue, user_headers):
        payload = {"skillId": str(catalogue["skill"])}
        await client.post(SKILLS_URL, headers=user_headers(), json=payload)

        response = await client.post(SKILLS_URL, headers=user_headers(), json=payload)

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "This member skill exists"

    @pytest.mark.asyncio
    async def test_unknown_display_mode(self, client, member, catalogue, user_headers):
        response = await client.post(SKILLS_URL, headers=user_headers(), json={
            "skillId": str(catalogue["skill"]),
            "displayModeId": str(uuid.uuid4()),
        })

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_level(self, client, member, catalogue, user_headers):
        response = await client.post(SKILLS_URL, headers=user_headers(), json={
            "skillId": str(catalogue["skill"]),
            "levels": [str(catalogue["verified"]), str(uuid.uuid4())],
        })

        assert response.status_code == 400
        assert response.json()["detail"]["message"] == "Please make sure skill level exists"

    @pytest.mark.asyncio
    async def test_unknown_skill(self, client, member, catalogue, user_headers):
        response = await client.post(SKILLS_URL, headers=user_headers(), json={"skillId": str(uuid.uuid4())})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_skill_id(self, client, member, user_headers):
        response = await client.post(SKILLS_URL, headers=user_headers(), json={"skillId": "python"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_other_member_forbidden(self, client, member, catalogue, user_headers):
        response = await client.post(
            SKILLS_URL, headers=user_headers("bob"), json={"skillId": str(catalogue["skill"])},
        )

        assert response.status_code == 403


class TestUpdateMemberSkill:
    """PATCH /members/{handle}/skills"""

    @pytest.mark.asyncio
    async def test_replaces_display_mode_and_levels(self, client, member, catalogue, user_headers):
        await client.post(SKILLS_URL, headers=user_headers(), json={
            "skillId": str(catalogue["skill"]),
            "displayModeId": str(catalogue["principal"]),
            "levels": [str(catalogue["verified"])],
        })

        response = await client.patch(SKILLS_URL, headers=user_headers(), json={
            "skillId": str(catalogue["skill"]),
            "displayModeId": str(catalogue["additional"]),
            "levels": [str(catalogue["self_declared"])],
        })

        assert response.status_code == 200
        skill = response.json()[0]
        assert skill["displayMode"]["name"] == "additional"
        assert [level["name"] for level in skill["levels"]] == ["self-declared"]

    @pytest.mark.asyncio
    async def test_empty_levels_keep_stored_levels(self, client, member, catalogue, user_headers):
        await client.post(SKILLS_URL, headers=user_headers(), json={
            "skillId": str(catalogue["skill"]),
            "levels": [str(catalogue["verified"])],
        })

        response = await client.patch(SKILLS_URL, headers=user_headers(), json={
            "skillId": str(catalogue["skill"]),
            "levels": [],
        })

        assert response.status_code == 200
        assert [level["name"] for level in response.json()[0]["levels"]] == ["verified"]

    @pytest.mark.asyncio
    async def test_skill_not_claimed(self, client, member, catalogue, user_headers):
        response = await client.patch(SKILLS_URL, headers=user_headers(), json={
            "skillId": str(catalogue["skill"]),
        })

        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "Member skill not found"


class TestGetMemberSkills:
    """GET /members/{handle}/skills"""

    @pytest.mark.asyncio
    async def test_empty(self, client, member):
        response = await client.get(SKILLS_URL)

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_unknown_member(self, client, member):
        response = await client.get("/members/nobody/skills")

        assert response.status_code == 404
