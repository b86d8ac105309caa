"""Tests for group visibility resolution."""

import pytest

from member_stats.api.models import Member
from member_stats.api.services.group_access import GroupAccessResolver
from member_stats.auth import AuthUser


@pytest.fixture
def resolver():
    return GroupAccessResolver(public_group_id=10)


@pytest.fixture
def alice():
    return Member(user_id=1001, handle="Alice", handle_lower="alice")


class TestGroupAccessResolver:

    @pytest.mark.asyncio
    async def test_defaults_to_public_group(self, resolver, alice):
        assert await resolver.allowed_group_ids(None, alice) == [10]
        assert await resolver.allowed_group_ids(None, alice, []) == [10]

    @pytest.mark.asyncio
    async def test_anonymous_sees_only_public(self, resolver, alice):
        assert await resolver.allowed_group_ids(None, alice, [20, 10, 30]) == [10]

    @pytest.mark.asyncio
    async def test_other_member_sees_only_public(self, resolver, alice):
        bob = AuthUser(sub="auth0|bob", handle="bob")

        assert await resolver.allowed_group_ids(bob, alice, [20]) == []

    @pytest.mark.asyncio
    async def test_owner_sees_private_groups(self, resolver, alice):
        owner = AuthUser(sub="auth0|alice", handle="ALICE")

        assert await resolver.allowed_group_ids(owner, alice, [20, 10, 20]) == [20, 10]
