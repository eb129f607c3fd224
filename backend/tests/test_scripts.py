"""
Tests for maintenance scripts.
"""
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from make_admin import update_user
from sweep_orphaned_objects import find_orphaned_keys


class TestOrphanSweep:

    def test_keys_without_rows_are_orphaned(self):
        stored = iter(["org-1/team/u-1-a.jpg", "org-1/team/u-2-b.jpg", "users/documents/u-3-c.pdf"])
        known = {"org-1/team/u-1-a.jpg"}

        assert find_orphaned_keys(stored, known) == [
            "org-1/team/u-2-b.jpg",
            "users/documents/u-3-c.pdf",
        ]

    def test_nothing_orphaned(self):
        assert find_orphaned_keys(["a"], {"a"}) == []


class TestMakeAdmin:
    """Tests for make_admin.update_user."""

    @pytest.mark.asyncio
    async def test_promotes_user(self, db_session: AsyncSession, loner, org):
        user = await update_user(
            db_session, loner.email, "staff", account_type="team_lead", organization_id=org.id
        )

        assert user.id == loner.id
        assert user.role == "staff"
        assert user.account_type == "team_lead"
        assert user.organization_id == org.id

    @pytest.mark.asyncio
    async def test_role_only_keeps_account_type(self, db_session: AsyncSession, member):
        user = await update_user(db_session, member.email, "admin")

        assert user.role == "admin"
        assert user.account_type == "team_member"
        assert user.organization_id == member.organization_id

    @pytest.mark.asyncio
    async def test_unknown_email(self, db_session: AsyncSession):
        assert await update_user(db_session, "nobody@example.com", "admin") is None

    @pytest.mark.asyncio
    async def test_unknown_organization(self, db_session: AsyncSession, loner):
        with pytest.raises(ValueError, match="not found"):
            await update_user(db_session, loner.email, "admin", organization_id="missing-org")

        await db_session.refresh(loner)
        assert loner.role == "client"
        assert loner.organization_id is None
