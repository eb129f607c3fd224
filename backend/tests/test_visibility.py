"""
Tests for the visibility filter: who sees which photos and documents.
"""
import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import InvalidArgument
from app.models.document import Document
from app.models.photo import Photo, Visibility
from app.services.document_service import DocumentService
from app.services.photo_service import PhotoService
from app.services.visibility import (
    Capabilities,
    can_delete,
    parse_visibility,
    visibility_filter,
)
from app.auth.identity import CallerIdentity

caller_of = CallerIdentity.from_user


class TestCapabilities:
    """Tests for the caller -> capability reduction."""

    @pytest.mark.asyncio
    async def test_privileged_callers_see_restricted(self, admin_user, staff_user, team_lead):
        for user in (admin_user, staff_user, team_lead):
            assert Capabilities.from_caller(caller_of(user)).sees_restricted is True

    @pytest.mark.asyncio
    async def test_member_does_not_see_restricted(self, member, loner):
        assert Capabilities.from_caller(caller_of(member)).sees_restricted is False
        assert Capabilities.from_caller(caller_of(loner)).sees_restricted is False

    @pytest.mark.asyncio
    async def test_can_delete_owner_only(self, member, team_lead, admin_user):
        assert can_delete(caller_of(member), Visibility.OWNER_ONLY.value) is False
        assert can_delete(caller_of(team_lead), Visibility.OWNER_ONLY.value) is True
        assert can_delete(caller_of(admin_user), Visibility.OWNER_ONLY.value) is True

    @pytest.mark.asyncio
    async def test_can_delete_shared_or_legacy(self, member):
        assert can_delete(caller_of(member), Visibility.ALL.value) is True
        assert can_delete(caller_of(member), None) is True


class TestParseVisibility:

    def test_defaults_when_missing(self):
        assert parse_visibility(None) == "all"
        assert parse_visibility("", default=Visibility.OWNER_ONLY) == "owner_only"

    def test_accepts_known_values(self):
        assert parse_visibility("owner_only") == "owner_only"
        assert parse_visibility("all") == "all"

    def test_rejects_unknown_value(self):
        with pytest.raises(InvalidArgument):
            parse_visibility("friends")


class TestPhotoVisibility:
    """Photo listing through the visibility filter."""

    @pytest.mark.asyncio
    async def test_member_sees_shared_and_legacy_only(
        self, db_session: AsyncSession, member, team_lead, make_photo
    ):
        shared = await make_photo(team_lead, visibility="all")
        legacy = await make_photo(team_lead, visibility=None)
        await make_photo(team_lead, visibility="owner_only")

        photos = await PhotoService.list_photos(db_session, caller_of(member))

        assert {p.id for p in photos} == {shared.id, legacy.id}

    @pytest.mark.asyncio
    async def test_member_does_not_see_own_owner_only_photo(
        self, db_session: AsyncSession, member, make_photo
    ):
        await make_photo(member, visibility="owner_only")

        photos = await PhotoService.list_photos(db_session, caller_of(member))

        assert photos == []

    @pytest.mark.asyncio
    async def test_privileged_callers_see_everything_in_org(
        self, db_session: AsyncSession, admin_user, staff_user, team_lead, member, make_photo
    ):
        created = [
            await make_photo(member, visibility="all"),
            await make_photo(member, visibility=None),
            await make_photo(member, visibility="owner_only"),
        ]
        expected = {p.id for p in created}

        for user in (admin_user, staff_user, team_lead):
            photos = await PhotoService.list_photos(db_session, caller_of(user))
            assert {p.id for p in photos} == expected

    @pytest.mark.asyncio
    async def test_organization_isolation(
        self, db_session: AsyncSession, member, other_member, admin_user, make_photo
    ):
        await make_photo(member, visibility="all")
        await make_photo(other_member, visibility="all")
        theirs = await make_photo(other_member, visibility="owner_only")

        # Admin of the first organization never sees the second one
        photos = await PhotoService.list_photos(db_session, caller_of(admin_user))
        assert all(p.organization_id == admin_user.organization_id for p in photos)
        assert theirs.id not in {p.id for p in photos}

        photos = await PhotoService.list_photos(db_session, caller_of(other_member))
        assert len(photos) == 1
        assert photos[0].organization_id == other_member.organization_id

    @pytest.mark.asyncio
    async def test_caller_without_org_sees_only_own_uploads(
        self, db_session: AsyncSession, loner, member, make_photo
    ):
        mine = await make_photo(loner, visibility="all")
        await make_photo(member, visibility="all")

        photos = await PhotoService.list_photos(db_session, caller_of(loner))

        assert [p.id for p in photos] == [mine.id]

    @pytest.mark.asyncio
    async def test_newest_first(self, db_session: AsyncSession, member, make_photo):
        now = datetime.now(timezone.utc)
        oldest = await make_photo(member, created_at=now - timedelta(days=2))
        newest = await make_photo(member, created_at=now)
        middle = await make_photo(member, created_at=now - timedelta(days=1))

        photos = await PhotoService.list_photos(db_session, caller_of(member))

        assert [p.id for p in photos] == [newest.id, middle.id, oldest.id]

    @pytest.mark.asyncio
    async def test_filter_matches_predicate_exactly(
        self, db_session: AsyncSession, member, team_lead, other_member, make_photo
    ):
        for uploader in (member, team_lead, other_member):
            for visibility in ("all", "owner_only", None):
                await make_photo(uploader, visibility=visibility)

        caller = caller_of(member)
        result = await db_session.execute(select(Photo).where(visibility_filter(Photo, caller)))
        filtered = {p.id for p in result.scalars().all()}

        everything = (await db_session.execute(select(Photo))).scalars().all()
        expected = {
            p.id for p in everything
            if p.organization_id == caller.organization_id and p.visibility in ("all", None)
        }
        assert filtered == expected


class TestDocumentVisibility:
    """Document listing applies type defaults to legacy rows."""

    @pytest.mark.asyncio
    async def test_member_hides_legacy_restricted_types(
        self, db_session: AsyncSession, member, team_lead, make_document
    ):
        roadmap = await make_document(team_lead, document_type="roadmap", visibility=None)
        other = await make_document(team_lead, document_type="other", visibility=None)
        untyped = await make_document(team_lead, document_type=None, visibility=None)
        shared_contract = await make_document(team_lead, document_type="contract", visibility="all")
        for doc_type in ("contract", "invoice", "proposal"):
            await make_document(team_lead, document_type=doc_type, visibility=None)
        await make_document(team_lead, document_type="roadmap", visibility="owner_only")

        documents = await DocumentService.list_documents(db_session, caller_of(member))

        assert {d.id for d in documents} == {roadmap.id, other.id, untyped.id, shared_contract.id}

    @pytest.mark.asyncio
    async def test_team_lead_sees_all_documents(
        self, db_session: AsyncSession, member, team_lead, make_document
    ):
        await make_document(member, document_type="contract", visibility=None)
        await make_document(member, document_type="invoice", visibility="owner_only")
        await make_document(member, document_type="roadmap", visibility="all")

        documents = await DocumentService.list_documents(db_session, caller_of(team_lead))

        assert len(documents) == 3

    @pytest.mark.asyncio
    async def test_documents_scoped_to_org(
        self, db_session: AsyncSession, admin_user, other_member, make_document
    ):
        await make_document(other_member, document_type="other", visibility="all")

        documents = await DocumentService.list_documents(db_session, caller_of(admin_user))

        assert documents == []

    @pytest.mark.asyncio
    async def test_raw_filter_on_documents(self, db_session: AsyncSession, member, make_document):
        await make_document(member, document_type="invoice", visibility=None)
        visible = await make_document(member, document_type="invoice", visibility="all")

        result = await db_session.execute(
            select(Document).where(
                visibility_filter(Document, caller_of(member), legacy_restricted_types=("invoice",))
            )
        )

        assert [d.id for d in result.scalars().all()] == [visible.id]
