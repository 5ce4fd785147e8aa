"""
Marketplace Backend — Post Service Unit Tests
==============================================

What:  Tests for PostService reads, the ownership gate, and tag handling.

Gate order for update/delete:
    no caller → UnauthenticatedError
    unknown   → NotFoundError
    not owner → ForbiddenError
"""

import pytest
from uuid import uuid4

from marketplace.auth import Caller
from marketplace.exceptions import ForbiddenError, NotFoundError, UnauthenticatedError
from marketplace.schemas.post import PostCreate, PostUpdate
from marketplace.services.post_service import PostService
from marketplace.services.tag_service import tag_service

from conftest import caller_for


class TestCreatePost:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_owner_is_the_caller(self, db_session, make_user):
        user = await make_user("alice")

        post = await self.service.create_post(
            db_session, caller_for(user), PostCreate(title="Bike", price=120.0)
        )

        assert post.user_id == user.id
        assert post.created_at is not None

    @pytest.mark.asyncio
    async def test_requires_caller(self, mock_db_session):
        with pytest.raises(UnauthenticatedError):
            await self.service.create_post(mock_db_session, None, PostCreate(title="Bike"))
        mock_db_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_tag_is_rejected(self, db_session, make_user):
        user = await make_user("alice")

        with pytest.raises(NotFoundError):
            await self.service.create_post(
                db_session, caller_for(user), PostCreate(title="Bike", tags=[str(uuid4())])
            )


class TestPostReads:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_list_posts_by_tag(self, db_session, make_user):
        user = await make_user("alice")
        bikes = await tag_service.create_tag(db_session, "bikes")
        tools = await tag_service.create_tag(db_session, "tools")
        bike = await self.service.create_post(
            db_session, caller_for(user), PostCreate(title="Bike", tags=[str(bikes.id)])
        )
        await self.service.create_post(
            db_session, caller_for(user), PostCreate(title="Drill", tags=[str(tools.id)])
        )

        tagged = await self.service.list_posts_by_tag(db_session, bikes.id)

        assert [p.id for p in tagged] == [bike.id]

    @pytest.mark.asyncio
    async def test_unused_tag_has_no_posts(self, db_session):
        tag = await tag_service.create_tag(db_session, "empty")
        assert await self.service.list_posts_by_tag(db_session, tag.id) == []

    @pytest.mark.asyncio
    async def test_list_posts_by_owner(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        await self.service.create_post(db_session, caller_for(alice), PostCreate(title="A"))
        await self.service.create_post(db_session, caller_for(bob), PostCreate(title="B"))

        posts = await self.service.list_posts_by_owner(db_session, alice.id)

        assert [p.title for p in posts] == ["A"]


class TestOwnershipGate:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_update_requires_caller(self, db_session):
        with pytest.raises(UnauthenticatedError, match="logged in"):
            await self.service.update_post(db_session, None, uuid4(), PostUpdate(title="x"))

    @pytest.mark.asyncio
    async def test_update_unknown_post(self, db_session, make_user):
        user = await make_user("alice")
        with pytest.raises(NotFoundError):
            await self.service.update_post(
                db_session, caller_for(user), uuid4(), PostUpdate(title="x")
            )

    @pytest.mark.asyncio
    async def test_update_by_non_owner_is_forbidden(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        post = await self.service.create_post(
            db_session, caller_for(alice), PostCreate(title="Bike")
        )

        with pytest.raises(ForbiddenError):
            await self.service.update_post(
                db_session, caller_for(bob), post.id, PostUpdate(title="Stolen")
            )
        assert post.title == "Bike"

    @pytest.mark.asyncio
    async def test_delete_by_non_owner_is_forbidden(self, db_session, make_user):
        alice = await make_user("alice")
        post = await self.service.create_post(
            db_session, caller_for(alice), PostCreate(title="Bike")
        )

        with pytest.raises(ForbiddenError):
            await self.service.delete_post(db_session, Caller(id=str(uuid4())), post.id)
        assert await self.service.get_post(db_session, post.id) is not None


class TestUpdateAndDelete:

    def setup_method(self):
        self.service = PostService()

    @pytest.mark.asyncio
    async def test_partial_update_and_tag_replacement(self, db_session, make_user):
        user = await make_user("alice")
        old = await tag_service.create_tag(db_session, "old")
        new = await tag_service.create_tag(db_session, "new")
        post = await self.service.create_post(
            db_session,
            caller_for(user),
            PostCreate(title="Bike", price=100.0, tags=[str(old.id)]),
        )

        updated = await self.service.update_post(
            db_session, caller_for(user), post.id, PostUpdate(price=80.0, tags=[str(new.id)])
        )

        assert updated.title == "Bike"
        assert updated.price == 80.0
        tags = await tag_service.list_tags_for_post(db_session, post.id)
        assert [t.tagname for t in tags] == ["new"]

    @pytest.mark.asyncio
    async def test_delete_returns_removed_post(self, db_session, make_user):
        user = await make_user("alice")
        post = await self.service.create_post(
            db_session, caller_for(user), PostCreate(title="Bike")
        )

        removed = await self.service.delete_post(db_session, caller_for(user), post.id)

        assert removed.id == post.id
        assert await self.service.get_post(db_session, post.id) is None

    @pytest.mark.asyncio
    async def test_unknown_tag_leaves_post_unchanged(self, db_session, make_user):
        user = await make_user("alice")
        post = await self.service.create_post(
            db_session, caller_for(user), PostCreate(title="Bike", price=100.0)
        )

        with pytest.raises(NotFoundError):
            await self.service.update_post(
                db_session,
                caller_for(user),
                post.id,
                PostUpdate(title="Scooter", tags=[str(uuid4())]),
            )
        await db_session.commit()
        await db_session.refresh(post)

        assert post.title == "Bike"
        assert post.price == 100.0
