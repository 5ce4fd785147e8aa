"""
Marketplace Backend — Comment Service Unit Tests
=================================================

What:  Tests for CommentService writes and their caller gate.

What we test:
    ✅ createComment sets author, post and timestamp, and links the Post
    ✅ No caller → UnauthenticatedError and nothing is written
    ✅ Unknown post / comment → NotFoundError
    ✅ Non-author update/delete → ForbiddenError, comment unchanged
    ✅ Update refreshes the timestamp
    ✅ Storage failure → DatabaseError
"""

import pytest
from datetime import timedelta
from sqlalchemy.exc import OperationalError
from uuid import uuid4

from marketplace.exceptions import (
    DatabaseError,
    ForbiddenError,
    NotFoundError,
    UnauthenticatedError,
)
from marketplace.schemas.post import PostCreate
from marketplace.services.comment_service import CommentService
from marketplace.services.post_service import post_service

from conftest import caller_for


async def _post_by(db_session, user, title="Bike"):
    return await post_service.create_post(db_session, caller_for(user), PostCreate(title=title))


class TestCreateComment:

    def setup_method(self):
        self.service = CommentService()

    @pytest.mark.asyncio
    async def test_links_author_and_post(self, db_session, make_user):
        alice = await make_user("alice")
        post = await _post_by(db_session, alice)

        comment = await self.service.create_comment(
            db_session, caller_for(alice), str(post.id), "Still available?"
        )

        assert comment.author_id == alice.id
        assert comment.post_id == post.id
        assert comment.created_at is not None
        listed = await self.service.list_comments_by_post(db_session, post.id)
        assert [c.id for c in listed] == [comment.id]

    @pytest.mark.asyncio
    async def test_without_caller_writes_nothing(self, mock_db_session):
        with pytest.raises(UnauthenticatedError) as exc_info:
            await self.service.create_comment(mock_db_session, None, str(uuid4()), "hi")

        assert exc_info.value.code == "UNAUTHENTICATED"
        mock_db_session.execute.assert_not_called()
        mock_db_session.add.assert_not_called()
        mock_db_session.flush.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_post(self, db_session, make_user):
        alice = await make_user("alice")

        with pytest.raises(NotFoundError):
            await self.service.create_comment(db_session, caller_for(alice), str(uuid4()), "hi")
        assert await self.service.list_comments(db_session) == []

    @pytest.mark.asyncio
    async def test_storage_failure(self, mock_db_session, make_user):
        alice = await make_user("alice")
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("db down"))

        with pytest.raises(DatabaseError):
            await self.service.create_comment(
                mock_db_session, caller_for(alice), str(uuid4()), "hi"
            )
        mock_db_session.add.assert_not_called()


class TestEditComment:

    def setup_method(self):
        self.service = CommentService()

    @pytest.mark.asyncio
    async def test_update_by_author_refreshes_timestamp(self, db_session, make_user):
        alice = await make_user("alice")
        post = await _post_by(db_session, alice)
        comment = await self.service.create_comment(
            db_session, caller_for(alice), post.id, "first"
        )
        comment.created_at = comment.created_at - timedelta(days=1)
        before = comment.created_at

        updated = await self.service.update_comment(
            db_session, caller_for(alice), comment.id, "edited"
        )

        assert updated.comment_text == "edited"
        assert updated.created_at > before

    @pytest.mark.asyncio
    async def test_update_by_other_user_is_forbidden(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        post = await _post_by(db_session, alice)
        comment = await self.service.create_comment(
            db_session, caller_for(alice), post.id, "mine"
        )

        with pytest.raises(ForbiddenError, match="your own comments"):
            await self.service.update_comment(db_session, caller_for(bob), comment.id, "hijack")

        stored = await self.service.get_comment(db_session, comment.id)
        assert stored.comment_text == "mine"

    @pytest.mark.asyncio
    async def test_update_without_caller(self, db_session):
        with pytest.raises(UnauthenticatedError):
            await self.service.update_comment(db_session, None, uuid4(), "x")

    @pytest.mark.asyncio
    async def test_delete_unknown_comment(self, db_session, make_user):
        alice = await make_user("alice")
        with pytest.raises(NotFoundError):
            await self.service.delete_comment(db_session, caller_for(alice), uuid4())

    @pytest.mark.asyncio
    async def test_delete_by_other_user_is_forbidden(self, db_session, make_user):
        alice = await make_user("alice")
        bob = await make_user("bob")
        post = await _post_by(db_session, alice)
        comment = await self.service.create_comment(
            db_session, caller_for(alice), post.id, "mine"
        )

        with pytest.raises(ForbiddenError):
            await self.service.delete_comment(db_session, caller_for(bob), comment.id)
        assert await self.service.get_comment(db_session, comment.id) is not None

    @pytest.mark.asyncio
    async def test_delete_by_author(self, db_session, make_user):
        alice = await make_user("alice")
        post = await _post_by(db_session, alice)
        comment = await self.service.create_comment(
            db_session, caller_for(alice), post.id, "mine"
        )

        removed = await self.service.delete_comment(db_session, caller_for(alice), comment.id)

        assert removed.id == comment.id
        assert await self.service.list_comments_by_post(db_session, post.id) == []
