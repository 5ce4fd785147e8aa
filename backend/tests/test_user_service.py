"""
Marketplace Backend — User Service Unit Tests
==============================================

What:  Tests for UserService CRUD against an in-memory database.

What we test:
    ✅ Create, fetch, list
    ✅ Partial update writes only the fields that were sent
    ✅ Missing users are None (update/delete) or NotFoundError (profile picture)
    ✅ Deleting a user keeps their posts with the owner cleared
    ✅ Malformed ids raise ValidationError
    ✅ Explicit null for username/email is rejected
    ✅ Storage failures surface as DatabaseError and undo only their own writes
"""

import pytest
from sqlalchemy.exc import OperationalError
from uuid import uuid4

from marketplace.exceptions import DatabaseError, NotFoundError, ValidationError
from marketplace.schemas.post import PostCreate
from marketplace.schemas.user import UserCreate, UserUpdate
from marketplace.services.post_service import post_service
from marketplace.services.user_service import UserService

from conftest import caller_for


class TestUserServiceCrud:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session):
        data = UserCreate(username="alice", email="alice@example.com", name="Alice")
        created = await self.service.create_user(db_session, data)

        fetched = await self.service.get_user(db_session, str(created.id))

        assert fetched is not None
        assert fetched.id == created.id
        assert fetched.name == "Alice"
        assert fetched.created_at is not None

    @pytest.mark.asyncio
    async def test_get_unknown_user_is_none(self, db_session):
        assert await self.service.get_user(db_session, str(uuid4())) is None

    @pytest.mark.asyncio
    async def test_get_with_malformed_id_raises(self, db_session):
        with pytest.raises(ValidationError, match="Invalid id"):
            await self.service.get_user(db_session, "not-a-uuid")

    @pytest.mark.asyncio
    async def test_list_users(self, db_session, make_user):
        await make_user("alice")
        await make_user("bob")

        users = await self.service.list_users(db_session)

        assert {u.username for u in users} == {"alice", "bob"}

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, db_session, make_user):
        user = await make_user("alice", name="Alice", phone="555-0100")

        updated = await self.service.update_user(db_session, user.id, UserUpdate(phone="555-0199"))

        assert updated.phone == "555-0199"
        assert updated.name == "Alice"
        assert updated.username == "alice"

    @pytest.mark.asyncio
    async def test_null_username_is_rejected(self, db_session, make_user):
        user = await make_user("alice")

        with pytest.raises(ValidationError) as exc_info:
            await self.service.update_user(db_session, user.id, UserUpdate(username=None))

        assert exc_info.value.code == "BAD_USER_INPUT"
        await db_session.refresh(user)
        assert user.username == "alice"

    @pytest.mark.asyncio
    async def test_null_optional_field_is_cleared(self, db_session, make_user):
        user = await make_user("alice", phone="555-0100")

        updated = await self.service.update_user(db_session, user.id, UserUpdate(phone=None))

        assert updated.phone is None

    @pytest.mark.asyncio
    async def test_update_unknown_user_is_none(self, db_session):
        assert await self.service.update_user(db_session, uuid4(), UserUpdate(name="x")) is None

    @pytest.mark.asyncio
    async def test_delete_returns_removed_user(self, db_session, make_user):
        user = await make_user("alice")

        removed = await self.service.delete_user(db_session, user.id)

        assert removed.id == user.id
        assert await self.service.get_user(db_session, user.id) is None

    @pytest.mark.asyncio
    async def test_delete_unknown_user_is_none(self, db_session):
        assert await self.service.delete_user(db_session, uuid4()) is None

    @pytest.mark.asyncio
    async def test_delete_keeps_posts_without_owner(self, db_session, make_user):
        user = await make_user("alice")
        post = await post_service.create_post(
            db_session, caller_for(user), PostCreate(title="Bike", price=120.0)
        )

        await self.service.delete_user(db_session, user.id)

        remaining = await post_service.get_post(db_session, post.id)
        assert remaining is not None
        assert remaining.user_id is None


class TestProfilePicture:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_overwrites_reference(self, db_session, make_user):
        user = await make_user("alice", profile_picture="old.png")

        updated = await self.service.add_profile_picture(db_session, user.id, "new.png")

        assert updated.profile_picture == "new.png"

    @pytest.mark.asyncio
    async def test_unknown_user_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.add_profile_picture(db_session, uuid4(), "new.png")
        assert exc_info.value.code == "NOT_FOUND"


class TestStorageFailures:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_list_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("db down"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_users(mock_db_session)

        assert exc_info.value.expose is False
        assert exc_info.value.context["action"] == "list users"
        mock_db_session.begin_nested.assert_called_once()
        mock_db_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_update_keeps_earlier_writes(self, db_session, make_user):
        await make_user("dup")
        target = await make_user("u2")

        with pytest.raises(DatabaseError):
            await self.service.update_user(db_session, target.id, UserUpdate(username="dup"))
        await make_user("later")
        await db_session.commit()

        users = await self.service.list_users(db_session)
        assert {u.username for u in users} == {"dup", "u2", "later"}
