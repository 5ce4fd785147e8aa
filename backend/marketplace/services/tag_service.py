"""
Marketplace Backend — Tag Service
==================================

What:  Storage operations for Tags.
How:   Reads and createTag behave like the other services. deleteTag and
       updateTag are different: they never raise. Every outcome, including a
       malformed id or a storage failure, is reported through TagResult.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.exceptions import MarketplaceError
from marketplace.models.post import post_tags
from marketplace.models.tag import Tag
from marketplace.schemas.tag import TAG_DELETED, TAG_NOT_FOUND, TAG_UPDATED, TagResult
from marketplace.services.base import IdLike, coerce_id, storage_errors

logger = logging.getLogger(__name__)


class TagService:

    async def get_tag(self, db: AsyncSession, tag_id: IdLike) -> Optional[Tag]:
        tid = coerce_id(tag_id, field="tagId")
        async with storage_errors(db, "load tag", tag_id=str(tid)):
            return await db.get(Tag, tid)

    async def list_tags(self, db: AsyncSession) -> List[Tag]:
        async with storage_errors(db, "list tags"):
            result = await db.execute(select(Tag).order_by(Tag.tagname))
            return list(result.scalars().all())

    async def list_tags_for_post(self, db: AsyncSession, post_id: IdLike) -> List[Tag]:
        """Tags attached to one Post (Post.tags relation)."""
        pid = coerce_id(post_id)
        query = (
            select(Tag)
            .join(post_tags, post_tags.c.tag_id == Tag.id)
            .where(post_tags.c.post_id == pid)
            .order_by(Tag.tagname)
        )
        async with storage_errors(db, "list tags of post", post_id=str(pid)):
            result = await db.execute(query)
            return list(result.scalars().all())

    async def create_tag(self, db: AsyncSession, tagname: str) -> Tag:
        tag = Tag(tagname=tagname)
        async with storage_errors(db, "create tag", tagname=tagname):
            db.add(tag)
            await db.flush()
        logger.info("Tag created: %s (%s)", tag.id, tag.tagname)
        return tag

    async def delete_tag(self, db: AsyncSession, tag_id: IdLike) -> TagResult:
        """
        Remove a Tag and its post associations.

        Returns:
            TagResult with success False with "Tag not found" for an unknown id,
            or with the error message for any other failure
        """
        try:
            tag = await self.get_tag(db, tag_id)
            if tag is None:
                return TagResult.failure(TAG_NOT_FOUND)

            async with storage_errors(db, "delete tag", tag_id=str(tag.id)):
                await db.delete(tag)
                await db.flush()
        except MarketplaceError as e:
            logger.warning("deleteTag %s failed: %s", tag_id, e.message)
            return TagResult.failure(e.message)

        logger.info("Tag deleted: %s", tag_id)
        return TagResult(success=True, message=TAG_DELETED)

    async def update_tag(self, db: AsyncSession, tag_id: IdLike, tagname: str) -> TagResult:
        """
        Rename a Tag.

        Returns:
            TagResult carrying the updated Tag on success
        """
        try:
            tag = await self.get_tag(db, tag_id)
            if tag is None:
                return TagResult.failure(TAG_NOT_FOUND)

            async with storage_errors(db, "update tag", tag_id=str(tag.id)):
                tag.tagname = tagname
                await db.flush()
        except MarketplaceError as e:
            logger.warning("updateTag %s failed: %s", tag_id, e.message)
            return TagResult.failure(e.message)

        return TagResult(success=True, message=TAG_UPDATED, tag=tag)


tag_service = TagService()
