"""
Marketplace Backend — GraphQL Schema
=====================================

What:  The Query and Mutation roots, the executable schema, and the FastAPI
       router that serves it.
How:   Each root field calls one service through `info.context.call` (which
       holds the session lock) and applies its error policy explicitly.
       `user`, `post` and `posts` hand their eager-loaded relations on to
       the object types.

Error policy per field:
    ┌────────────────────────────────────────────┬────────────────────────┐
    │ posts, getComment, getAllComments,         │ null_on_storage_error  │
    │ createComment, updateComment, deleteComment│                        │
    ├────────────────────────────────────────────┼────────────────────────┤
    │ deleteTag, updateTag                       │ TagResult (never raise)│
    ├────────────────────────────────────────────┼────────────────────────┤
    │ everything else                            │ propagate              │
    └────────────────────────────────────────────┴────────────────────────┘
"""

from typing import List, Optional

import strawberry
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter
from strawberry.schema.config import StrawberryConfig

from marketplace.config import settings
from marketplace.graphql.context import get_context
from marketplace.graphql.policies import (
    MASKED_ERROR_MESSAGE,
    null_on_storage_error,
    propagate,
    should_mask_error,
)
from marketplace.graphql.scalars import Date, DateScalar
from marketplace.graphql.types import (
    CommentType,
    GQLInfo,
    PostType,
    TagResultType,
    TagType,
    UserInput,
    UserType,
    UserUpdateInput,
    post_create,
    post_update,
)
from marketplace.services.comment_service import comment_service
from marketplace.services.post_service import post_service
from marketplace.services.tag_service import tag_service
from marketplace.services.user_service import user_service


def _maybe(type_, record, **options):
    return type_.from_model(record, **options) if record is not None else None


def _many(type_, records, **options):
    if records is None:
        return None
    return [type_.from_model(record, **options) for record in records]


# ══════════════════════════════════════════════════════════════════════════
# Queries
# ══════════════════════════════════════════════════════════════════════════

@strawberry.type
class Query:

    @strawberry.field(description="One user with their posts and comments; null if unknown")
    async def user(self, info: GQLInfo, id: strawberry.ID) -> Optional[UserType]:
        user = await propagate(
            info.context.call(user_service.get_user, id, with_relations=True)
        )
        return _maybe(UserType, user, preloaded=True)

    @strawberry.field
    async def users(self, info: GQLInfo) -> List[UserType]:
        return _many(UserType, await propagate(info.context.call(user_service.list_users)))

    @strawberry.field
    async def get_tag_by_id(self, info: GQLInfo, tag_id: strawberry.ID) -> Optional[TagType]:
        return _maybe(TagType, await propagate(info.context.call(tag_service.get_tag, tag_id)))

    @strawberry.field
    async def get_all_tags(self, info: GQLInfo) -> List[TagType]:
        return _many(TagType, await propagate(info.context.call(tag_service.list_tags)))

    @strawberry.field(description="All posts with owners; null on storage failure")
    async def posts(self, info: GQLInfo) -> Optional[List[PostType]]:
        posts = await null_on_storage_error(
            "Query.posts", info.context.call(post_service.list_posts)
        )
        return _many(PostType, posts, preloaded=True)

    @strawberry.field
    async def post(self, info: GQLInfo, id: strawberry.ID) -> Optional[PostType]:
        post = await propagate(info.context.call(post_service.get_post, id, with_owner=True))
        return _maybe(PostType, post, preloaded=True)

    @strawberry.field
    async def get_comment(self, info: GQLInfo, id: strawberry.ID) -> Optional[CommentType]:
        comment = await null_on_storage_error(
            "Query.getComment", info.context.call(comment_service.get_comment, id)
        )
        return _maybe(CommentType, comment)

    @strawberry.field
    async def get_all_comments(self, info: GQLInfo) -> Optional[List[CommentType]]:
        comments = await null_on_storage_error(
            "Query.getAllComments", info.context.call(comment_service.list_comments)
        )
        return _many(CommentType, comments)


# ══════════════════════════════════════════════════════════════════════════
# Mutations
# ══════════════════════════════════════════════════════════════════════════

@strawberry.type
class Mutation:

    # ── Users ─────────────────────────────────────────────────────────────

    @strawberry.mutation
    async def create_user(self, info: GQLInfo, input: UserInput) -> UserType:
        user = await propagate(info.context.call(user_service.create_user, input.to_schema()))
        return UserType.from_model(user)

    @strawberry.mutation
    async def update_user(
        self, info: GQLInfo, id: strawberry.ID, input: UserUpdateInput
    ) -> Optional[UserType]:
        user = await propagate(
            info.context.call(user_service.update_user, id, input.to_schema())
        )
        return _maybe(UserType, user)

    @strawberry.mutation
    async def delete_user(self, info: GQLInfo, id: strawberry.ID) -> Optional[UserType]:
        return _maybe(UserType, await propagate(info.context.call(user_service.delete_user, id)))

    @strawberry.mutation
    async def add_profile_picture(self, info: GQLInfo, id: strawberry.ID, input: str) -> UserType:
        user = await propagate(info.context.call(user_service.add_profile_picture, id, input))
        return UserType.from_model(user)

    # ── Tags ──────────────────────────────────────────────────────────────

    @strawberry.mutation
    async def create_tag(self, info: GQLInfo, tagname: str) -> TagType:
        tag = await propagate(info.context.call(tag_service.create_tag, tagname))
        return TagType.from_model(tag)

    @strawberry.mutation
    async def delete_tag(self, info: GQLInfo, tag_id: strawberry.ID) -> TagResultType:
        result = await info.context.call(tag_service.delete_tag, tag_id)
        return TagResultType.from_result(result)

    @strawberry.mutation
    async def update_tag(
        self, info: GQLInfo, tag_id: strawberry.ID, tagname: str
    ) -> TagResultType:
        result = await info.context.call(tag_service.update_tag, tag_id, tagname)
        return TagResultType.from_result(result)

    # ── Posts ─────────────────────────────────────────────────────────────

    @strawberry.mutation
    async def create_post(
        self,
        info: GQLInfo,
        title: str,
        description: Optional[str] = None,
        price: Optional[float] = None,
        tags: Optional[List[strawberry.ID]] = None,
    ) -> PostType:
        data = post_create(title, description, price, tags)
        post = await propagate(
            info.context.call(post_service.create_post, info.context.caller, data)
        )
        return PostType.from_model(post)

    @strawberry.mutation
    async def update_post(
        self,
        info: GQLInfo,
        id: strawberry.ID,
        title: Optional[str] = None,
        description: Optional[str] = None,
        price: Optional[float] = None,
        tags: Optional[List[strawberry.ID]] = None,
    ) -> PostType:
        data = post_update(title, description, price, tags)
        post = await propagate(
            info.context.call(post_service.update_post, info.context.caller, id, data)
        )
        return PostType.from_model(post)

    @strawberry.mutation
    async def delete_post(self, info: GQLInfo, id: strawberry.ID) -> PostType:
        post = await propagate(
            info.context.call(post_service.delete_post, info.context.caller, id)
        )
        return PostType.from_model(post)

    # ── Comments ──────────────────────────────────────────────────────────

    @strawberry.mutation
    async def create_comment(
        self, info: GQLInfo, comment_text: str, post_id: strawberry.ID
    ) -> Optional[CommentType]:
        comment = await null_on_storage_error(
            "Mutation.createComment",
            info.context.call(
                comment_service.create_comment, info.context.caller, post_id, comment_text
            ),
        )
        return _maybe(CommentType, comment)

    @strawberry.mutation
    async def delete_comment(self, info: GQLInfo, id: strawberry.ID) -> Optional[CommentType]:
        comment = await null_on_storage_error(
            "Mutation.deleteComment",
            info.context.call(comment_service.delete_comment, info.context.caller, id),
        )
        return _maybe(CommentType, comment)

    @strawberry.mutation
    async def update_comment(
        self, info: GQLInfo, id: strawberry.ID, comment_text: str
    ) -> Optional[CommentType]:
        comment = await null_on_storage_error(
            "Mutation.updateComment",
            info.context.call(
                comment_service.update_comment, info.context.caller, id, comment_text
            ),
        )
        return _maybe(CommentType, comment)


# ══════════════════════════════════════════════════════════════════════════
# Schema & Router
# ══════════════════════════════════════════════════════════════════════════

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    config=StrawberryConfig(scalar_map={Date: DateScalar}),
    extensions=[
        lambda: MaskErrors(
            should_mask_error=should_mask_error, error_message=MASKED_ERROR_MESSAGE
        ),
    ],
)


def create_graphql_router() -> GraphQLRouter:
    """The /graphql endpoint; GET serves GraphiQL when enabled."""
    return GraphQLRouter(
        schema,
        path=settings.graphql_path,
        context_getter=get_context,
        graphql_ide="graphiql" if settings.graphql_ide else None,
    )
