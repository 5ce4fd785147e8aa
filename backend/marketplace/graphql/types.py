"""
Marketplace Backend — GraphQL Object and Input Types
=====================================================

What:  The User, Post, Tag, Comment and TagResult object types, the input
       types, and the relationship field resolvers.
How:   Object types are plain snapshots built from ORM rows by `from_model`
       (column attributes only, so no lazy loading happens at conversion).
       Relationship fields are resolved lazily, once per field per instance,
       through the request's relation loaders.
       Root fields that already eager-loaded a relation pass `preloaded=True`;
       the loaded records are then served without another round trip.
"""

from typing import Any, List, Optional

import strawberry
from sqlalchemy import inspect
from strawberry.types import Info

from marketplace.graphql.context import GraphQLContext
from marketplace.graphql.policies import null_on_storage_error, propagate
from marketplace.graphql.scalars import Date
from marketplace.models.comment import Comment
from marketplace.models.post import Post
from marketplace.models.tag import Tag
from marketplace.models.user import User
from marketplace.schemas.post import PostCreate, PostUpdate
from marketplace.schemas.tag import TagResult
from marketplace.schemas.user import UserCreate, UserUpdate

GQLInfo = Info[GraphQLContext, None]


def _id(value) -> Optional[strawberry.ID]:
    return strawberry.ID(str(value)) if value is not None else None


def _loaded(record, relation: str) -> Any:
    """The value of an eagerly loaded relation; None when it was never loaded."""
    if relation in inspect(record).unloaded:
        return None
    return getattr(record, relation)


# ══════════════════════════════════════════════════════════════════════════
# Object Types
# ══════════════════════════════════════════════════════════════════════════

@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    username: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    profile_picture: Optional[str] = None
    created_at: Optional[Date] = None
    loaded_posts: strawberry.Private[Optional[List[Post]]] = None
    loaded_comments: strawberry.Private[Optional[List[Comment]]] = None

    @classmethod
    def from_model(cls, user: User, preloaded: bool = False) -> "UserType":
        return cls(
            id=_id(user.id),
            username=user.username,
            email=user.email,
            name=user.name,
            phone=user.phone,
            profile_picture=user.profile_picture,
            created_at=user.created_at,
            loaded_posts=_loaded(user, "posts") if preloaded else None,
            loaded_comments=_loaded(user, "comments") if preloaded else None,
        )

    @strawberry.field(description="Posts owned by this user")
    async def posts(self, info: GQLInfo) -> List["PostType"]:
        posts = self.loaded_posts
        if posts is None:
            posts = await propagate(info.context.loaders.posts_by_owner.load(self.id))
        return [PostType.from_model(post) for post in posts]

    @strawberry.field(description="Comments written by this user")
    async def comments(self, info: GQLInfo) -> List["CommentType"]:
        comments = self.loaded_comments
        if comments is None:
            comments = await propagate(info.context.loaders.comments_by_author.load(self.id))
        return [CommentType.from_model(comment) for comment in comments]


@strawberry.type(name="Post")
class PostType:
    id: strawberry.ID
    title: str
    description: Optional[str] = None
    price: Optional[float] = None
    created_at: Optional[Date] = None
    owner_id: strawberry.Private[Optional[str]] = None
    loaded_user: strawberry.Private[Optional[User]] = None

    @classmethod
    def from_model(cls, post: Post, preloaded: bool = False) -> "PostType":
        return cls(
            id=_id(post.id),
            title=post.title,
            description=post.description,
            price=post.price,
            created_at=post.created_at,
            owner_id=_id(post.user_id),
            loaded_user=_loaded(post, "user") if preloaded else None,
        )

    @strawberry.field(description="The user who owns this post")
    async def user(self, info: GQLInfo) -> Optional[UserType]:
        if self.owner_id is None:
            return None
        user = self.loaded_user
        if user is None:
            user = await propagate(info.context.loaders.user_by_id.load(self.owner_id))
        return UserType.from_model(user) if user is not None else None

    @strawberry.field(description="Comments attached to this post")
    async def comments(self, info: GQLInfo) -> List["CommentType"]:
        comments = await propagate(info.context.loaders.comments_by_post.load(self.id))
        return [CommentType.from_model(comment) for comment in comments]

    @strawberry.field(description="Tags attached to this post")
    async def tags(self, info: GQLInfo) -> List["TagType"]:
        tags = await propagate(info.context.loaders.tags_by_post.load(self.id))
        return [TagType.from_model(tag) for tag in tags]


@strawberry.type(name="Tag")
class TagType:
    id: strawberry.ID
    tagname: str

    @classmethod
    def from_model(cls, tag: Tag) -> "TagType":
        return cls(id=_id(tag.id), tagname=tag.tagname)

    @strawberry.field(description="Posts carrying this tag")
    async def posts(self, info: GQLInfo) -> List[PostType]:
        posts = await propagate(info.context.loaders.posts_by_tag.load(self.id))
        return [PostType.from_model(post) for post in posts]


@strawberry.type(name="Comment")
class CommentType:
    id: strawberry.ID
    comment_text: str
    created_at: Optional[Date] = None
    author_id: strawberry.Private[Optional[str]] = None
    post_id: strawberry.Private[Optional[str]] = None

    @classmethod
    def from_model(cls, comment: Comment) -> "CommentType":
        return cls(
            id=_id(comment.id),
            comment_text=comment.comment_text,
            created_at=comment.created_at,
            author_id=_id(comment.author_id),
            post_id=_id(comment.post_id),
        )

    @strawberry.field(description="The user who wrote this comment")
    async def comment_author(self, info: GQLInfo) -> Optional[UserType]:
        if self.author_id is None:
            return None
        user = await null_on_storage_error(
            "Comment.commentAuthor",
            info.context.loaders.user_by_id.load(self.author_id),
        )
        return UserType.from_model(user) if user is not None else None

    @strawberry.field(description="The post this comment belongs to")
    async def post(self, info: GQLInfo) -> Optional[PostType]:
        if self.post_id is None:
            return None
        post = await propagate(info.context.loaders.post_by_id.load(self.post_id))
        return PostType.from_model(post) if post is not None else None


@strawberry.type(name="TagResult")
class TagResultType:
    success: bool
    message: str
    tag: Optional[TagType] = None

    @classmethod
    def from_result(cls, result: TagResult) -> "TagResultType":
        return cls(
            success=result.success,
            message=result.message,
            tag=TagType.from_model(result.tag) if result.tag is not None else None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Input Types
# ══════════════════════════════════════════════════════════════════════════

@strawberry.input(name="UserInput")
class UserInput:
    username: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    profile_picture: Optional[str] = None

    def to_schema(self) -> UserCreate:
        return UserCreate(
            username=self.username,
            email=self.email,
            name=self.name,
            phone=self.phone,
            profile_picture=self.profile_picture,
        )


@strawberry.input(name="UserUpdateInput")
class UserUpdateInput:
    username: Optional[str] = strawberry.UNSET
    email: Optional[str] = strawberry.UNSET
    name: Optional[str] = strawberry.UNSET
    phone: Optional[str] = strawberry.UNSET
    profile_picture: Optional[str] = strawberry.UNSET

    def to_schema(self) -> UserUpdate:
        # Only fields present in the request count as set
        sent = {
            field: value
            for field, value in vars(self).items()
            if value is not strawberry.UNSET
        }
        return UserUpdate(**sent)


def post_create(
    title: str,
    description: Optional[str],
    price: Optional[float],
    tags: Optional[List[strawberry.ID]],
) -> PostCreate:
    return PostCreate(
        title=title,
        description=description,
        price=price,
        tags=[str(t) for t in tags or []],
    )


def post_update(
    title: Optional[str],
    description: Optional[str],
    price: Optional[float],
    tags: Optional[List[strawberry.ID]],
) -> PostUpdate:
    return PostUpdate(
        title=title,
        description=description,
        price=price,
        tags=[str(t) for t in tags] if tags is not None else None,
    )
