"""
Marketplace Backend — Error Policies
=====================================

What:  How a resolver reports a failed service call.
How:   Every resolver passes its service call through exactly one policy:

    propagate             storage error → GraphQL error (message masked)
    null_on_storage_error storage error → logged, field resolves to null

    In both, client errors (UnauthenticatedError, NotFoundError,
    ForbiddenError, ValidationError) propagate with their message and code.
    Tag delete/update need no policy: their service returns a TagResult.

`should_mask_error` is given to Strawberry's MaskErrors extension so that
storage and unexpected errors reach the client as a generic message only.
"""

import logging
from typing import Awaitable, Optional, TypeVar

from graphql import GraphQLError

from marketplace.exceptions import MarketplaceError
from marketplace.services.result import Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

MASKED_ERROR_MESSAGE = "An internal error occurred. Please try again later."


async def propagate(awaitable: Awaitable[T]) -> T:
    return (await Result.capture(awaitable)).unwrap()


async def null_on_storage_error(operation: str, awaitable: Awaitable[T]) -> Optional[T]:
    result = await Result.capture(awaitable)
    if not result.ok:
        logger.error(
            "%s failed with a storage error; resolving to null | Context: %s",
            operation,
            result.error.context,
        )
    return result.value_or_none()


def should_mask_error(error: GraphQLError) -> bool:
    original = error.original_error
    if original is None or isinstance(original, GraphQLError):
        # Syntax and validation errors produced by graphql-core itself
        return False
    if isinstance(original, MarketplaceError):
        return not original.expose
    return True
