"""
GraphQL API Package
===================
Strawberry GraphQL implementation of the marketplace query/mutation API.
"""

from marketplace.graphql.schema import create_graphql_router, schema

__all__ = ["schema", "create_graphql_router"]
