"""
Marketplace Backend — REST Routes
==================================

Route Inventory:
    - health.py:  GET /health   (service health check)

The GraphQL endpoint is mounted separately (marketplace.graphql.schema).
"""
