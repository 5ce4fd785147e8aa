"""
Marketplace Backend — Application Package Initializer
======================================================

What: Marks the `marketplace` directory as a Python package.
Who:  Imported by uvicorn (`uvicorn marketplace.main:app`), pytest, and every
      internal module (`from marketplace.config import settings`).

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │     GraphQL boundary (API layer)    │  ← schema, resolvers, error policies
    ├─────────────────────────────────────┤
    │         Services (storage calls)    │  ← one service per entity
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Resolvers never touch the session directly; they call a service and
    decide how that service's failure is reported to the client.
"""

__version__ = "1.0.0"
