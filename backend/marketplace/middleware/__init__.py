"""
Marketplace Backend — Middleware Package
=========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route / GraphQL

    - Request ID runs first so every log line of the request can carry it
    - Logging captures status and duration on the way back out
"""
