"""
Notes API: Application Package Initializer
==========================================

What: Marks the `notes_api` directory as a Python package.
Who:  Used by uvicorn, Alembic, pytest and the `notes-api` console script.

Architecture Note:
    The backend is a strict layered stack, leaves first:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP Layer)          │  ← routing, parsing, id/timestamp assignment,
    │                                     │    error → status translation
    ├─────────────────────────────────────┤
    │       Services (Domain Logic)       │  ← validation, delegation
    ├─────────────────────────────────────┤
    │     Repositories (Persistence)      │  ← SQL statements, NotFound vs Storage
    ├─────────────────────────────────────┤
    │   Database (Async SQLAlchemy pool)  │  ← engine + session factory
    └─────────────────────────────────────┘

    Errors travel upward untouched until the HTTP layer, which is the only
    place that turns them into status codes and response bodies.
"""

__version__ = "1.0.0"
