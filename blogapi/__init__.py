"""
Blog API — Application Package Initializer
===========================================

What: Marks the `blogapi` directory as a Python package.
Who:  Used by uvicorn, pytest, and the `blogapi` console script.

Architecture Note:
    The service is a thin CRUD layer with the same layering top to bottom:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Validation + Storage)   │  ← Business rules, error mapping
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Validation is pure and runs before any storage call, so a rejected
    request never touches the database.
"""

__version__ = "1.0.0"
