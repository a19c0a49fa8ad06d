"""
Bird Sightings Backend - Application Package Initializer
=========================================================

What: Marks the `birdapi` directory as a Python package.
Why:  Enables module imports like `from birdapi.config import settings`.
Who:  Used by uvicorn (`uvicorn birdapi.main:app`), pytest, the client wrapper
      and the desktop UI.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Query Engine, DTOs)     │  ← Filter precedence, projection
    ├─────────────────────────────────────┤
    │   Repositories (Store operations)   │  ← Lookups, inserts, filtered scans
    ├─────────────────────────────────────┤
    │   Models & Schemas (Data)           │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (Persistence)            │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The `client` and `ui` subpackages sit on the other side of the HTTP
    boundary: the UI talks to the service only through `BirdApiClient`.
"""

__version__ = "1.0.0"
