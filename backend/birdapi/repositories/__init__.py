"""
Bird Sightings Backend - Store Layer
=====================================

What:  Repositories wrapping every SQL statement the application issues.
Why:   The query engine and services speak in store operations
       (insert, get_by_id, get_all, update, delete, filtered scans) and never
       build SQL themselves, so they can be unit-tested with mocked stores.

Repositories are stateless; each call receives the request's AsyncSession.
They flush but never commit: the session dependency owns the transaction.
"""

from birdapi.repositories.bird_repository import BirdRepository, bird_repository
from birdapi.repositories.sighting_repository import SightingRepository, sighting_repository

__all__ = [
    "BirdRepository",
    "SightingRepository",
    "bird_repository",
    "sighting_repository",
]
