"""
Bird Sightings Backend - Query Engine
======================================

What:  Turns a set of optional filter criteria into one store lookup.
Why:   The filter precedence is the one piece of branching logic in the
       system; keeping it here lets it be tested against a mocked store.

Bird query precedence:
    name and color  → find_by_name_and_color
    name only       → find_by_name
    anything else   → get_all   (color on its own is not a filter path)

Sighting query precedence (first matching branch wins):
    1. bird_id given → resolve it; an unknown id counts as "no bird_id"
    2. bird + location + start + end → find_by_bird_and_location_between
    3. bird                          → find_by_bird   (other filters ignored)
    4. location                      → find_by_location
    5. otherwise                     → get_all

Matching is exact; zero matches is an empty list, never an error.
Timestamps arrive already parsed: malformed text is rejected at the boundary.
Store errors propagate unchanged.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from birdapi.models.bird import Bird
from birdapi.models.sighting import Sighting
from birdapi.repositories import (
    BirdRepository,
    SightingRepository,
    bird_repository,
    sighting_repository,
)

logger = logging.getLogger(__name__)


class QueryEngine:

    def __init__(
        self,
        birds: BirdRepository = bird_repository,
        sightings: SightingRepository = sighting_repository,
    ):
        self.birds = birds
        self.sightings = sightings

    async def find_birds(
        self,
        db: AsyncSession,
        name: Optional[str] = None,
        color: Optional[str] = None,
    ) -> List[Bird]:
        if name is not None and color is not None:
            return await self.birds.find_by_name_and_color(db, name, color)
        if name is not None:
            return await self.birds.find_by_name(db, name)
        return await self.birds.get_all(db)

    async def find_sightings(
        self,
        db: AsyncSession,
        location: Optional[str] = None,
        bird_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Sighting]:
        bird: Optional[Bird] = None
        if bird_id is not None:
            bird = await self.birds.get_by_id(db, bird_id)
            if bird is None:
                logger.debug("Sighting query: bird %s not found, ignoring filter", bird_id)

        if bird is not None and location is not None and start is not None and end is not None:
            return await self.sightings.find_by_bird_and_location_between(
                db, bird, location, start, end
            )
        if bird is not None:
            return await self.sightings.find_by_bird(db, bird)
        if location is not None:
            return await self.sightings.find_by_location(db, location)
        return await self.sightings.get_all(db)


query_engine = QueryEngine()
