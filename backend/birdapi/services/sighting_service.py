"""
Bird Sightings Backend - Sighting Service
==========================================

What:  Business operations on sightings: create, read, list, delete, query.
Who:   Called by the /api/v1/sightings route handlers.

Creation Flow:
    1. Resolve bird_id through the bird store
    2. Unknown id → ReferenceResolutionError, nothing is inserted
    3. Insert the sighting with the resolved bird and project it

Sightings are immutable: there is no update operation.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from birdapi.exceptions import DatabaseError, NotFoundError, ReferenceResolutionError
from birdapi.repositories import (
    BirdRepository,
    SightingRepository,
    bird_repository,
    sighting_repository,
)
from birdapi.schemas.sighting import SightingCreate, SightingDto
from birdapi.services.projection import sighting_to_dto
from birdapi.services.query_engine import QueryEngine, query_engine

logger = logging.getLogger(__name__)


class SightingService:

    def __init__(
        self,
        birds: BirdRepository = bird_repository,
        sightings: SightingRepository = sighting_repository,
        engine: QueryEngine = query_engine,
    ):
        self.birds = birds
        self.sightings = sightings
        self.engine = engine

    async def create_sighting(self, db: AsyncSession, data: SightingCreate) -> SightingDto:
        """
        Record a sighting of an existing bird.

        A missing date_time is stamped with the current local time.

        Raises:
            ReferenceResolutionError: bird_id does not exist (→ 422)
        """
        try:
            bird = await self.birds.get_by_id(db, data.bird_id)
            if bird is None:
                logger.warning("Sighting rejected: bird %s does not exist", data.bird_id)
                raise ReferenceResolutionError(bird_id=data.bird_id)
            sighting = await self.sightings.insert(
                db,
                bird=bird,
                location=data.location,
                date_time=data.date_time or datetime.now(),
            )
        except SQLAlchemyError as e:
            raise self._database_error("create the sighting", e, bird_id=data.bird_id)
        logger.info("Sighting %s created for bird %s at %s", sighting.id, bird.id, sighting.location)
        return sighting_to_dto(sighting)

    async def get_sighting(self, db: AsyncSession, sighting_id: int) -> SightingDto:
        try:
            sighting = await self.sightings.get_by_id(db, sighting_id)
        except SQLAlchemyError as e:
            raise self._database_error("retrieve the sighting", e, sighting_id=sighting_id)
        if sighting is None:
            raise NotFoundError(resource="sighting", resource_id=sighting_id)
        return sighting_to_dto(sighting)

    async def list_sightings(self, db: AsyncSession) -> List[SightingDto]:
        try:
            sightings = await self.sightings.get_all(db)
        except SQLAlchemyError as e:
            raise self._database_error("retrieve sightings", e)
        return [sighting_to_dto(s) for s in sightings]

    async def delete_sighting(self, db: AsyncSession, sighting_id: int) -> None:
        """Delete one sighting; the referenced bird is never affected."""
        try:
            deleted = await self.sightings.delete(db, sighting_id)
        except SQLAlchemyError as e:
            raise self._database_error("delete the sighting", e, sighting_id=sighting_id)
        if not deleted:
            raise NotFoundError(resource="sighting", resource_id=sighting_id)
        logger.info("Sighting %s deleted", sighting_id)

    async def query_sightings(
        self,
        db: AsyncSession,
        location: Optional[str] = None,
        bird_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[SightingDto]:
        try:
            sightings = await self.engine.find_sightings(
                db, location=location, bird_id=bird_id, start=start, end=end
            )
        except SQLAlchemyError as e:
            raise self._database_error("query sightings", e)
        return [sighting_to_dto(s) for s in sightings]

    @staticmethod
    def _database_error(action: str, error: Exception, **context) -> DatabaseError:
        logger.error("Database error trying to %s: %s", action, str(error), exc_info=True)
        context["error_type"] = type(error).__name__
        return DatabaseError(
            message=f"Could not {action}. Please try again.",
            context=context,
        )


sighting_service = SightingService()
