"""
Bird Sightings Backend - Bird Service
======================================

What:  Business operations on birds: create, read, list, update, delete, query.
Why:   Keeps HTTP concerns in the routes and SQL in the repositories; this
       layer turns store results into DTOs and store absences into
       NotFoundError.
Who:   Called by the /api/v1/birds route handlers.

Error Handling Strategy:
    - Missing ids become NotFoundError (→ 404)
    - Deleting a bird that still has sightings raises BirdInUseError (→ 409);
      deletes never cascade
    - Unexpected SQLAlchemy errors are wrapped in DatabaseError (→ 500) with
      the original error type kept in the context for the logs
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from birdapi.exceptions import BirdInUseError, DatabaseError, NotFoundError
from birdapi.repositories import (
    BirdRepository,
    SightingRepository,
    bird_repository,
    sighting_repository,
)
from birdapi.schemas.bird import BirdCreate, BirdDto, BirdUpdate
from birdapi.services.projection import bird_to_dto
from birdapi.services.query_engine import QueryEngine, query_engine

logger = logging.getLogger(__name__)


class BirdService:
    """
    Stateless service; every call receives the request's session.

    Dependencies are injectable so tests can substitute mocked stores.
    """

    def __init__(
        self,
        birds: BirdRepository = bird_repository,
        sightings: SightingRepository = sighting_repository,
        engine: QueryEngine = query_engine,
    ):
        self.birds = birds
        self.sightings = sightings
        self.engine = engine

    async def create_bird(self, db: AsyncSession, data: BirdCreate) -> BirdDto:
        try:
            bird = await self.birds.insert(
                db,
                name=data.name,
                color=data.color,
                weight=data.weight,
                height=data.height,
            )
        except SQLAlchemyError as e:
            raise self._database_error("create the bird", e)
        logger.info("Bird created: %s (%s)", bird.id, bird.name)
        return bird_to_dto(bird)

    async def get_bird(self, db: AsyncSession, bird_id: int) -> BirdDto:
        """
        Raises:
            NotFoundError: No bird has this id (→ 404)
        """
        try:
            bird = await self.birds.get_by_id(db, bird_id)
        except SQLAlchemyError as e:
            raise self._database_error("retrieve the bird", e, bird_id=bird_id)
        if bird is None:
            raise NotFoundError(resource="bird", resource_id=bird_id)
        return bird_to_dto(bird)

    async def list_birds(self, db: AsyncSession) -> List[BirdDto]:
        try:
            birds = await self.birds.get_all(db)
        except SQLAlchemyError as e:
            raise self._database_error("retrieve birds", e)
        return [bird_to_dto(b) for b in birds]

    async def update_bird(self, db: AsyncSession, bird_id: int, data: BirdUpdate) -> BirdDto:
        """
        Replace name, color, weight and height of an existing bird.

        Raises:
            NotFoundError: No bird has this id (→ 404)
        """
        try:
            bird = await self.birds.update(
                db,
                bird_id,
                name=data.name,
                color=data.color,
                weight=data.weight,
                height=data.height,
            )
        except SQLAlchemyError as e:
            raise self._database_error("update the bird", e, bird_id=bird_id)
        if bird is None:
            raise NotFoundError(resource="bird", resource_id=bird_id)
        logger.info("Bird %s updated", bird_id)
        return bird_to_dto(bird)

    async def delete_bird(self, db: AsyncSession, bird_id: int) -> None:
        """
        Delete a bird that no sighting references.

        Raises:
            NotFoundError: No bird has this id (→ 404)
            BirdInUseError: Sightings still reference the bird (→ 409)
        """
        try:
            bird = await self.birds.get_by_id(db, bird_id)
            if bird is None:
                raise NotFoundError(resource="bird", resource_id=bird_id)
            referencing = await self.sightings.count_by_bird(db, bird_id)
            if referencing:
                raise BirdInUseError(bird_id=bird_id, sighting_count=referencing)
            await self.birds.delete(db, bird_id)
        except SQLAlchemyError as e:
            raise self._database_error("delete the bird", e, bird_id=bird_id)
        logger.info("Bird %s deleted", bird_id)

    async def query_birds(
        self,
        db: AsyncSession,
        name: Optional[str] = None,
        color: Optional[str] = None,
    ) -> List[BirdDto]:
        try:
            birds = await self.engine.find_birds(db, name=name, color=color)
        except SQLAlchemyError as e:
            raise self._database_error("query birds", e)
        return [bird_to_dto(b) for b in birds]

    @staticmethod
    def _database_error(action: str, error: Exception, **context) -> DatabaseError:
        logger.error("Database error trying to %s: %s", action, str(error), exc_info=True)
        context["error_type"] = type(error).__name__
        return DatabaseError(
            message=f"Could not {action}. Please try again.",
            context=context,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
bird_service = BirdService()
