"""
Store operations for the `sightings` table.

Every read joins the referenced bird in the same statement (joinedload), which
is the only way `Sighting.bird` gets populated: the relationship is lazy="raise_on_sql".
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from birdapi.models.bird import Bird
from birdapi.models.sighting import Sighting

logger = logging.getLogger(__name__)


def _select_with_bird():
    return select(Sighting).options(joinedload(Sighting.bird))


class SightingRepository:

    async def insert(
        self,
        db: AsyncSession,
        bird: Bird,
        location: str,
        date_time: datetime,
    ) -> Sighting:
        """
        Persist a sighting for an already-resolved bird.

        The caller resolves the bird first; passing the Bird instance (rather
        than a raw id) makes it impossible to insert a dangling reference.
        """
        sighting = Sighting(bird_id=bird.id, bird=bird, location=location, date_time=date_time)
        db.add(sighting)
        await db.flush()
        logger.debug("Inserted sighting %s for bird %s", sighting.id, bird.id)
        return sighting

    async def get_by_id(self, db: AsyncSession, sighting_id: int) -> Optional[Sighting]:
        result = await db.execute(_select_with_bird().where(Sighting.id == sighting_id))
        return result.scalar_one_or_none()

    async def get_all(self, db: AsyncSession) -> List[Sighting]:
        result = await db.execute(_select_with_bird().order_by(Sighting.id))
        return list(result.scalars().all())

    async def delete(self, db: AsyncSession, sighting_id: int) -> bool:
        """Delete one sighting; its bird is left untouched."""
        sighting = await db.get(Sighting, sighting_id)
        if sighting is None:
            return False
        await db.delete(sighting)
        await db.flush()
        logger.debug("Deleted sighting %s", sighting_id)
        return True

    async def count_by_bird(self, db: AsyncSession, bird_id: int) -> int:
        result = await db.execute(
            select(func.count(Sighting.id)).where(Sighting.bird_id == bird_id)
        )
        return result.scalar() or 0

    # ── Filtered scans ────────────────────────────────────────────────────

    async def find_by_bird(self, db: AsyncSession, bird: Bird) -> List[Sighting]:
        result = await db.execute(
            _select_with_bird().where(Sighting.bird_id == bird.id).order_by(Sighting.id)
        )
        return list(result.scalars().all())

    async def find_by_location(self, db: AsyncSession, location: str) -> List[Sighting]:
        result = await db.execute(
            _select_with_bird().where(Sighting.location == location).order_by(Sighting.id)
        )
        return list(result.scalars().all())

    async def find_by_bird_and_location_between(
        self,
        db: AsyncSession,
        bird: Bird,
        location: str,
        start: datetime,
        end: datetime,
    ) -> List[Sighting]:
        """Both interval bounds are inclusive (SQL BETWEEN)."""
        result = await db.execute(
            _select_with_bird()
            .where(
                Sighting.bird_id == bird.id,
                Sighting.location == location,
                Sighting.date_time.between(start, end),
            )
            .order_by(Sighting.id)
        )
        return list(result.scalars().all())


sighting_repository = SightingRepository()
