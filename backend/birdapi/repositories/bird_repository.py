"""Store operations for the `birds` table."""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from birdapi.models.bird import Bird

logger = logging.getLogger(__name__)


class BirdRepository:

    async def insert(
        self,
        db: AsyncSession,
        name: str,
        color: str,
        weight: float,
        height: float,
    ) -> Bird:
        """Persist a new bird; the flush assigns its id."""
        bird = Bird(name=name, color=color, weight=weight, height=height)
        db.add(bird)
        await db.flush()
        logger.debug("Inserted bird %s (%s)", bird.id, bird.name)
        return bird

    async def get_by_id(self, db: AsyncSession, bird_id: int) -> Optional[Bird]:
        return await db.get(Bird, bird_id)

    async def get_all(self, db: AsyncSession) -> List[Bird]:
        result = await db.execute(select(Bird).order_by(Bird.id))
        return list(result.scalars().all())

    async def update(
        self,
        db: AsyncSession,
        bird_id: int,
        name: str,
        color: str,
        weight: float,
        height: float,
    ) -> Optional[Bird]:
        """
        Overwrite all data fields of an existing bird.

        Returns:
            The updated bird, or None when no bird has this id.
        """
        bird = await db.get(Bird, bird_id)
        if bird is None:
            return None
        bird.name = name
        bird.color = color
        bird.weight = weight
        bird.height = height
        await db.flush()
        return bird

    async def delete(self, db: AsyncSession, bird_id: int) -> bool:
        """Returns False when there was nothing to delete."""
        bird = await db.get(Bird, bird_id)
        if bird is None:
            return False
        await db.delete(bird)
        await db.flush()
        logger.debug("Deleted bird %s", bird_id)
        return True

    # ── Filtered scans ────────────────────────────────────────────────────
    # Exact string equality: no LIKE, no case folding.

    async def find_by_name(self, db: AsyncSession, name: str) -> List[Bird]:
        result = await db.execute(
            select(Bird).where(Bird.name == name).order_by(Bird.id)
        )
        return list(result.scalars().all())

    async def find_by_name_and_color(
        self, db: AsyncSession, name: str, color: str
    ) -> List[Bird]:
        result = await db.execute(
            select(Bird)
            .where(Bird.name == name, Bird.color == color)
            .order_by(Bird.id)
        )
        return list(result.scalars().all())


bird_repository = BirdRepository()
