"""
Example data inserted on first startup.

Runs only when the birds table is empty, so restarting the server never
duplicates the examples. Timestamps are relative to the moment of seeding.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from birdapi.repositories import bird_repository, sighting_repository

logger = logging.getLogger(__name__)

EXAMPLE_BIRDS = (
    ("Eagle", "Brown", 5.5, 75.0),
    ("Sparrow", "Grey", 0.05, 15.0),
    ("Robin", "Red", 0.1, 20.0),
)

# (bird name, location, age of the sighting)
EXAMPLE_SIGHTINGS = (
    ("Eagle", "Grand Canyon", timedelta(0)),
    ("Eagle", "Rocky Mountains", timedelta(days=5)),
    ("Sparrow", "Backyard", timedelta(hours=2)),
    ("Sparrow", "City Park", timedelta(days=30)),
    ("Robin", "Central Park", timedelta(days=1)),
)


async def seed_example_data(db: AsyncSession, now: Optional[datetime] = None) -> bool:
    """
    Insert the example birds and sightings into an empty store.

    Returns:
        True when data was inserted, False when birds already existed.
    """
    if await bird_repository.get_all(db):
        logger.info("Store already holds birds; skipping example data")
        return False

    now = now or datetime.now()
    birds = {}
    for name, color, weight, height in EXAMPLE_BIRDS:
        birds[name] = await bird_repository.insert(
            db, name=name, color=color, weight=weight, height=height
        )
    for bird_name, location, age in EXAMPLE_SIGHTINGS:
        await sighting_repository.insert(
            db, bird=birds[bird_name], location=location, date_time=now - age
        )

    logger.info(
        "Seeded %d example birds and %d sightings",
        len(EXAMPLE_BIRDS),
        len(EXAMPLE_SIGHTINGS),
    )
    return True
