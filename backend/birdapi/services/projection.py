"""
Bird Sightings Backend - Projection Layer
==========================================

What:  Converts persisted entities into transfer objects.
How:   A bird is copied field for field. A sighting is copied and its bird
       is projected recursively into a nested BirdDto.

Projection is pure: it never touches a session. The sighting's bird must
already have been joined in by the repository; the relationship is declared
lazy="raise_on_sql", so a missing join fails loudly instead of querying.

A None entity projects to None.
"""

from typing import Optional

from birdapi.models.bird import Bird
from birdapi.models.sighting import Sighting
from birdapi.schemas.bird import BirdDto
from birdapi.schemas.sighting import SightingDto


def bird_to_dto(bird: Optional[Bird]) -> Optional[BirdDto]:
    if bird is None:
        return None
    return BirdDto(
        id=bird.id,
        name=bird.name,
        color=bird.color,
        weight=bird.weight,
        height=bird.height,
    )


def sighting_to_dto(sighting: Optional[Sighting]) -> Optional[SightingDto]:
    if sighting is None:
        return None
    return SightingDto(
        id=sighting.id,
        location=sighting.location,
        date_time=sighting.date_time,
        bird=bird_to_dto(sighting.bird),
    )
