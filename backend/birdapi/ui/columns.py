"""Column layout and cell text for the bird and sighting tables."""

from typing import Tuple

from birdapi.schemas.bird import BirdDto
from birdapi.schemas.sighting import SightingDto

# (title, width in pixels)
BIRD_COLUMNS: Tuple[Tuple[str, int], ...] = (
    ("ID", 50),
    ("Name", 150),
    ("Color", 100),
    ("Weight", 80),
    ("Height", 80),
)

SIGHTING_COLUMNS: Tuple[Tuple[str, int], ...] = (
    ("ID", 50),
    ("Bird Name", 150),
    ("Location", 150),
    ("Date-Time", 150),
)


def bird_row(bird: BirdDto) -> Tuple[str, ...]:
    return (
        str(bird.id),
        bird.name,
        bird.color,
        str(bird.weight),
        str(bird.height),
    )


def sighting_row(sighting: SightingDto) -> Tuple[str, ...]:
    """The bird column falls back to "N/A" when the sighting has no bird attached."""
    return (
        str(sighting.id),
        sighting.bird.name if sighting.bird is not None else "N/A",
        sighting.location,
        sighting.date_time.isoformat(sep="T", timespec="seconds") if sighting.date_time else "",
    )
