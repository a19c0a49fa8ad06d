"""ORM models. Importing this package registers every table on Base.metadata."""

from birdapi.models.bird import Bird
from birdapi.models.sighting import Sighting

__all__ = ["Bird", "Sighting"]
