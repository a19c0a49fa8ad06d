"""
Bird Sightings Backend - Sighting Schemas
==========================================

What:  Pydantic models for the sighting request body and transfer object.

Denormalization:
    SightingDto embeds the complete BirdDto instead of just its id, so
    tables can show the bird's name without a second request.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from birdapi.schemas.bird import BirdDto


class SightingCreate(BaseModel):
    """
    Body of POST /api/v1/sightings.

    The bird is referenced by id and resolved when the sighting is created;
    an unknown id is rejected and nothing is stored.
    """
    bird_id: int = Field(description="Id of an existing bird")
    location: str = Field(min_length=1, description="Where the bird was seen")
    date_time: Optional[datetime] = Field(
        default=None,
        description="Local date-time of the sighting (defaults to now)",
    )

    @field_validator("date_time")
    @classmethod
    def reject_offset(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Stored timestamps are naive, so an offset would be silently dropped."""
        if v is not None and v.tzinfo is not None:
            raise ValueError("must be a local date-time without a timezone offset")
        return v


class SightingDto(BaseModel):
    """Transfer representation of a persisted sighting with its bird nested."""
    id: int = Field(description="Identity assigned on creation")
    location: str = Field(description="Where the bird was seen")
    date_time: datetime = Field(description="Local date-time (ISO 8601, no offset)")
    bird: Optional[BirdDto] = Field(default=None, description="The sighted bird")

    model_config = {"from_attributes": True}
