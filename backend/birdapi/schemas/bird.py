"""
Bird Sightings Backend - Bird Schemas
======================================

What:  Pydantic models for bird request bodies and the bird transfer object.
Why:   The API contract is kept separate from the ORM model; the client
       wrapper (de)serializes exactly these classes.
"""

from pydantic import BaseModel, Field


class BirdBase(BaseModel):
    """Fields shared by the create/update bodies and the transfer object."""
    name: str = Field(min_length=1, description="Bird name, matched exactly by queries")
    color: str = Field(min_length=1, description="Plumage color, matched exactly by queries")
    weight: float = Field(gt=0, description="Weight in kilograms")
    height: float = Field(gt=0, description="Height in centimetres")


class BirdCreate(BirdBase):
    """Body of POST /api/v1/birds."""
    pass


class BirdUpdate(BirdBase):
    """
    Body of PUT /api/v1/birds/{id}.

    A full replacement: all four fields are required and overwrite the stored
    values. The id in the path is never changed.
    """
    pass


class BirdDto(BirdBase):
    """
    What:  Transfer representation of a persisted bird.
    Who:   Returned by every bird endpoint and nested inside SightingDto.
    """
    id: int = Field(description="Identity assigned on creation")

    model_config = {"from_attributes": True}
