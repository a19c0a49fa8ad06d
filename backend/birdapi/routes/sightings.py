"""
Bird Sightings Backend - Sighting Route Handlers
=================================================

What:  Create, read, delete and query endpoints under /api/v1/sightings.

Timestamp Parameters:
    startDate/endDate are ISO 8601 local date-times such as
    "2024-05-01T10:00:00". They are parsed here, before the query engine
    runs; a malformed value answers 400 validation_error.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from birdapi.database import get_db_session
from birdapi.exceptions import ValidationError
from birdapi.schemas.common import ErrorResponse
from birdapi.schemas.sighting import SightingCreate, SightingDto
from birdapi.services.sighting_service import sighting_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Sightings"])


def parse_timestamp(value: Optional[str], field: str) -> Optional[datetime]:
    """
    Parse an optional ISO 8601 local date-time query parameter.

    Raises:
        ValidationError: The value is not a date-time or carries an offset
    """
    if value is None:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(
            message=f"'{value}' is not a valid date-time (expected e.g. 2024-05-01T10:00:00)",
            field=field,
        )
    if parsed.tzinfo is not None:
        raise ValidationError(
            message=f"'{value}' must be a local date-time without a timezone offset",
            field=field,
        )
    return parsed


@router.get("/sightings", response_model=List[SightingDto], summary="List all sightings")
async def get_all_sightings(db: AsyncSession = Depends(get_db_session)) -> List[SightingDto]:
    return await sighting_service.list_sightings(db)


@router.get(
    "/sightings/query",
    response_model=List[SightingDto],
    responses={400: {"description": "Malformed date-time", "model": ErrorResponse}},
    summary="Query sightings by bird, location and time interval",
    description=(
        "If birdId names an existing bird and location, startDate and endDate are all "
        "given, sightings must match all of them (interval bounds inclusive). Otherwise an "
        "existing bird alone filters by bird, then location alone filters by location, "
        "else every sighting is returned. An unknown birdId is ignored."
    ),
)
async def query_sightings(
    location: str | None = Query(default=None, description="Exact location"),
    bird_id: int | None = Query(default=None, alias="birdId", description="Bird id"),
    start_date: str | None = Query(default=None, alias="startDate", description="Interval start (ISO 8601)"),
    end_date: str | None = Query(default=None, alias="endDate", description="Interval end (ISO 8601)"),
    db: AsyncSession = Depends(get_db_session),
) -> List[SightingDto]:
    start = parse_timestamp(start_date, "startDate")
    end = parse_timestamp(end_date, "endDate")
    return await sighting_service.query_sightings(
        db, location=location, bird_id=bird_id, start=start, end=end
    )


@router.get(
    "/sightings/{sighting_id}",
    response_model=SightingDto,
    responses={404: {"description": "Sighting not found", "model": ErrorResponse}},
    summary="Get a single sighting by ID",
)
async def get_sighting(sighting_id: int, db: AsyncSession = Depends(get_db_session)) -> SightingDto:
    return await sighting_service.get_sighting(db, sighting_id)


@router.post(
    "/sightings",
    status_code=201,
    response_model=SightingDto,
    responses={422: {"description": "Referenced bird does not exist", "model": ErrorResponse}},
    summary="Record a sighting of an existing bird",
)
async def create_sighting(
    payload: SightingCreate,
    db: AsyncSession = Depends(get_db_session),
) -> SightingDto:
    return await sighting_service.create_sighting(db, payload)


@router.delete(
    "/sightings/{sighting_id}",
    status_code=204,
    responses={404: {"description": "Sighting not found", "model": ErrorResponse}},
    summary="Delete a sighting",
)
async def delete_sighting(sighting_id: int, db: AsyncSession = Depends(get_db_session)) -> Response:
    await sighting_service.delete_sighting(db, sighting_id)
    return Response(status_code=204)
