"""
Bird Sightings Backend - Bird Route Handlers
=============================================

What:  CRUD and query endpoints for birds under /api/v1/birds.
How:   Extracts path/query/body values, delegates to BirdService, returns JSON.
       Failures are raised as application exceptions and formatted by the
       global handlers in main.py.

Route order matters: /birds/query is registered before /birds/{bird_id},
otherwise "query" would be captured (and rejected) as an id.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from birdapi.database import get_db_session
from birdapi.schemas.bird import BirdCreate, BirdDto, BirdUpdate
from birdapi.schemas.common import ErrorResponse
from birdapi.services.bird_service import bird_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Birds"])

_NOT_FOUND = {404: {"description": "Bird not found", "model": ErrorResponse}}


@router.get("/birds", response_model=List[BirdDto], summary="List all birds")
async def get_all_birds(db: AsyncSession = Depends(get_db_session)) -> List[BirdDto]:
    return await bird_service.list_birds(db)


@router.get(
    "/birds/query",
    response_model=List[BirdDto],
    summary="Query birds by name and color",
    description=(
        "Exact-match filter. With both name and color, birds must match both; "
        "with name only, all birds of that name are returned; otherwise every "
        "bird is returned (color alone does not filter)."
    ),
)
async def query_birds(
    name: str | None = Query(default=None, description="Exact bird name"),
    color: str | None = Query(default=None, description="Exact color (only used together with name)"),
    db: AsyncSession = Depends(get_db_session),
) -> List[BirdDto]:
    return await bird_service.query_birds(db, name=name, color=color)


@router.get(
    "/birds/{bird_id}",
    response_model=BirdDto,
    responses=_NOT_FOUND,
    summary="Get a single bird by ID",
)
async def get_bird(bird_id: int, db: AsyncSession = Depends(get_db_session)) -> BirdDto:
    return await bird_service.get_bird(db, bird_id)


@router.post(
    "/birds",
    status_code=201,
    response_model=BirdDto,
    responses={400: {"description": "Invalid bird data", "model": ErrorResponse}},
    summary="Create a bird",
)
async def create_bird(payload: BirdCreate, db: AsyncSession = Depends(get_db_session)) -> BirdDto:
    return await bird_service.create_bird(db, payload)


@router.put(
    "/birds/{bird_id}",
    response_model=BirdDto,
    responses=_NOT_FOUND,
    summary="Replace a bird's data",
)
async def update_bird(
    bird_id: int,
    payload: BirdUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> BirdDto:
    return await bird_service.update_bird(db, bird_id, payload)


@router.delete(
    "/birds/{bird_id}",
    status_code=204,
    responses={
        **_NOT_FOUND,
        409: {"description": "Bird still has sightings", "model": ErrorResponse},
    },
    summary="Delete a bird without sightings",
)
async def delete_bird(bird_id: int, db: AsyncSession = Depends(get_db_session)) -> Response:
    await bird_service.delete_bird(db, bird_id)
    return Response(status_code=204)
