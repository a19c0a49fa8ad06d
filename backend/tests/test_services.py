"""
Bird Sightings Backend - Service Unit Tests
============================================

What we test:
    ✅ Missing ids raise NotFoundError
    ✅ Deleting a bird with sightings raises BirdInUseError and keeps the bird
    ✅ A sighting for an unknown bird raises ReferenceResolutionError, stores nothing
    ✅ A sighting without date_time is stamped with the current time
    ✅ SQLAlchemy failures are wrapped in DatabaseError
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from birdapi.exceptions import (
    BirdInUseError,
    DatabaseError,
    NotFoundError,
    ReferenceResolutionError,
)
from birdapi.repositories import bird_repository, sighting_repository
from birdapi.schemas.bird import BirdCreate, BirdUpdate
from birdapi.schemas.sighting import SightingCreate
from birdapi.services.bird_service import BirdService
from birdapi.services.sighting_service import SightingService

EAGLE = BirdCreate(name="Eagle", color="Brown", weight=5.5, height=75.0)


class TestBirdService:

    def setup_method(self):
        self.service = BirdService()

    @pytest.mark.asyncio
    async def test_create_then_get(self, db_session):
        created = await self.service.create_bird(db_session, EAGLE)

        fetched = await self.service.get_bird(db_session, created.id)

        assert fetched == created
        assert fetched.name == "Eagle"

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_bird(db_session, 999)

        assert exc_info.value.resource == "bird"
        assert exc_info.value.resource_id == 999

    @pytest.mark.asyncio
    async def test_update_replaces_fields_and_keeps_id(self, db_session):
        created = await self.service.create_bird(db_session, EAGLE)

        updated = await self.service.update_bird(
            db_session, created.id, BirdUpdate(name="Eagle", color="White", weight=6.0, height=80.0)
        )

        assert updated.id == created.id
        assert updated.color == "White"

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_bird(db_session, 999, BirdUpdate(**EAGLE.model_dump()))

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.delete_bird(db_session, 999)

    @pytest.mark.asyncio
    async def test_delete_bird_with_sightings_is_rejected(self, db_session):
        bird = await bird_repository.insert(db_session, "Eagle", "Brown", 5.5, 75.0)
        await sighting_repository.insert(db_session, bird, "Grand Canyon", datetime(2024, 5, 1))

        with pytest.raises(BirdInUseError) as exc_info:
            await self.service.delete_bird(db_session, bird.id)

        assert exc_info.value.sighting_count == 1
        assert await bird_repository.get_by_id(db_session, bird.id) is not None

    @pytest.mark.asyncio
    async def test_list_after_delete(self, db_session):
        first = await self.service.create_bird(db_session, EAGLE)
        second = await self.service.create_bird(
            db_session, BirdCreate(name="Robin", color="Red", weight=0.1, height=20.0)
        )

        await self.service.delete_bird(db_session, first.id)

        assert [b.id for b in await self.service.list_birds(db_session)] == [second.id]

    @pytest.mark.asyncio
    async def test_store_failure_becomes_database_error(self, mock_db_session):
        birds = MagicMock()
        birds.get_all = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("disk I/O error")))
        service = BirdService(birds=birds)

        with pytest.raises(DatabaseError) as exc_info:
            await service.list_birds(mock_db_session)

        assert exc_info.value.context["error_type"] == "OperationalError"
        assert "disk" not in exc_info.value.message


class TestSightingService:

    def setup_method(self):
        self.service = SightingService()

    @pytest.mark.asyncio
    async def test_create_resolves_and_nests_the_bird(self, db_session):
        bird = await bird_repository.insert(db_session, "Eagle", "Brown", 5.5, 75.0)
        seen = datetime(2024, 5, 1, 9, 30)

        created = await self.service.create_sighting(
            db_session, SightingCreate(bird_id=bird.id, location="Grand Canyon", date_time=seen)
        )

        assert created.bird.id == bird.id
        assert created.bird.name == "Eagle"
        assert created.date_time == seen

    @pytest.mark.asyncio
    async def test_create_without_date_time_uses_now(self, db_session):
        bird = await bird_repository.insert(db_session, "Robin", "Red", 0.1, 20.0)
        before = datetime.now()

        created = await self.service.create_sighting(
            db_session, SightingCreate(bird_id=bird.id, location="Central Park")
        )

        assert before <= created.date_time <= datetime.now()

    @pytest.mark.asyncio
    async def test_create_for_unknown_bird_stores_nothing(self, db_session):
        with pytest.raises(ReferenceResolutionError) as exc_info:
            await self.service.create_sighting(
                db_session, SightingCreate(bird_id=999, location="Nowhere")
            )

        assert exc_info.value.bird_id == 999
        assert await sighting_repository.get_all(db_session) == []

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_sighting(db_session, 42)

        assert exc_info.value.resource == "sighting"

    @pytest.mark.asyncio
    async def test_delete_keeps_the_bird(self, db_session):
        bird = await bird_repository.insert(db_session, "Sparrow", "Grey", 0.05, 15.0)
        sighting = await sighting_repository.insert(db_session, bird, "Backyard", datetime(2024, 1, 1))

        await self.service.delete_sighting(db_session, sighting.id)

        assert await self.service.list_sightings(db_session) == []
        assert await bird_repository.get_by_id(db_session, bird.id) is not None
        with pytest.raises(NotFoundError):
            await self.service.delete_sighting(db_session, sighting.id)

    @pytest.mark.asyncio
    async def test_query_projects_results(self, db_session):
        bird = await bird_repository.insert(db_session, "Sparrow", "Grey", 0.05, 15.0)
        await sighting_repository.insert(db_session, bird, "Backyard", datetime(2024, 1, 1))
        await sighting_repository.insert(db_session, bird, "City Park", datetime(2024, 1, 2))

        result = await self.service.query_sightings(db_session, location="City Park")

        assert [(s.location, s.bird.name) for s in result] == [("City Park", "Sparrow")]
