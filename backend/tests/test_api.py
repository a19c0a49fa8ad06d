"""
Bird Sightings Backend - HTTP Endpoint Tests
=============================================

What:  The /api/v1 surface end to end: status codes, JSON shapes, error
       bodies and query precedence, driven through ASGITransport.
"""

import pytest

API = "/api/v1"

SPARROW = {"name": "Sparrow", "color": "Grey", "weight": 0.05, "height": 15.0}


async def add_bird(client, **overrides):
    body = {**SPARROW, **overrides}
    response = await client.post(f"{API}/birds", json=body)
    assert response.status_code == 201
    return response.json()


async def add_sighting(client, bird_id, location, date_time):
    response = await client.post(
        f"{API}/sightings",
        json={"bird_id": bird_id, "location": location, "date_time": date_time},
    )
    assert response.status_code == 201
    return response.json()


class TestBirdEndpoints:

    @pytest.mark.asyncio
    async def test_bird_lifecycle(self, test_client):
        created = await add_bird(test_client)
        bird_id = created["id"]
        assert created == {"id": bird_id, **SPARROW}

        listing = await test_client.get(f"{API}/birds")
        assert [b["id"] for b in listing.json()] == [bird_id]

        updated = await test_client.put(f"{API}/birds/{bird_id}", json={**SPARROW, "color": "White"})
        assert updated.status_code == 200
        assert updated.json()["color"] == "White"

        fetched = await test_client.get(f"{API}/birds/{bird_id}")
        assert fetched.json()["color"] == "White"

        deleted = await test_client.delete(f"{API}/birds/{bird_id}")
        assert deleted.status_code == 204
        assert deleted.content == b""

        gone = await test_client.get(f"{API}/birds/{bird_id}")
        assert gone.status_code == 404
        assert gone.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_delete_missing_bird_is_404(self, test_client):
        response = await test_client.delete(f"{API}/birds/999")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_missing_bird_is_404(self, test_client):
        response = await test_client.put(f"{API}/birds/999", json=SPARROW)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_bird_with_sightings_is_409(self, test_client):
        bird = await add_bird(test_client)
        await add_sighting(test_client, bird["id"], "Backyard", "2024-05-01T10:00:00")

        response = await test_client.delete(f"{API}/birds/{bird['id']}")

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "bird_in_use"
        assert body["details"]["sighting_count"] == 1
        assert (await test_client.get(f"{API}/birds/{bird['id']}")).status_code == 200

    @pytest.mark.asyncio
    async def test_invalid_body_is_400(self, test_client):
        response = await test_client.post(f"{API}/birds", json={**SPARROW, "weight": "heavy"})

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["name", "color"])
    async def test_empty_text_field_is_400(self, test_client, field):
        response = await test_client.post(f"{API}/birds", json={**SPARROW, field: ""})

        assert response.status_code == 400
        assert (await test_client.get(f"{API}/birds")).json() == []

    @pytest.mark.asyncio
    async def test_non_positive_weight_is_400(self, test_client):
        response = await test_client.post(f"{API}/birds", json={**SPARROW, "weight": 0})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_numeric_id_is_400(self, test_client):
        response = await test_client.get(f"{API}/birds/abc")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_query_precedence(self, test_client):
        await add_bird(test_client, name="Robin", color="Red")
        await add_bird(test_client, name="Robin", color="Brown")
        await add_bird(test_client, name="Eagle", color="Brown")

        both = await test_client.get(f"{API}/birds/query", params={"name": "Robin", "color": "Red"})
        name_only = await test_client.get(f"{API}/birds/query", params={"name": "Robin"})
        color_only = await test_client.get(f"{API}/birds/query", params={"color": "Brown"})

        assert [(b["name"], b["color"]) for b in both.json()] == [("Robin", "Red")]
        assert len(name_only.json()) == 2
        assert len(color_only.json()) == 3

    @pytest.mark.asyncio
    async def test_response_carries_request_id(self, test_client):
        response = await test_client.get(f"{API}/birds", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"


class TestSightingEndpoints:

    @pytest.mark.asyncio
    async def test_create_nests_bird(self, test_client):
        bird = await add_bird(test_client, name="Eagle", color="Brown")

        sighting = await add_sighting(test_client, bird["id"], "Grand Canyon", "2024-05-01T10:00:00")

        assert sighting["bird"] == bird
        assert sighting["date_time"] == "2024-05-01T10:00:00"
        fetched = await test_client.get(f"{API}/sightings/{sighting['id']}")
        assert fetched.json() == sighting

    @pytest.mark.asyncio
    async def test_create_with_offset_date_time_is_400_and_stores_nothing(self, test_client):
        bird = await add_bird(test_client)

        response = await test_client.post(
            f"{API}/sightings",
            json={
                "bird_id": bird["id"],
                "location": "Backyard",
                "date_time": "2024-05-01T10:00:00+05:00",
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert "date_time" in response.json()["message"]
        assert (await test_client.get(f"{API}/sightings")).json() == []

    @pytest.mark.asyncio
    async def test_create_with_empty_location_is_400(self, test_client):
        bird = await add_bird(test_client)

        response = await test_client.post(
            f"{API}/sightings", json={"bird_id": bird["id"], "location": ""}
        )

        assert response.status_code == 400
        assert (await test_client.get(f"{API}/sightings")).json() == []

    @pytest.mark.asyncio
    async def test_create_for_unknown_bird_is_422_and_stores_nothing(self, test_client):
        response = await test_client.post(
            f"{API}/sightings", json={"bird_id": 999, "location": "Nowhere"}
        )

        assert response.status_code == 422
        assert response.json()["error"] == "reference_resolution_error"
        assert (await test_client.get(f"{API}/sightings")).json() == []

    @pytest.mark.asyncio
    async def test_delete_sighting(self, test_client):
        bird = await add_bird(test_client)
        sighting = await add_sighting(test_client, bird["id"], "Backyard", "2024-05-01T10:00:00")

        deleted = await test_client.delete(f"{API}/sightings/{sighting['id']}")
        again = await test_client.delete(f"{API}/sightings/{sighting['id']}")

        assert deleted.status_code == 204
        assert again.status_code == 404
        assert (await test_client.get(f"{API}/birds/{bird['id']}")).status_code == 200

    @pytest.mark.asyncio
    async def test_query_by_bird_location_and_interval(self, test_client):
        eagle = await add_bird(test_client, name="Eagle", color="Brown")
        robin = await add_bird(test_client, name="Robin", color="Red")
        await add_sighting(test_client, eagle["id"], "Grand Canyon", "2024-05-01T10:00:00")
        await add_sighting(test_client, eagle["id"], "Grand Canyon", "2024-05-10T10:00:00")
        await add_sighting(test_client, eagle["id"], "Rocky Mountains", "2024-05-02T10:00:00")
        await add_sighting(test_client, robin["id"], "Grand Canyon", "2024-05-01T10:00:00")

        response = await test_client.get(
            f"{API}/sightings/query",
            params={
                "birdId": eagle["id"],
                "location": "Grand Canyon",
                "startDate": "2024-05-01T10:00:00",
                "endDate": "2024-05-05T00:00:00",
            },
        )

        assert response.status_code == 200
        results = response.json()
        assert len(results) == 1
        assert results[0]["date_time"] == "2024-05-01T10:00:00"
        assert results[0]["bird"]["name"] == "Eagle"

    @pytest.mark.asyncio
    async def test_query_unknown_bird_falls_back_to_location(self, test_client):
        eagle = await add_bird(test_client, name="Eagle", color="Brown")
        await add_sighting(test_client, eagle["id"], "Grand Canyon", "2024-05-01T10:00:00")
        await add_sighting(test_client, eagle["id"], "Backyard", "2024-05-01T10:00:00")

        response = await test_client.get(
            f"{API}/sightings/query", params={"birdId": 999, "location": "Backyard"}
        )

        assert [s["location"] for s in response.json()] == ["Backyard"]

    @pytest.mark.asyncio
    async def test_query_without_matches_is_empty(self, test_client):
        response = await test_client.get(f"{API}/sightings/query", params={"location": "Mars"})

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["yesterday", "2024-13-01T00:00:00", "2024-05-01T10:00:00+02:00"])
    async def test_malformed_start_date_is_400(self, test_client, value):
        response = await test_client.get(f"{API}/sightings/query", params={"startDate": value})

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "startDate"


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
