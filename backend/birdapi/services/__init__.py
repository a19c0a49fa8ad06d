"""
Bird Sightings Backend - Services Layer
========================================

What:  Business logic between routes (HTTP) and repositories (persistence).

Service Inventory:
    - QueryEngine:      Optional filter criteria → one store lookup
    - projection:       Entities → transfer objects (Sighting embeds its Bird)
    - BirdService:      Bird CRUD + query, NotFound / BirdInUse outcomes
    - SightingService:  Sighting create/read/delete + query, reference checks
    - seed_service:     Example data for an empty store

Services are stateless singletons that receive the session per call, so they
can be unit-tested with mocked repositories and no HTTP.
"""
