"""
Bird Sightings Backend - API Routes Package
============================================

Route Inventory:
    - birds.py:      GET/POST /api/v1/birds, GET /api/v1/birds/query,
                     GET/PUT/DELETE /api/v1/birds/{id}
    - sightings.py:  GET/POST /api/v1/sightings, GET /api/v1/sightings/query,
                     GET/DELETE /api/v1/sightings/{id}
    - health.py:     GET /health

Routes are thin: they parse request data, call a service, and set the status
code. Business rules live in the services.
"""
