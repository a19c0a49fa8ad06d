"""
Bird Sightings Backend - Middleware Package
============================================

Middleware Chain:
    Request → [Request ID] → [Request Logging] → Route Handler

    1. Request ID: reuse the caller's X-Request-ID or mint one, so every log
       line and error body of a request carries the same correlation id
    2. Request Logging: one access line per request with status and duration
"""
