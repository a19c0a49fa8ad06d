"""Typed HTTP client for the Bird Sightings API."""

from birdapi.client.bird_api_client import BirdApiClient

__all__ = ["BirdApiClient"]
