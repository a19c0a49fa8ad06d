"""
Bird Sightings Client - HTTP Wrapper
=====================================

What:  Calls the /api/v1 endpoints and (de)serializes the transfer objects.
Who:   Used by the desktop UI; usable from scripts and tests.
How:   Synchronous httpx.Client (the UI calls it from worker threads).
       Idempotent GETs are retried on transport errors with tenacity
       (exponential backoff with jitter); writes are sent exactly once.

Outcome mapping (by status code, never by parsing message text):
    expected 2xx → the deserialized DTO (or None for deletes)
    404          → NotFoundError
    400          → ValidationError
    409          → BirdInUseError
    422          → ReferenceResolutionError
    other / network failure → TransportFailureError

Filter parameters are only put on the query string when they are non-empty.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

import httpx
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from birdapi.config import settings
from birdapi.exceptions import (
    BirdInUseError,
    NotFoundError,
    ReferenceResolutionError,
    TransportFailureError,
    ValidationError,
)
from birdapi.schemas.bird import BirdCreate, BirdDto, BirdUpdate
from birdapi.schemas.sighting import SightingCreate, SightingDto

logger = logging.getLogger(__name__)

Timestamp = Union[datetime, str]


class BirdApiClient:
    """
    Client for one Bird Sightings service instance.

    Args:
        base_url: Service address including the /api/v1 prefix
                  (defaults to settings.api_base_url)
        timeout: Seconds per request (defaults to settings.client_timeout)
        retry_attempts: Attempts for GET requests on transport errors
        http_client: Pre-built httpx.Client, e.g. FastAPI's TestClient
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.retry_attempts = retry_attempts or settings.client_retry_attempts
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(
            timeout=timeout or settings.client_timeout,
            headers={"Accept": "application/json"},
        )

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "BirdApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ── Bird endpoints ────────────────────────────────────────────────────

    def add_bird(self, bird: BirdCreate) -> BirdDto:
        response = self._send("POST", "/birds", json=bird.model_dump(mode="json"))
        self._check(response, 201, "add bird")
        return BirdDto.model_validate(response.json())

    def get_all_birds(self) -> List[BirdDto]:
        response = self._get("/birds")
        self._check(response, 200, "fetch birds")
        return [BirdDto.model_validate(item) for item in response.json()]

    def get_bird(self, bird_id: int) -> BirdDto:
        response = self._get(f"/birds/{bird_id}")
        self._check(response, 200, "fetch bird", resource="bird", resource_id=bird_id)
        return BirdDto.model_validate(response.json())

    def update_bird(self, bird_id: int, bird: BirdUpdate) -> BirdDto:
        response = self._send("PUT", f"/birds/{bird_id}", json=bird.model_dump(mode="json"))
        self._check(response, 200, "update bird", resource="bird", resource_id=bird_id)
        return BirdDto.model_validate(response.json())

    def delete_bird(self, bird_id: int) -> None:
        response = self._send("DELETE", f"/birds/{bird_id}")
        self._check(response, 204, "delete bird", resource="bird", resource_id=bird_id)

    def query_birds(self, name: Optional[str] = None, color: Optional[str] = None) -> List[BirdDto]:
        params = _present({"name": name, "color": color})
        response = self._get("/birds/query", params=params)
        self._check(response, 200, "query birds")
        return [BirdDto.model_validate(item) for item in response.json()]

    # ── Sighting endpoints ────────────────────────────────────────────────

    def add_sighting(self, sighting: SightingCreate) -> SightingDto:
        body = sighting.model_dump(mode="json", exclude_none=True)
        response = self._send("POST", "/sightings", json=body)
        self._check(response, 201, "add sighting")
        return SightingDto.model_validate(response.json())

    def get_all_sightings(self) -> List[SightingDto]:
        response = self._get("/sightings")
        self._check(response, 200, "fetch sightings")
        return [SightingDto.model_validate(item) for item in response.json()]

    def get_sighting(self, sighting_id: int) -> SightingDto:
        response = self._get(f"/sightings/{sighting_id}")
        self._check(response, 200, "fetch sighting", resource="sighting", resource_id=sighting_id)
        return SightingDto.model_validate(response.json())

    def delete_sighting(self, sighting_id: int) -> None:
        response = self._send("DELETE", f"/sightings/{sighting_id}")
        self._check(response, 204, "delete sighting", resource="sighting", resource_id=sighting_id)

    def query_sightings(
        self,
        location: Optional[str] = None,
        bird_id: Optional[int] = None,
        start_date: Optional[Timestamp] = None,
        end_date: Optional[Timestamp] = None,
    ) -> List[SightingDto]:
        """
        Query sightings; see GET /api/v1/sightings/query for the precedence.

        Timestamps may be datetimes or ISO 8601 strings.
        """
        params = _present({
            "location": location,
            "birdId": bird_id,
            "startDate": _isoformat(start_date),
            "endDate": _isoformat(end_date),
        })
        response = self._get("/sightings/query", params=params)
        self._check(response, 200, "query sightings")
        return [SightingDto.model_validate(item) for item in response.json()]

    # ── Transport ─────────────────────────────────────────────────────────

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        retrying = Retrying(
            stop=stop_after_attempt(self.retry_attempts),
            wait=wait_exponential_jitter(initial=0.2, max=2),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            return retrying(self._http.get, self._url(path), params=params)
        except httpx.TransportError as e:
            raise self._transport_error("GET", path, e)

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self._http.request(method, self._url(path), **kwargs)
        except httpx.TransportError as e:
            raise self._transport_error(method, path, e)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _transport_error(self, method: str, path: str, error: Exception) -> TransportFailureError:
        logger.error("%s %s failed: %s", method, self._url(path), error)
        return TransportFailureError(
            message=f"Could not reach the bird service at {self.base_url}: {error}",
            context={"method": method, "path": path, "error_type": type(error).__name__},
        )

    @staticmethod
    def _check(
        response: httpx.Response,
        expected: int,
        action: str,
        resource: str = "resource",
        resource_id: Optional[int] = None,
    ) -> None:
        status = response.status_code
        if status == expected:
            return

        body = _error_body(response)
        message = body.get("message") or response.text or response.reason_phrase
        details = body.get("details") or {}

        if status == 404:
            raise NotFoundError(resource=resource, resource_id=resource_id)
        if status == 400:
            raise ValidationError(message=message, context=details)
        if status == 409:
            raise BirdInUseError(
                bird_id=details.get("bird_id", resource_id),
                sighting_count=details.get("sighting_count", 0),
            )
        if status == 422:
            raise ReferenceResolutionError(
                bird_id=details.get("bird_id"), message=message, context=details
            )
        raise TransportFailureError(
            message=f"Failed to {action}: HTTP {status} {message}",
            status_code=status,
        )


def _present(params: Dict[str, Any]) -> Dict[str, Any]:
    """Drop None and empty-string values so absent filters stay absent."""
    return {k: v for k, v in params.items() if v is not None and v != ""}


def _isoformat(value: Optional[Timestamp]) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _error_body(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
