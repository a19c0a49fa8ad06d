"""
Bird Sightings UI - Presenter
==============================

What:  Turns user actions into client calls and client results into view
       updates.
How:   Form text is parsed on the UI thread; a parse failure is shown right
       away and nothing is sent. The client call then runs on a
       fire-and-forget background thread, and its result (or error message)
       is handed back to the UI thread through `view.run_on_ui`.

The presenter never touches widgets directly, so it runs without a display.
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional, TypeVar

import pydantic

from birdapi.client.bird_api_client import BirdApiClient
from birdapi.exceptions import BirdApiError, ValidationError
from birdapi.schemas.bird import BirdCreate, BirdDto
from birdapi.schemas.sighting import SightingCreate, SightingDto

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BirdView(ABC):
    """What the presenter needs from a window."""

    @abstractmethod
    def run_on_ui(self, callback: Callable[[], None]) -> None:
        """Schedule `callback` on the UI thread; may be called from any thread."""

    @abstractmethod
    def show_birds(self, birds: List[BirdDto]) -> None: ...

    @abstractmethod
    def show_sightings(self, sightings: List[SightingDto]) -> None: ...

    @abstractmethod
    def clear_bird_form(self) -> None: ...

    @abstractmethod
    def clear_sighting_form(self) -> None: ...

    @abstractmethod
    def show_error(self, message: str) -> None: ...


def run_in_background(task: Callable[[], None]) -> None:
    threading.Thread(target=task, daemon=True).start()


def parse_float(text: str, field: str) -> float:
    try:
        return float(text.strip())
    except ValueError:
        raise ValidationError(message=f"{field} must be a number, got '{text}'", field=field)


def parse_int(text: str, field: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise ValidationError(message=f"{field} must be a whole number, got '{text}'", field=field)


def _first_error(error: pydantic.ValidationError) -> str:
    err = error.errors()[0]
    field = ".".join(str(part) for part in err["loc"])
    return f"{field}: {err['msg']}"


class BirdPresenter:
    """
    Args:
        client: Talks to the service
        view: The window being driven
        dispatch: Runs a task off the UI thread (a new daemon thread by default;
                  tests pass a synchronous runner)
    """

    def __init__(
        self,
        client: BirdApiClient,
        view: BirdView,
        dispatch: Callable[[Callable[[], None]], None] = run_in_background,
    ):
        self.client = client
        self.view = view
        self.dispatch = dispatch
        self.selected_bird_id: Optional[int] = None

    # ── Tables ────────────────────────────────────────────────────────────

    def refresh_birds(self) -> None:
        self._submit("refreshing bird table", self.client.get_all_birds, self.view.show_birds)

    def select_bird(self, bird_id: Optional[int]) -> None:
        """Show the sightings of the selected bird; no selection empties the table."""
        self.selected_bird_id = bird_id
        if bird_id is None:
            self.view.show_sightings([])
            return
        self._submit(
            "refreshing sightings table",
            lambda: self.client.query_sightings(bird_id=bird_id),
            self.view.show_sightings,
        )

    def search_birds(self, name: str, color: str) -> None:
        name = name.strip() or None
        color = color.strip() or None
        self._submit(
            "searching birds",
            lambda: self.client.query_birds(name=name, color=color),
            self.view.show_birds,
        )

    # ── Forms ─────────────────────────────────────────────────────────────

    def add_bird(self, name: str, color: str, weight_text: str, height_text: str) -> None:
        try:
            bird = BirdCreate(
                name=name,
                color=color,
                weight=parse_float(weight_text, "Weight"),
                height=parse_float(height_text, "Height"),
            )
        except ValidationError as e:
            self.view.show_error(e.message)
            return
        except pydantic.ValidationError as e:
            self.view.show_error(_first_error(e))
            return

        def on_added(_: BirdDto) -> None:
            self.view.clear_bird_form()
            self.refresh_birds()

        self._submit("adding bird", lambda: self.client.add_bird(bird), on_added)

    def add_sighting(self, bird_id_text: str, location: str) -> None:
        """Record a sighting stamped with the current local time."""
        try:
            bird_id = parse_int(bird_id_text, "Bird ID")
            sighting = SightingCreate(bird_id=bird_id, location=location, date_time=datetime.now())
        except ValidationError as e:
            self.view.show_error(e.message)
            return
        except pydantic.ValidationError as e:
            self.view.show_error(_first_error(e))
            return

        def on_added(_: SightingDto) -> None:
            self.view.clear_sighting_form()
            self.select_bird(bird_id)

        self._submit("adding sighting", lambda: self.client.add_sighting(sighting), on_added)

    # ── Deletes ───────────────────────────────────────────────────────────

    def delete_bird(self, bird_id: int) -> None:
        def on_deleted(_: None) -> None:
            if self.selected_bird_id == bird_id:
                self.select_bird(None)
            self.refresh_birds()

        self._submit("deleting bird", lambda: self.client.delete_bird(bird_id), on_deleted)

    def delete_sighting(self, sighting_id: int) -> None:
        def on_deleted(_: None) -> None:
            if self.selected_bird_id is not None:
                self.select_bird(self.selected_bird_id)

        self._submit(
            "deleting sighting",
            lambda: self.client.delete_sighting(sighting_id),
            on_deleted,
        )

    # ── Dispatch ──────────────────────────────────────────────────────────

    def _submit(
        self,
        description: str,
        work: Callable[[], T],
        on_success: Callable[[T], None],
    ) -> None:
        def task() -> None:
            try:
                result = work()
            except BirdApiError as e:
                message = f"Error {description}: {e.message}"
                logger.warning(message)
                self.view.run_on_ui(lambda: self.view.show_error(message))
                return
            self.view.run_on_ui(lambda: on_success(result))

        self.dispatch(task)
