"""Search input with debounced place suggestions and keyboard navigation."""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Set, Union

from weather_dashboard.config import DEBOUNCE_SECONDS, BLUR_GRACE_SECONDS
from weather_dashboard.weather.models import GeocodeSuggestion, WeatherQuery

logger = logging.getLogger(__name__)

Geocoder = Callable[[str], Awaitable[List[GeocodeSuggestion]]]
SearchHandler = Callable[[WeatherQuery], Awaitable[None]]


class SearchState(str, Enum):
    IDLE = "idle"
    TYPING = "typing"
    SUGGESTIONS_VISIBLE = "suggestions-visible"
    SELECTED = "selected"
    SUBMITTED = "submitted"


class Key(str, Enum):
    DOWN = "ArrowDown"
    UP = "ArrowUp"
    ENTER = "Enter"


class SearchInput:
    """State machine behind the city search box.

    Text changes schedule a geocode lookup after ``debounce_seconds`` of
    inactivity; a new change cancels the pending one. Every issued lookup
    gets a sequence number and only the newest response is applied, so a
    slow answer for an old prefix never overwrites a newer list.

    Args:
        geocoder: Coroutine returning suggestions for a piece of text
        on_search: Coroutine called with the query built on submit
        debounce_seconds: Quiet period before a lookup is issued
        blur_grace_seconds: Delay before the dropdown closes on blur
    """

    def __init__(
        self,
        geocoder: Geocoder,
        on_search: Optional[SearchHandler] = None,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        blur_grace_seconds: float = BLUR_GRACE_SECONDS
    ):
        self.geocoder = geocoder
        self.on_search = on_search
        self.debounce_seconds = debounce_seconds
        self.blur_grace_seconds = blur_grace_seconds

        self.text = ""
        self.suggestions: List[GeocodeSuggestion] = []
        self.show_suggestions = False
        self.highlight = -1
        self.selected: Optional[GeocodeSuggestion] = None
        self.disabled = False
        self.state = SearchState.IDLE

        self._sequence = 0
        self._pending_lookup: Optional[asyncio.Task] = None
        self._pending_close: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def dropdown_visible(self) -> bool:
        return self.show_suggestions and bool(self.suggestions)

    @property
    def can_submit(self) -> bool:
        return not self.disabled and bool(self.text.strip())

    def change(self, text: str) -> None:
        """Handle a text edit and reschedule the suggestion lookup.

        The active selection survives only if the new text still equals its
        label.
        """
        self.text = text
        self.show_suggestions = True
        self.highlight = -1
        if self.selected is not None and text != self.selected.label:
            self.selected = None
        self.state = SearchState.TYPING

        self._cancel_pending_lookup()
        self._pending_lookup = asyncio.create_task(self._debounced_lookup(text))

    def set_text(self, text: str, selection: Optional[GeocodeSuggestion] = None) -> None:
        """Replace the text without triggering a lookup."""
        self.text = text
        self.selected = selection
        self.highlight = -1
        self.show_suggestions = False
        self.suggestions = []
        self._invalidate_lookups()
        self.state = SearchState.SELECTED if selection is not None else SearchState.IDLE

    async def _debounced_lookup(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        self._sequence += 1
        task = asyncio.create_task(self._lookup(text, self._sequence))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _lookup(self, text: str, sequence: int) -> None:
        results: List[GeocodeSuggestion] = []
        if text.strip():
            try:
                results = list(await self.geocoder(text))
            except Exception as e:
                # Suggestions are best effort; failures just empty the list
                logger.warning(f"Suggestion lookup failed for '{text}': {e}")

        if sequence != self._sequence:
            logger.debug(f"Discarding stale suggestions for '{text}'")
            return
        self._apply_suggestions(results)

    def _apply_suggestions(self, results: List[GeocodeSuggestion]) -> None:
        self.suggestions = results
        self.highlight = -1
        if self.state not in (SearchState.TYPING, SearchState.SUGGESTIONS_VISIBLE):
            return
        if self.dropdown_visible:
            self.state = SearchState.SUGGESTIONS_VISIBLE
        else:
            self.state = SearchState.TYPING

    def press_key(self, key: Union[Key, str]) -> bool:
        """Move the highlight or commit the highlighted suggestion.

        Returns:
            True if the key was consumed by the dropdown. An unconsumed
            Enter is the caller's cue to submit.
        """
        try:
            key = Key(key)
        except ValueError:
            return False
        if not self.dropdown_visible:
            return False

        count = len(self.suggestions)
        if key is Key.DOWN:
            self.highlight = (self.highlight + 1) % count
            return True
        if key is Key.UP:
            self.highlight = count - 1 if self.highlight < 0 else (self.highlight - 1) % count
            return True
        if key is Key.ENTER and self.highlight >= 0:
            self.select(self.suggestions[self.highlight])
            return True
        return False

    def select(self, suggestion: GeocodeSuggestion) -> None:
        """Commit a suggestion, by mouse or keyboard."""
        self.text = suggestion.label
        self.selected = suggestion
        self.show_suggestions = False
        self.suggestions = []
        self.highlight = -1
        self._invalidate_lookups()
        self.state = SearchState.SELECTED
        logger.debug(f"Selected '{suggestion.label}' at ({suggestion.lat}, {suggestion.lon})")

    async def submit(self) -> Optional[WeatherQuery]:
        """Issue the weather query for the current input.

        A selection searches by its coordinates, anything else by the
        trimmed text. Blank text or a busy form submits nothing.

        Returns:
            The query that was issued, or None when blocked
        """
        if not self.can_submit:
            return None

        if self.selected is not None:
            query = WeatherQuery(city=self.selected.name, lat=self.selected.lat, lon=self.selected.lon)
        else:
            query = WeatherQuery(city=self.text.strip())

        self.show_suggestions = False
        self._invalidate_lookups()
        self.state = SearchState.SUBMITTED
        try:
            if self.on_search is not None:
                await self.on_search(query)
        finally:
            self.state = SearchState.IDLE
        return query

    def focus(self) -> None:
        self._cancel(self._pending_close)
        self._pending_close = None
        self.show_suggestions = True
        if self.dropdown_visible and self.state in (SearchState.IDLE, SearchState.TYPING):
            self.state = SearchState.SUGGESTIONS_VISIBLE

    def blur(self) -> None:
        """Close the dropdown after the grace delay.

        The delay lets a click on a suggestion land before the list goes away.
        """
        self._cancel(self._pending_close)
        self._pending_close = asyncio.create_task(self._close_after_grace())

    async def _close_after_grace(self) -> None:
        await asyncio.sleep(self.blur_grace_seconds)
        self.show_suggestions = False
        self.suggestions = []
        self.highlight = -1
        self._invalidate_lookups()
        if self.state in (SearchState.TYPING, SearchState.SUGGESTIONS_VISIBLE):
            self.state = SearchState.IDLE

    async def wait_for_lookups(self) -> None:
        """Wait until no lookup is scheduled or in flight."""
        if self._pending_lookup is not None:
            await asyncio.gather(self._pending_lookup, return_exceptions=True)
        if self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    def _invalidate_lookups(self) -> None:
        self._cancel_pending_lookup()
        self._sequence += 1

    def _cancel_pending_lookup(self) -> None:
        self._cancel(self._pending_lookup)
        self._pending_lookup = None

    @staticmethod
    def _cancel(task: Optional[asyncio.Task]) -> None:
        if task is not None and not task.done():
            task.cancel()

    async def aclose(self) -> None:
        """Cancel timers and in-flight lookups."""
        tasks = [t for t in (self._pending_lookup, self._pending_close, *self._in_flight) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._pending_lookup = None
        self._pending_close = None
        self._in_flight.clear()
