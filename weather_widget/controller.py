"""
Search controller.

Holds the widget state (idle, loading, displaying, error), the input field
value, and the two persisted lists. All operations run on one event loop;
only submit() suspends.

Overlapping searches: every submit takes a new generation number and a
response is applied only if its generation is still the latest, so a slow
earlier lookup cannot overwrite a newer one.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from .errors import SAVE_FAILED_MESSAGE, USER_MESSAGE, NothingDisplayedError, WeatherError
from .persistent_list import PersistentList, Records
from .schemas import WeatherRecord
from .settings import Settings
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    async def fetch(self, term: str) -> WeatherRecord: ...


class SearchStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    DISPLAYING = "displaying"
    ERROR = "error"


@dataclass(frozen=True)
class SearchState:
    """
    `record` is the displayed record. LOADING and ERROR keep the last one
    displayed (if any) so the page does not go blank while a search runs.
    """
    status: SearchStatus = SearchStatus.IDLE
    record: Optional[WeatherRecord] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class WidgetSnapshot:
    state: SearchState
    search_term: str
    favorites: Records
    history: Records


class SearchController:
    def __init__(self, fetcher: Fetcher, favorites: PersistentList, history: PersistentList):
        self.fetcher = fetcher
        self.favorites = favorites
        self.history = history
        self.state = SearchState()
        self.search_term = ""
        self._generation = 0

    @classmethod
    def from_settings(cls, settings: Settings, fetcher: Fetcher, store: KeyValueStore) -> "SearchController":
        """Build the lists for `settings` and load both from `store`."""
        favorites = PersistentList(store, settings.favorites_key)
        history = PersistentList(store, settings.history_key, max_items=settings.max_history)
        favorites.load()
        history.load()
        return cls(fetcher, favorites, history)

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> WidgetSnapshot:
        return WidgetSnapshot(
            state=self.state,
            search_term=self.search_term,
            favorites=self.favorites.items,
            history=self.history.items,
        )

    def update_term(self, term: str) -> None:
        """Keystroke: only the input field changes."""
        self.search_term = term

    async def submit(self, term: Optional[str] = None) -> SearchState:
        """
        Confirm a search for `term` (or the current input value).

        The term is used as typed; blank input is sent to the provider as-is.
        """
        if term is not None:
            self.search_term = term
        query = self.search_term

        self._generation += 1
        generation = self._generation
        self.state = SearchState(SearchStatus.LOADING, record=self.state.record)

        try:
            record = await self.fetcher.fetch(query)
        except WeatherError as e:
            if generation != self._generation:
                logger.debug("Dropping stale failure for %r (generation %d)", query, generation)
                return self.state
            logger.info("Search for %r failed: %s", query, e)
            return self._fail(USER_MESSAGE)
        except Exception:
            if generation == self._generation:
                logger.error("Search for %r failed unexpectedly", query, exc_info=True)
                self._fail(USER_MESSAGE)
            raise

        if generation != self._generation:
            logger.debug("Dropping stale result for %r (generation %d)", query, generation)
            return self.state

        try:
            self.history.prepend(record)
        except Exception:
            logger.error("Could not save history after searching %r", query, exc_info=True)
            self._fail(SAVE_FAILED_MESSAGE)
            raise

        self.state = SearchState(SearchStatus.DISPLAYING, record=record)
        self.search_term = ""
        return self.state

    def _fail(self, message: str) -> SearchState:
        # keeps whatever record was on screen before the search
        self.state = SearchState(SearchStatus.ERROR, record=self.state.record, message=message)
        return self.state

    def select(self, record: WeatherRecord) -> SearchState:
        """Display a stored record without fetching it again."""
        self.state = SearchState(SearchStatus.DISPLAYING, record=record)
        return self.state

    def select_from_history(self, record: WeatherRecord) -> SearchState:
        return self.select(record)

    def select_from_favorites(self, record: WeatherRecord) -> SearchState:
        return self.select(record)

    def add_to_favorites(self) -> Records:
        record = self.state.record
        if record is None:
            raise NothingDisplayedError("No city is displayed")
        return self.favorites.prepend(record)

    def remove_from_favorites(self, name: str) -> Records:
        return self.favorites.remove_by(name)

    def delete_from_history(self, name: str) -> Records:
        return self.history.remove_by(name)
