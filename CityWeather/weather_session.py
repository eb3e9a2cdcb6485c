"""Observable weather state for a presentation layer to render."""
import logging
from typing import Callable, List, Optional
from favorites_store import DuplicateError, FavoritesStore
from weather_data import WeatherRecord
from weather_provider import WeatherProviderError
from weather_service import WeatherClient

DEFAULT_CITY = "New York"

Listener = Callable[["WeatherSession"], None]


class WeatherSession:
    """
    Holds the selected city, the last weather shown and the last error.

    A UI either polls the attributes or subscribes to be told after every
    change. Errors never propagate out of refresh(); they land in
    error_message, and the previously shown weather is kept.
    """

    def __init__(
        self,
        client: Optional[WeatherClient],
        favorites: FavoritesStore,
        city: str = DEFAULT_CITY
    ):
        self.client = client
        self.favorites = favorites
        self.city = city
        self.weather: Optional[WeatherRecord] = None
        self.error_message: Optional[str] = None
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logging.exception("Weather session listener failed")

    async def refresh(self, city: Optional[str] = None) -> Optional[WeatherRecord]:
        """
        Fetch weather for city (or the current one) and publish the outcome.

        Raises:
            RuntimeError: If the session was built without a weather client
        """
        if self.client is None:
            raise RuntimeError("This session has no weather client; it only manages favorites")
        if city is not None:
            self.city = city
        try:
            weather = await self.client.fetch_weather(self.city)
        except WeatherProviderError as err:
            logging.error(f"Weather fetch failed for {self.city!r}: {err}")
            self.error_message = f"Failed to fetch weather: {err}"
            self._notify()
            return None

        self.weather = weather
        self.error_message = None
        self._notify()
        return weather

    def add_current_to_favorites(self) -> bool:
        try:
            self.favorites.add(self.city)
        except DuplicateError as err:
            self.error_message = str(err)
            self._notify()
            return False
        self._notify()
        return True

    def remove_favorite(self, index: int) -> str:
        """Remove a favorite by position. FavoriteIndexError is a caller bug and propagates."""
        city = self.favorites.remove(index)
        self._notify()
        return city

    async def select_favorite(self, index: int) -> Optional[WeatherRecord]:
        return await self.refresh(self.favorites.get(index))

    def dismiss_error(self) -> None:
        if self.error_message is not None:
            self.error_message = None
            self._notify()
