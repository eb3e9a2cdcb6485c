"""Weather client with per-city caching and request coalescing."""
import asyncio
import logging
from typing import Dict, Optional
from fetch_cache import FetchCache
from openweather_provider import encode_city
from weather_data import WeatherRecord
from weather_provider import WeatherProviderBase


class WeatherClient:
    """
    Async front door for weather lookups.

    A city that has been fetched once is served from the cache forever after,
    with no network access. Concurrent lookups of the same uncached city share
    a single provider request. Failures are raised to the caller and never
    cached; nothing is retried here.
    """

    def __init__(self, provider: WeatherProviderBase, cache: Optional[FetchCache] = None):
        """
        Initialize weather client.

        Args:
            provider: Transport used on cache misses
            cache: Cache to populate (a fresh unbounded one by default)
        """
        self.provider = provider
        self._cache = cache if cache is not None else FetchCache()
        self._in_flight: Dict[str, "asyncio.Task[WeatherRecord]"] = {}

    async def fetch_weather(self, city: str) -> WeatherRecord:
        """
        Get current weather for a city, using the cache when possible.

        Args:
            city: City name; used verbatim as the cache key

        Returns:
            WeatherRecord: Cached or freshly fetched weather

        Raises:
            EncodingError: If the city cannot form a request (checked first)
            NetworkError: If the request fails or times out
            DecodeError: If the response cannot be decoded
        """
        encode_city(city)

        cached = self._cache.get(city)
        if cached is not None:
            logging.debug(f"Using cached weather for {city!r}")
            return cached

        task = self._in_flight.get(city)
        if task is None:
            logging.info(f"Fetching weather for {city!r} from provider...")
            task = asyncio.ensure_future(self._fetch_and_store(city))
            self._in_flight[city] = task
            task.add_done_callback(lambda done, key=city: self._forget(key, done))
        else:
            logging.debug(f"Joining in-flight request for {city!r}")

        # A waiter being cancelled must not cancel the request other waiters share
        return await asyncio.shield(task)

    async def _fetch_and_store(self, city: str) -> WeatherRecord:
        loop = asyncio.get_running_loop()
        record = await loop.run_in_executor(None, self.provider.get_current, city)
        # Only reached when the fetch completed; cancelled fetches write nothing
        self._cache.set(city, record)
        logging.info(
            f"Weather fetch successful for {city!r}: "
            f"{record.temperature_celsius}°C, {record.condition_summary}"
        )
        return record

    def _forget(self, city: str, task: "asyncio.Task[WeatherRecord]") -> None:
        if self._in_flight.get(city) is task:
            del self._in_flight[city]
        if task.cancelled():
            logging.info(f"Fetch for {city!r} was cancelled")
            return
        # Mark the error as collected; waiters still receive it through the shield
        error = task.exception()
        if error is not None:
            logging.debug(f"Fetch for {city!r} failed: {error}")

    def cached(self, city: str) -> Optional[WeatherRecord]:
        """Return the cached record for a city without fetching."""
        return self._cache.get(city)

    def clear_cache(self) -> None:
        self._cache.clear()

    def pending(self) -> int:
        """Number of provider requests currently in flight."""
        return len(self._in_flight)

    def cancel_pending(self) -> int:
        """Cancel every in-flight request. Returns how many were cancelled."""
        tasks = [task for task in self._in_flight.values() if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            logging.info(f"Cancelled {len(tasks)} in-flight weather request(s)")
        return len(tasks)
