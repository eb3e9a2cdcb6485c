"""In-memory weather cache keyed by the city name as typed."""
import logging
from collections import OrderedDict
from typing import Optional
from weather_data import WeatherRecord


class FetchCache:
    """
    Key -> WeatherRecord store with no expiry.

    Keys are used exactly as given (case-sensitive, no trimming). Entries live
    until the process exits. By default the cache is unbounded; pass
    max_entries to evict the least recently used city once the bound is hit.
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, WeatherRecord]" = OrderedDict()

    def get(self, city: str) -> Optional[WeatherRecord]:
        record = self._entries.get(city)
        if record is not None:
            self._entries.move_to_end(city)
        return record

    def set(self, city: str, record: WeatherRecord) -> None:
        # Overwrites are fine: concurrent fetches of one city decode equal records
        self._entries[city] = record
        self._entries.move_to_end(city)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logging.debug(f"Evicted {evicted!r} from weather cache")

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, city: object) -> bool:
        return city in self._entries

    def __len__(self) -> int:
        return len(self._entries)
