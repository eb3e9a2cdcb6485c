"""User's favorite cities: ordered, duplicate-free, persisted on every change."""
import logging
from typing import Iterator, List
from preferences import PreferencesStore

FAVORITES_KEY = "favoriteCities"


class FavoritesError(Exception):
    """Base class for rejected favorites operations."""
    pass


class DuplicateError(FavoritesError):
    """The city is already a favorite."""

    def __init__(self, city: str):
        super().__init__(f"{city} is already in your favorites")
        self.city = city


class FavoriteIndexError(FavoritesError, IndexError):
    """A removal index outside the current list."""

    def __init__(self, index: int, length: int):
        super().__init__(f"Favorite index {index} out of range (0..{length - 1})" if length
                         else f"Favorite index {index} out of range (no favorites)")
        self.index = index
        self.length = length


class FavoritesStore:
    """
    Ordered list of favorite city names backed by a PreferencesStore.

    Names are compared exactly (case-sensitive). The list is loaded once on
    construction and the whole list is written back after each add/remove.
    """

    def __init__(self, preferences: PreferencesStore, key: str = FAVORITES_KEY):
        self.preferences = preferences
        self.key = key
        self._cities: List[str] = self.load()

    def load(self) -> List[str]:
        """
        Read the persisted list. Never raises.

        Returns:
            List of city names in display order, empty when nothing usable is stored
        """
        stored = self.preferences.get(self.key)
        if stored is None:
            return []
        if not isinstance(stored, list) or not all(isinstance(c, str) for c in stored):
            logging.warning(f"Stored favorites under {self.key!r} are not a list of strings, starting empty")
            return []

        cities: List[str] = []
        for city in stored:
            if city in cities:
                logging.warning(f"Dropping duplicate stored favorite {city!r}")
                continue
            cities.append(city)
        logging.debug(f"Loaded {len(cities)} favorite(s)")
        return cities

    @property
    def cities(self) -> List[str]:
        """Copy of the current list."""
        return list(self._cities)

    def get(self, index: int) -> str:
        if not 0 <= index < len(self._cities):
            raise FavoriteIndexError(index, len(self._cities))
        return self._cities[index]

    def add(self, city: str) -> None:
        """
        Append a city to the end of the list and persist.

        Raises:
            DuplicateError: If the exact name is already present (list unchanged)
            TypeError: If city is not a string
        """
        if not isinstance(city, str):
            raise TypeError(f"Favorite city must be a string, got {type(city).__name__}")
        if city in self._cities:
            raise DuplicateError(city)
        updated = self._cities + [city]
        self._save(updated)
        self._cities = updated
        logging.info(f"Added favorite {city!r}")

    def remove(self, index: int) -> str:
        """
        Remove the city at index and persist.

        Returns:
            The removed city name

        Raises:
            FavoriteIndexError: If index is outside [0, len) (list unchanged)
        """
        if not 0 <= index < len(self._cities):
            raise FavoriteIndexError(index, len(self._cities))
        updated = list(self._cities)
        city = updated.pop(index)
        self._save(updated)
        self._cities = updated
        logging.info(f"Removed favorite {city!r}")
        return city

    def _save(self, cities: List[str]) -> None:
        self.preferences.set(self.key, cities)

    def __len__(self) -> int:
        return len(self._cities)

    def __contains__(self, city: object) -> bool:
        return city in self._cities

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._cities))
