"""Weather provider seam and the errors raised along the fetch path."""
from abc import ABC, abstractmethod
from typing import Optional
from weather_data import WeatherRecord


class WeatherProviderBase(ABC):
    """Abstract base class for the transport that fetches current weather."""

    @abstractmethod
    def get_current(self, city: str) -> WeatherRecord:
        """
        Fetch current weather data for a city.

        Args:
            city: City name exactly as the user typed it

        Returns:
            WeatherRecord: Current weather information

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass


class WeatherProviderError(Exception):
    """Exception raised when a weather lookup fails."""
    pass


class EncodingError(WeatherProviderError):
    """The city name cannot be used to build a request. Not retryable."""
    pass


class NetworkError(WeatherProviderError):
    """Transport or HTTP failure. Retrying the whole lookup may succeed."""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.cause = cause
        self.status_code = status_code


class WeatherTimeoutError(NetworkError):
    """The provider did not answer within the configured timeout."""
    pass


class DecodeError(WeatherProviderError):
    """The provider response did not have the expected shape."""
    pass
