"""OpenWeather Current Weather API provider implementation."""
import json
import logging
import math
from typing import Union
from urllib.parse import quote

import requests

from weather_data import WeatherRecord
from weather_provider import (
    DecodeError,
    EncodingError,
    NetworkError,
    WeatherProviderBase,
    WeatherTimeoutError,
)


def encode_city(city: str) -> str:
    """
    Percent-encode a city name for use as a URL query component.

    Raises:
        EncodingError: If the name is empty or cannot be encoded
    """
    if not isinstance(city, str) or not city.strip():
        raise EncodingError("City name must not be empty")
    try:
        return quote(city, safe="")
    except UnicodeEncodeError as e:
        raise EncodingError(f"City name {city!r} cannot be percent-encoded: {e}") from e


def _field(container: dict, key: str, expected: type, path: str):
    if key not in container:
        raise DecodeError(f"Response missing '{path}'")
    value = container[key]
    # bool is an int subclass, never accept it where a number or object is expected
    if isinstance(value, bool) or not isinstance(value, expected):
        raise DecodeError(f"Response field '{path}' has wrong type: {type(value).__name__}")
    return value


def decode_weather(payload: Union[bytes, str]) -> WeatherRecord:
    """
    Decode a Current Weather API response body into a WeatherRecord.

    Mapping: name -> city, sys.country -> country, main.temp -> temperature_celsius,
    weather[0].main -> condition_summary. Only the first condition is used.

    Raises:
        DecodeError: If the body is not JSON or any required field is missing
            or has the wrong type. No partial record is ever produced.
    """
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Malformed JSON response: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError(f"Expected a JSON object, got {type(data).__name__}")

    city = _field(data, "name", str, "name")
    sys_block = _field(data, "sys", dict, "sys")
    country = _field(sys_block, "country", str, "sys.country")
    main_block = _field(data, "main", dict, "main")
    temp = _field(main_block, "temp", (int, float), "main.temp")
    try:
        temperature = float(temp)
    except OverflowError as e:
        raise DecodeError(f"Response field 'main.temp' is out of range: {e}") from e
    if not math.isfinite(temperature):
        raise DecodeError(f"Response field 'main.temp' is not a finite number: {temperature}")

    conditions = _field(data, "weather", list, "weather")
    if not conditions:
        raise DecodeError("Response has empty 'weather' array")
    first = conditions[0]
    if not isinstance(first, dict):
        raise DecodeError(f"Response field 'weather[0]' has wrong type: {type(first).__name__}")
    summary = _field(first, "main", str, "weather[0].main")

    return WeatherRecord(
        city=city,
        country=country,
        temperature_celsius=temperature,
        condition_summary=summary,
    )


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using OpenWeather Current Weather API by city name.

    Uses the free Current Weather API: https://openweathermap.org/current
    Units are always metric; nothing is retried here.
    """

    BASE_URL = "https://api.openweathermap.org/data/2.5/weather"
    UNITS = "metric"

    def __init__(self, api_key: str, timeout: float = 10):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key, supplied from configuration
            timeout: HTTP request timeout in seconds
        """
        if not api_key:
            raise ValueError("api_key is required")
        self.api_key = api_key
        self.timeout = timeout

    def get_current(self, city: str) -> WeatherRecord:
        """
        Fetch and decode current weather for a city.

        Raises:
            EncodingError: If the city cannot be sent as a query parameter
            NetworkError: On transport failures and non-2xx responses
            DecodeError: If the response body has an unexpected shape
        """
        encoded = encode_city(city)
        params = {
            "q": city,
            "appid": self.api_key,
            "units": self.UNITS,
        }

        try:
            logging.info(f"Making OpenWeather API request: {self.BASE_URL}?q={encoded}")
            response = requests.get(self.BASE_URL, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logging.error(f"Request for {city!r} timed out after {self.timeout}s")
            raise WeatherTimeoutError(f"Timed out after {self.timeout}s", cause=e) from e
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise NetworkError(f"Network error: {e}", cause=e) from e

        logging.info(f"API response status: {response.status_code}")
        if not response.ok:
            logging.error(f"API request failed with status {response.status_code}")
            self._handle_error_response(response)

        try:
            record = decode_weather(response.content)
        except DecodeError as e:
            logging.error(f"Failed to parse API response for {city!r}: {e}")
            raise

        logging.info(
            f"Successfully parsed weather data: {record.display_name} "
            f"{record.temperature_celsius}°C, {record.condition_summary}"
        )
        return record

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from OpenWeather error response."""
        try:
            error_data = response.json()
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise NetworkError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        if not isinstance(error_data, dict):
            error_data = {}
        cod = error_data.get("cod", response.status_code)
        message = error_data.get("message", "Unknown error")
        logging.error(f"OpenWeather API error response: {error_data}")
        raise NetworkError(
            f"OpenWeather API error {cod}: {message}",
            status_code=response.status_code,
        )
