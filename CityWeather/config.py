"""Runtime configuration from the environment (and an optional .env file)."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_PREFS_FILE = os.path.join("~", ".city_weather", "preferences.json")
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class Config:
    api_key: str
    timeout: float = DEFAULT_TIMEOUT
    prefs_file: str = DEFAULT_PREFS_FILE
    cache_size: Optional[int] = None

    def __repr__(self) -> str:
        return (
            f"Config(api_key='***', timeout={self.timeout!r}, "
            f"prefs_file={self.prefs_file!r}, cache_size={self.cache_size!r})"
        )


def load_config(require_api_key: bool = True) -> Config:
    """
    Read configuration, failing fast with a readable message.

    Raises:
        SystemExit: If a required value is missing or a value is invalid
    """
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY", "")
    timeout = os.getenv("WEATHER_TIMEOUT")
    prefs_file = os.getenv("WEATHER_PREFS_FILE") or DEFAULT_PREFS_FILE
    cache_size = os.getenv("WEATHER_CACHE_SIZE")

    if require_api_key and not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    try:
        timeout_val = float(timeout) if timeout else DEFAULT_TIMEOUT
    except ValueError as exc:
        raise SystemExit(f"Invalid WEATHER_TIMEOUT: {exc}") from exc
    if timeout_val <= 0:
        raise SystemExit("WEATHER_TIMEOUT must be positive")

    cache_size_val = None
    if cache_size:
        try:
            cache_size_val = int(cache_size)
        except ValueError as exc:
            raise SystemExit(f"Invalid WEATHER_CACHE_SIZE: {exc}") from exc
        if cache_size_val < 1:
            raise SystemExit("WEATHER_CACHE_SIZE must be at least 1")

    logging.info("Configuration loaded: timeout=%s prefs_file=%s cache_size=%s",
                 timeout_val, prefs_file, cache_size_val)
    return Config(
        api_key=api_key,
        timeout=timeout_val,
        prefs_file=prefs_file,
        cache_size=cache_size_val,
    )
