"""Command-line front end: look up weather and manage favorite cities."""
import argparse
import asyncio
import logging
import sys
from dataclasses import replace
from typing import List, Optional, Tuple

from config import Config, load_config
from favorites_store import FavoriteIndexError, FavoritesStore
from fetch_cache import FetchCache
from openweather_provider import OpenWeatherProvider
from preferences import PreferencesError, PreferencesStore
from weather_data import WeatherRecord
from weather_provider import WeatherProviderError
from weather_service import WeatherClient
from weather_session import WeatherSession


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("city-weather", description="Current weather by city name")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--prefs-file", default=None, help="Override WEATHER_PREFS_FILE")
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    parser.add_argument("--verbose", action="store_true")
    commands = parser.add_subparsers(dest="command", required=True)

    weather = commands.add_parser("weather", help="Show current weather for one or more cities")
    weather.add_argument("cities", nargs="+")

    favorites = commands.add_parser("favorites", help="Manage favorite cities")
    actions = favorites.add_subparsers(dest="action", required=True)
    actions.add_parser("list", help="List favorites in order")
    add = actions.add_parser("add", help="Append a city to favorites")
    add.add_argument("city")
    remove = actions.add_parser("remove", help="Remove the favorite at a position")
    remove.add_argument("index", type=int)
    actions.add_parser("show", help="Show weather for every favorite")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def needs_api_key(args: argparse.Namespace) -> bool:
    return args.command == "weather" or getattr(args, "action", None) == "show"


def build_session(config: Config) -> WeatherSession:
    favorites = FavoritesStore(PreferencesStore(config.prefs_file))
    if not config.api_key:
        # favorites-only commands never reach the provider
        return WeatherSession(client=None, favorites=favorites)
    provider = OpenWeatherProvider(api_key=config.api_key, timeout=config.timeout)
    client = WeatherClient(provider, cache=FetchCache(max_entries=config.cache_size))
    logging.info("Weather client ready (cache size=%s)", config.cache_size or "unbounded")
    return WeatherSession(client=client, favorites=favorites)


def format_weather_lines(weather: WeatherRecord) -> Tuple[str, str, str]:
    temp = f"{weather.temperature_celsius:.1f}°C"
    return weather.display_name, temp, weather.condition_summary


def print_weather(weather: WeatherRecord) -> None:
    place, temp, condition = format_weather_lines(weather)
    print(f"{place}  {temp}  {condition}")


async def show_weather(session: WeatherSession, cities: List[str]) -> int:
    failures = 0
    for city in cities:
        weather = await session.refresh(city)
        if weather is None:
            print(session.error_message, file=sys.stderr)
            failures += 1
        else:
            print_weather(weather)
    return 1 if failures else 0


async def show_favorites_weather(session: WeatherSession) -> int:
    cities = session.favorites.cities
    if not cities:
        print("No favorite cities yet")
        return 0
    results = await asyncio.gather(
        *(session.client.fetch_weather(city) for city in cities),
        return_exceptions=True,
    )
    failures = 0
    for index, (city, result) in enumerate(zip(cities, results)):
        if isinstance(result, WeatherProviderError):
            print(f"{index}: {city}: {result}", file=sys.stderr)
            failures += 1
        elif isinstance(result, BaseException):
            raise result
        else:
            place, temp, condition = format_weather_lines(result)
            print(f"{index}: {place}  {temp}  {condition}")
    return 1 if failures else 0


def run_favorites(session: WeatherSession, args: argparse.Namespace) -> int:
    if args.action == "list":
        for index, city in enumerate(session.favorites):
            print(f"{index}: {city}")
        return 0

    if args.action == "add":
        session.city = args.city
        if not session.add_current_to_favorites():
            print(session.error_message, file=sys.stderr)
            return 1
        print(f"Added {args.city}")
        return 0

    if args.action == "remove":
        try:
            city = session.remove_favorite(args.index)
        except FavoriteIndexError as err:
            print(err, file=sys.stderr)
            return 1
        print(f"Removed {city}")
        return 0

    return asyncio.run(show_favorites_weather(session))


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    config = load_config(require_api_key=needs_api_key(args))
    if args.prefs_file:
        config = replace(config, prefs_file=args.prefs_file)
    if args.timeout is not None:
        if args.timeout <= 0:
            raise SystemExit("--timeout must be positive")
        config = replace(config, timeout=args.timeout)

    session = build_session(config)
    try:
        if args.command == "weather":
            return asyncio.run(show_weather(session, args.cities))
        return run_favorites(session, args)
    except PreferencesError as err:
        logging.error("Preferences error: %s", err)
        print(err, file=sys.stderr)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
