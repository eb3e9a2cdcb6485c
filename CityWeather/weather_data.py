"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass


@dataclass(frozen=True)
class WeatherRecord:
    """Current conditions for one city, flattened from the provider payload."""
    city: str  # resolved place name, e.g. "London"
    country: str  # ISO country code, e.g. "GB"
    temperature_celsius: float
    condition_summary: str  # e.g., "Clouds", "Rain", "Clear"

    @property
    def display_name(self) -> str:
        """City and country as shown to the user ("London, GB")."""
        return f"{self.city}, {self.country}"
