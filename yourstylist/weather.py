import logging
from typing import Any, Dict

import requests

from . import config

logger = logging.getLogger(__name__)


class WeatherError(Exception):
    """Weather data could not be retrieved"""


def get_current_weather(city: str) -> Dict[str, Any]:
    """Current weather for a city in metric units.

    Returns ``{"temperature": °C, "condition": str, "wind_speed": m/s}``.
    """
    api_key = config.OPENWEATHERMAP_API_KEY
    if not api_key:
        raise WeatherError("OPENWEATHERMAP_API_KEY is not configured")

    try:
        response = requests.get(
            config.OPENWEATHERMAP_URL,
            params={"q": city, "appid": api_key, "units": "metric"},
            timeout=config.WEATHER_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        data = response.json()
        return {
            "temperature": float(data["main"]["temp"]),
            "condition": data["weather"][0]["description"],
            "wind_speed": float(data.get("wind", {}).get("speed", 0.0)),
        }
    except (requests.RequestException, KeyError, IndexError, TypeError, ValueError) as e:
        logger.error(f"Failed to fetch weather data for {city}: {e}", exc_info=True)
        raise WeatherError(
            f"Could not retrieve weather for {city}. The city may be invalid."
        ) from e
