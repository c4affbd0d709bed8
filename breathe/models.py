"""
Data model shared by the gateway, the synthesizers and the dashboard.

Every record handed to the dashboard is built fresh per request from these
frozen dataclasses; `to_dict()` gives the JSON shape the front end reads.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

POLLUTANT_KEYS = ("pm25", "pm10", "o3", "no2", "so2", "co")

AQI_MIN = 1
AQI_MAX = 500


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


def clamp_aqi(value) -> int:
    return int(clamp(round(value), AQI_MIN, AQI_MAX))


def as_number(value, default=0.0):
    """Coerce a feed value to float; non-numeric and non-finite values become `default`"""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


class Provenance(str, enum.Enum):
    LIVE = "live"
    PARTIALLY_LIVE = "partially_live"
    SYNTHETIC = "synthetic"


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float

    def to_dict(self):
        return {"lat": self.lat, "lon": self.lon}


@dataclass(frozen=True)
class Pollutants:
    pm25: float = 0
    pm10: float = 0
    o3: float = 0
    no2: float = 0
    so2: float = 0
    co: float = 0

    @classmethod
    def from_mapping(cls, values) -> "Pollutants":
        """Build from any mapping; missing, negative or non-numeric entries become 0"""
        values = values or {}
        return cls(**{k: max(0, as_number(values.get(k))) for k in POLLUTANT_KEYS})

    def items(self):
        return [(k, getattr(self, k)) for k in POLLUTANT_KEYS]

    def to_dict(self):
        return dict(self.items())


@dataclass(frozen=True)
class WeatherReading:
    temperature: float
    humidity: float
    wind_speed: float
    coordinates: Optional[Coordinates] = None


@dataclass(frozen=True)
class AirQualitySample:
    location: str
    coordinates: Optional[Coordinates]
    timestamp: datetime
    aqi: int
    temperature: float
    humidity: float
    wind_speed: float
    pollutants: Pollutants

    def to_dict(self):
        return {
            "location": self.location,
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
            "timestamp": self.timestamp.isoformat(),
            "aqi": self.aqi,
            "temperature": self.temperature,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
            "pollutants": self.pollutants.to_dict(),
        }


@dataclass(frozen=True)
class TemperatureRange:
    min: float
    max: float

    def to_dict(self):
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class ForecastEntry:
    timestamp: datetime
    aqi: int
    temperature: TemperatureRange
    humidity: float
    wind_speed: float
    pollutants: Pollutants

    def to_dict(self):
        return {
            "timestamp": self.timestamp.isoformat(),
            "aqi": self.aqi,
            "temperature": self.temperature.to_dict(),
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
            "pollutants": self.pollutants.to_dict(),
        }


@dataclass(frozen=True)
class HistoryEntry:
    timestamp: datetime
    hours_ago: int
    aqi: int
    pollutants: Pollutants

    def to_dict(self):
        return {
            "timestamp": self.timestamp.isoformat(),
            "hours_ago": self.hours_ago,
            "aqi": self.aqi,
            "pollutants": self.pollutants.to_dict(),
        }


@dataclass(frozen=True)
class AirQualityRecord:
    location: str
    coordinates: Coordinates
    current: AirQualitySample
    forecast: tuple = field(default_factory=tuple)
    history: tuple = field(default_factory=tuple)
    provenance: Provenance = Provenance.SYNTHETIC

    def to_dict(self):
        return {
            "location": self.location,
            "coordinates": self.coordinates.to_dict(),
            "current": self.current.to_dict(),
            "forecast": [entry.to_dict() for entry in self.forecast],
            "history": [entry.to_dict() for entry in self.history],
            "provenance": self.provenance.value,
        }


@dataclass(frozen=True)
class LocationCandidate:
    id: str
    name: str
    country: str = "India"

    def to_dict(self):
        return {"id": self.id, "name": self.name, "country": self.country}


@dataclass(frozen=True)
class AQICategory:
    name: str
    description: str
    color_token: str

    def to_dict(self):
        return {"name": self.name, "description": self.description, "color": self.color_token}


@dataclass(frozen=True)
class HealthAdvice:
    general: str
    sensitive: str
    outdoor: str
    indoor: str
    mask: str

    def to_dict(self):
        return {
            "general": self.general,
            "sensitive": self.sensitive,
            "outdoor": self.outdoor,
            "indoor": self.indoor,
            "mask": self.mask,
        }


@dataclass(frozen=True)
class CitySnapshot:
    name: str
    aqi: int
    lat: float
    lon: float
    category: str
    color: str

    def to_dict(self):
        return {
            "name": self.name,
            "aqi": self.aqi,
            "lat": self.lat,
            "lon": self.lon,
            "status": self.category,
            "color": self.color,
        }
