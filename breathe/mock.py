# ===================== SYNTHETIC FALLBACK RECORDS =====================
# Used when the air-quality feed cannot supply data for a location.

from datetime import datetime

import numpy as np

from .cities import CITY_COORDINATES, INDIA_CENTROID, match_city
from .forecast import derive_pollutants, synthesize_forecast, synthesize_history
from .models import AirQualityRecord, AirQualitySample, Coordinates, Provenance


def lookup_coordinates(location):
    """Static table lookup; India's centroid when the location is unknown"""
    city = match_city(location)
    lat, lon = CITY_COORDINATES[city] if city else INDIA_CENTROID
    return Coordinates(lat=lat, lon=lon)


def random_weather(rng):
    """Plausible (temperature, humidity, wind_speed) for an Indian city"""
    return (
        int(rng.integers(15, 35)),
        int(rng.integers(40, 80)),
        int(rng.integers(1, 16)),
    )


def generate_record(location, weather=None, rng=None, now=None):
    """
    Build a complete, internally consistent fake record for a location.

    Partial weather (from the weather feed) is used where present, and then
    the record is tagged partially live; otherwise it is fully synthetic.
    """
    rng = rng if rng is not None else np.random.default_rng()
    now = now if now is not None else datetime.now()

    aqi = int(rng.integers(1, 301))
    temperature, humidity, wind_speed = random_weather(rng)
    coordinates = None
    if weather is not None:
        temperature, humidity, wind_speed = weather.temperature, weather.humidity, weather.wind_speed
        coordinates = weather.coordinates
    if coordinates is None:
        coordinates = lookup_coordinates(location)

    pollutants = derive_pollutants(aqi, rng)
    current = AirQualitySample(
        location=location,
        coordinates=coordinates,
        timestamp=now,
        aqi=aqi,
        temperature=temperature,
        humidity=humidity,
        wind_speed=wind_speed,
        pollutants=pollutants,
    )

    return AirQualityRecord(
        location=location,
        coordinates=coordinates,
        current=current,
        forecast=tuple(synthesize_forecast(aqi, pollutants, temperature, humidity, wind_speed, rng=rng, now=now)),
        history=tuple(synthesize_history(aqi, rng=rng, now=now)),
        provenance=Provenance.SYNTHETIC if weather is None else Provenance.PARTIALLY_LIVE,
    )
