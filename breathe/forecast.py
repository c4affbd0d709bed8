"""
Forecast and history synthesis from a single current-conditions sample.

The 7-day forecast applies a cyclical day factor and weather factors to the
current AQI, then a bounded random jitter. Pollutants keep the current mix:
each is scaled by its current ratio to the AQI.
"""

import math
from datetime import datetime, timedelta

import numpy as np

from .models import (
    ForecastEntry,
    HistoryEntry,
    Pollutants,
    TemperatureRange,
    as_number,
    clamp,
    clamp_aqi,
)

FORECAST_DAYS = 7
HISTORY_HOURS = 24

# (ratio to AQI, noise half-width) for the synthetic pollutant mix
SYNTHETIC_MIX = {
    "pm25": (0.8, 10),
    "pm10": (1.2, 15),
    "o3": (0.3, 5),
    "no2": (0.4, 7),
    "so2": (0.2, 4),
    "co": (0.05, 1),
}


def _rng(rng):
    return rng if rng is not None else np.random.default_rng()


def _now(now):
    return now if now is not None else datetime.now()


def day_factor(i):
    return 1 + 0.2 * math.sin(0.5 * i)


def temperature_factor(temperature):
    if temperature > 30: return 1.2
    elif temperature < 15: return 0.8
    return 1.0


def humidity_factor(humidity):
    if humidity > 80: return 1.3
    elif humidity < 40: return 0.7
    return 1.0


def wind_factor(wind_speed):
    if wind_speed > 20: return 0.6
    elif wind_speed < 5: return 1.4
    return 1.0


def derive_pollutants(aqi, rng=None):
    """Synthetic pollutant set: fixed linear ratio to AQI plus bounded noise, floored at 0"""
    rng = _rng(rng)
    values = {}
    for key, (ratio, noise) in SYNTHETIC_MIX.items():
        raw = aqi * ratio + float(rng.uniform(-noise, noise))
        if key == "co":
            values[key] = max(0.0, round(raw, 1))
        else:
            values[key] = max(0, math.floor(raw))
    return Pollutants(**values)


def scale_pollutants(pollutants, current_aqi, target_aqi):
    """Scale the current pollutant mix to a different AQI, preserving the ratios"""
    base = max(1, current_aqi)
    values = {}
    for key, value in pollutants.items():
        scaled = target_aqi * (value / base)
        values[key] = round(scaled, 1) if key == "co" else int(round(scaled))
    return Pollutants(**values)


def synthesize_forecast(current_aqi, pollutants, temperature, humidity, wind_speed, rng=None, now=None):
    """Derive a 7-day forecast (today first) from current conditions"""
    rng = _rng(rng)
    today = _now(now)
    weather_factor = temperature_factor(temperature) * humidity_factor(humidity) * wind_factor(wind_speed)

    forecast = []
    for i in range(FORECAST_DAYS):
        # Base forecasted AQI with cyclical variation, then +/-15% jitter
        aqi = current_aqi * day_factor(i) * weather_factor
        aqi *= float(rng.uniform(0.85, 1.15))
        aqi = clamp_aqi(aqi)

        temp_variation = 3 * math.sin(0.7 * i)
        temp_min = clamp(round(temperature - 5 + temp_variation), 10, 40)
        temp_max = max(temp_min + 3, min(45, round(temperature + 5 + temp_variation)))

        forecast.append(ForecastEntry(
            timestamp=today + timedelta(days=i),
            aqi=aqi,
            temperature=TemperatureRange(min=temp_min, max=temp_max),
            humidity=clamp(round(humidity + 10 * math.sin(0.9 * i)), 30, 95),
            wind_speed=max(1, round(wind_speed + 5 * math.sin(1.1 * i))),
            pollutants=scale_pollutants(pollutants, current_aqi, aqi),
        ))
    return forecast


def _synthetic_hour(current_aqi, hours_ago, now, rng):
    aqi = clamp_aqi(current_aqi * float(rng.uniform(0.7, 1.3)))
    return HistoryEntry(
        timestamp=now - timedelta(hours=hours_ago),
        hours_ago=hours_ago,
        aqi=aqi,
        pollutants=derive_pollutants(aqi, rng),
    )


def _upstream_hour(point, hours_ago, now, rng):
    """History entry from a feed point such as {"avg": 87, "min": 60, "max": 110}"""
    reading = as_number(point.get("avg"), default=None) if isinstance(point, dict) else None
    if reading is None or reading <= 0:
        return None
    aqi = clamp_aqi(reading)
    synthetic = derive_pollutants(aqi, rng)
    # The feed only reports PM2.5; other pollutants are synthesized around it
    values = synthetic.to_dict()
    values["pm25"] = reading
    return HistoryEntry(
        timestamp=now - timedelta(hours=hours_ago),
        hours_ago=hours_ago,
        aqi=aqi,
        pollutants=Pollutants(**values),
    )


def synthesize_history(current_aqi, upstream=None, rng=None, now=None):
    """
    24 hourly entries, entry 0 = now and entry 23 = 23 hours ago.
    Uses the upstream series (most recent first) where it has usable points
    and samples current_aqi * U(0.7, 1.3) for every other hour.
    """
    rng = _rng(rng)
    now = _now(now)
    points = list(upstream or [])[:HISTORY_HOURS]

    history = []
    for hours_ago in range(HISTORY_HOURS):
        entry = None
        if hours_ago < len(points):
            entry = _upstream_hour(points[hours_ago], hours_ago, now, rng)
        if entry is None:
            entry = _synthetic_hour(current_aqi, hours_ago, now, rng)
        history.append(entry)
    return history
