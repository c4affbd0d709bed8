"""
AQI estimation from pollutant concentrations and weather.

WeightedHeuristicPredictor is a fixed-weight linear formula. It has no
training phase and no model artifact; the weights were tuned by hand. The
Predictor protocol is the seam where a real model could be plugged in.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np

from .models import Pollutants, clamp, clamp_aqi

# Normalisation divisors (concentration that maps to 1.0)
NORMALIZERS = {"pm25": 300, "pm10": 500, "o3": 200, "no2": 200, "so2": 200, "co": 30}

WEIGHTS = {
    "pm25": 0.5,
    "pm10": 0.2,
    "o3": 0.15,
    "no2": 0.1,
    "so2": 0.05,
    "co": 0.05,
    # Environmental factors
    "temperature": 0.1,   # heat worsens pollution
    "humidity": -0.05,    # humidity settles some particulates
    "wind_speed": -0.15,  # wind disperses pollutants
}

# Day-over-day trend per pollutant: base + U(0, 0.1)
TREND_BASES = {"pm25": 0.95, "pm10": 0.93, "o3": 1.02, "no2": 0.97, "so2": 0.96, "co": 0.95}
TREND_SPREAD = 0.1

# Environmental baselines for projections
BASE_TEMPERATURE = 25
BASE_HUMIDITY = 50
BASE_WIND = 10


class Predictor(Protocol):
    def estimate_aqi(self, pollutants: Pollutants, temperature: float, humidity: float,
                     wind_speed: float) -> int: ...

    def project_pollutants(self, current: Pollutants, days_ahead: int, temperature: float,
                           humidity: float, wind_speed: float) -> Pollutants: ...


class WeightedHeuristicPredictor:
    """Deterministic weighted-sum AQI estimate plus trend-based pollutant projection"""

    def __init__(self, rng=None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def normalize(self, pollutants, temperature, humidity, wind_speed):
        """Map every input to roughly [0, 1]"""
        features = {k: min(1.0, v / NORMALIZERS[k]) for k, v in pollutants.items()}
        features["temperature"] = (clamp(temperature, 10, 45) - 10) / 35
        features["humidity"] = humidity / 100
        features["wind_speed"] = min(1.0, wind_speed / 30)
        return features

    def estimate_aqi(self, pollutants, temperature, humidity, wind_speed):
        features = self.normalize(pollutants, temperature, humidity, wind_speed)
        weighted_sum = sum(features[k] * w for k, w in WEIGHTS.items())
        return clamp_aqi(weighted_sum * 500)

    def environmental_factor(self, temperature, humidity, wind_speed):
        return (1
                + 0.02 * (temperature - BASE_TEMPERATURE) / 10
                - 0.01 * (humidity - BASE_HUMIDITY) / BASE_HUMIDITY
                - 0.03 * wind_speed / BASE_WIND)

    def project_pollutants(self, current, days_ahead, temperature, humidity, wind_speed):
        env = self.environmental_factor(temperature, humidity, wind_speed)
        projected = {}
        for key, value in current.items():
            trend = TREND_BASES[key] + float(self.rng.uniform(0, TREND_SPREAD))
            scaled = value * (trend * env) ** days_ahead
            if key == "co":
                projected[key] = max(0.1, round(scaled, 1))
            else:
                projected[key] = max(1, int(round(scaled)))
        return Pollutants(**projected)
