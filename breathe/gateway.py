"""
External data gateway: WAQI air quality + OpenWeatherMap weather.

`fetch_record` always returns a complete AirQualityRecord. Transport errors,
unsuccessful statuses and malformed payloads are logged and absorbed by
falling back to synthetic data; the record's provenance says which feeds
actually contributed.
"""

import asyncio
from datetime import datetime
from urllib.parse import quote

import numpy as np
import structlog
from cachelib import SimpleCache

from .classifier import classify, color_token
from .forecast import synthesize_forecast, synthesize_history
from .http import FeedClient, FeedError
from .mock import generate_record, lookup_coordinates, random_weather
from .models import (
    POLLUTANT_KEYS,
    AirQualityRecord,
    AirQualitySample,
    CitySnapshot,
    Coordinates,
    Pollutants,
    Provenance,
    WeatherReading,
    as_number,
    clamp_aqi,
)
from .predictor import WeightedHeuristicPredictor

logger = structlog.get_logger()

# Cache entries expire by time only; the size threshold is never reached in practice
CACHE_THRESHOLD = 10_000


def _iaqi_value(iaqi, key):
    """Numeric reading of one WAQI `iaqi` entry ({"v": 42}), or None"""
    entry = iaqi.get(key)
    if not isinstance(entry, dict):
        return None
    return as_number(entry.get("v"), default=None)


def _first_known(*values):
    return next(v for v in values if v is not None)


def _parse_geo(geo):
    if isinstance(geo, (list, tuple)) and len(geo) >= 2:
        lat, lon = as_number(geo[0], None), as_number(geo[1], None)
        if lat is not None and lon is not None:
            return Coordinates(lat=lat, lon=lon)
    return None


class AirQualityGateway:
    def __init__(self, settings, client=None, predictor=None, rng=None, cache=None):
        self.settings = settings
        self.client = client if client is not None else FeedClient(settings)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.predictor = predictor if predictor is not None else WeightedHeuristicPredictor(self.rng)
        self.cache = cache if cache is not None else SimpleCache(
            threshold=CACHE_THRESHOLD, default_timeout=settings.cache_ttl
        )
        self._selection = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    async def close(self):
        if self._selection is not None and not self._selection.done():
            self._selection.cancel()
        await self.client.close()

    # ===================== FEEDS =====================

    async def fetch_air_quality(self, location):
        """WAQI city feed payload (`data` object); raises on any failure"""
        url = f"{self.settings.aqicn_url}/feed/{quote(location, safe='')}/"
        logger.info("fetching_aqicn", location=location)
        payload = await self.client.get_json(url, params={"token": self.settings.aqicn_token})

        if not isinstance(payload, dict) or payload.get("status") != "ok":
            status = payload.get("status") if isinstance(payload, dict) else None
            raise FeedError(f"AQICN status {status!r}")
        data = payload.get("data")
        if not isinstance(data, dict):
            raise FeedError("AQICN response has no data payload")
        return data

    async def fetch_weather(self, location):
        """Current weather for a location; None when the weather feed fails"""
        try:
            payload = await self.client.get_json(self.settings.openweather_url, params={
                "q": f"{location},in",
                "units": "metric",
                "appid": self.settings.openweather_api_key,
            })
            if not isinstance(payload, dict) or str(payload.get("cod")) != "200":
                raise FeedError(f"OpenWeatherMap code {payload.get('cod') if isinstance(payload, dict) else None!r}")

            main = payload.get("main") or {}
            wind = payload.get("wind") or {}
            temperature = as_number(main.get("temp"), None)
            humidity = as_number(main.get("humidity"), None)
            wind_speed = as_number(wind.get("speed"), None)
            if temperature is None or humidity is None or wind_speed is None:
                raise FeedError("OpenWeatherMap response is missing readings")

            coord = payload.get("coord") or {}
            coordinates = _parse_geo([coord.get("lat"), coord.get("lon")])
            return WeatherReading(temperature, humidity, wind_speed, coordinates)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("weather_fetch_failed", location=location, error=str(e) or type(e).__name__)
            return None

    # ===================== RECORD ASSEMBLY =====================

    def build_record(self, location, data, weather=None, now=None):
        """Merge a WAQI payload with optional weather into a full record"""
        now = now if now is not None else datetime.now()
        iaqi = data.get("iaqi") if isinstance(data.get("iaqi"), dict) else {}
        pollutants = Pollutants.from_mapping({k: _iaqi_value(iaqi, k) for k in POLLUTANT_KEYS})

        # Weather feed first, then the station's own readings, then an estimate
        est_temperature, est_humidity, est_wind = random_weather(self.rng)
        temperature = _first_known(weather and weather.temperature, _iaqi_value(iaqi, "t"), est_temperature)
        humidity = _first_known(weather and weather.humidity, _iaqi_value(iaqi, "h"), est_humidity)
        wind_speed = _first_known(weather and weather.wind_speed, _iaqi_value(iaqi, "w"), est_wind)

        reported = as_number(data.get("aqi"), default=None)
        if reported is None:
            aqi = self.predictor.estimate_aqi(pollutants, temperature, humidity, wind_speed)
            logger.info("aqi_estimated", location=location, aqi=aqi)
        else:
            aqi = clamp_aqi(reported)

        city = data.get("city") if isinstance(data.get("city"), dict) else {}
        coordinates = (weather.coordinates if weather else None) or _parse_geo(city.get("geo")) \
            or lookup_coordinates(location)
        name = city.get("name") or location

        forecast_block = data.get("forecast") if isinstance(data.get("forecast"), dict) else {}
        daily = forecast_block.get("daily") if isinstance(forecast_block.get("daily"), dict) else {}
        upstream_history = daily.get("pm25") if isinstance(daily.get("pm25"), list) else None

        current = AirQualitySample(
            location=name,
            coordinates=coordinates,
            timestamp=now,
            aqi=aqi,
            temperature=temperature,
            humidity=humidity,
            wind_speed=wind_speed,
            pollutants=pollutants,
        )
        return AirQualityRecord(
            location=name,
            coordinates=coordinates,
            current=current,
            forecast=tuple(synthesize_forecast(aqi, pollutants, temperature, humidity, wind_speed,
                                               rng=self.rng, now=now)),
            history=tuple(synthesize_history(aqi, upstream_history, rng=self.rng, now=now)),
            provenance=Provenance.LIVE if weather is not None else Provenance.PARTIALLY_LIVE,
        )

    @staticmethod
    def cache_key(location):
        return f"record:{location.strip().lower()}"

    async def fetch_record(self, location):
        """Unified record for a location; never raises for feed failures"""
        key = self.cache_key(location)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("record_cache_hit", location=location)
            return cached

        data, weather = await asyncio.gather(
            self.fetch_air_quality(location),
            self.fetch_weather(location),
            return_exceptions=True,
        )
        if isinstance(weather, BaseException):
            weather = None

        record = None
        if isinstance(data, BaseException):
            logger.warning("aqicn_fetch_failed", location=location, error=str(data) or type(data).__name__)
        else:
            try:
                record = self.build_record(location, data, weather)
            except Exception as e:
                logger.warning("aqicn_payload_malformed", location=location, error=str(e) or type(e).__name__)

        if record is None:
            logger.info("falling_back_to_mock", location=location, weather=weather is not None)
            record = generate_record(location, weather, rng=self.rng)
        else:
            estimate = self.predictor.estimate_aqi(record.current.pollutants, record.current.temperature,
                                                   record.current.humidity, record.current.wind_speed)
            logger.debug("heuristic_estimate", location=location, estimated=estimate, reported=record.current.aqi)

        self.cache.set(key, record)
        logger.info("record_ready", location=location, aqi=record.current.aqi,
                    provenance=record.provenance.value)
        return record

    def clear_cache(self):
        self.cache.clear()

    # ===================== MAP DATA =====================

    async def fetch_city_snapshots(self, names):
        """
        Current AQI for a batch of cities, for map markers.
        Runs with bounded concurrency and keeps every city whose fetch settled.
        """
        semaphore = asyncio.Semaphore(self.settings.max_concurrency)

        async def snapshot(name):
            async with semaphore:
                record = await self.fetch_record(name)
            aqi = record.current.aqi
            return CitySnapshot(
                name=name,
                aqi=aqi,
                lat=record.coordinates.lat,
                lon=record.coordinates.lon,
                category=classify(aqi).name,
                color=color_token(aqi),
            )

        results = await asyncio.gather(*(snapshot(name) for name in names), return_exceptions=True)

        snapshots = []
        for name, result in zip(names, results):
            if isinstance(result, BaseException):
                logger.error("city_snapshot_failed", city=name, error=str(result))
                continue
            snapshots.append(result)
        return snapshots

    # ===================== LOCATION SELECTION =====================

    @property
    def selected(self):
        return self._selection

    async def select_location(self, location):
        """
        Fetch the record for the newly selected location.

        A newer selection cancels the one still in flight, so a slow response
        for an old location never replaces the current one; the superseded
        caller receives asyncio.CancelledError.
        """
        previous = self._selection
        if previous is not None and not previous.done():
            logger.info("selection_superseded", location=location)
            previous.cancel()

        task = asyncio.ensure_future(self.fetch_record(location))
        self._selection = task
        return await task
