# ===================== LOCATION SEARCH =====================

import asyncio

import structlog

from .cities import DEFAULT_CITY_NAMES
from .http import FeedClient, FeedError
from .models import LocationCandidate

logger = structlog.get_logger()

DEFAULT_CITIES = [LocationCandidate(id=str(i), name=name) for i, name in enumerate(DEFAULT_CITY_NAMES, start=1)]


def is_indian_station(item):
    station = item.get("station") or {}
    name = station.get("name") or ""
    return station.get("country") == "IN" or "India" in name or "Indian" in name


class LocationResolver:
    """Free-text city search over WAQI stations, restricted to India"""

    def __init__(self, settings, client=None):
        self.settings = settings
        self.client = client if client is not None else FeedClient(settings)

    async def close(self):
        await self.client.close()

    async def search(self, query):
        """Candidate Indian cities for a query; the default list when nothing usable comes back"""
        query = (query or "").strip()
        if not query:
            return list(DEFAULT_CITIES)

        try:
            logger.info("searching_locations", query=query)
            payload = await self.client.get_json(f"{self.settings.aqicn_url}/search/", params={
                "keyword": query,
                "token": self.settings.aqicn_token,
            })
            if not isinstance(payload, dict) or payload.get("status") != "ok" \
                    or not isinstance(payload.get("data"), list):
                raise FeedError("AQICN search returned no data")

            candidates = []
            seen = set()
            for item in payload["data"]:
                if not isinstance(item, dict) or not is_indian_station(item):
                    continue
                name = item["station"]["name"].split(",")[0].strip()
                if not name or name.lower() in seen:
                    continue
                seen.add(name.lower())
                candidates.append(LocationCandidate(id=str(item.get("uid", name)), name=name))

            if candidates:
                return candidates
            logger.info("no_indian_locations", query=query)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("location_search_error", query=query, error=str(e) or type(e).__name__)
        return list(DEFAULT_CITIES)

    async def locate_here(self, lat=None, lon=None):
        """
        Name of the nearest monitored city to the caller, via WAQI geolocation.

        When the feed answers without a city, the caller's coordinates (if
        known) name the location; when the request itself fails, a generic
        name is used.
        """
        try:
            payload = await self.client.get_json(f"{self.settings.aqicn_url}/feed/here/", params={
                "token": self.settings.aqicn_token,
            })
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("locate_here_failed", error=str(e) or type(e).__name__)
            return "Current Location, India"

        if isinstance(payload, dict) and payload.get("status") == "ok":
            data = payload.get("data") if isinstance(payload.get("data"), dict) else {}
            city = data.get("city") if isinstance(data.get("city"), dict) else {}
            if city.get("name"):
                return city["name"]

        logger.info("locate_here_no_city", status=payload.get("status") if isinstance(payload, dict) else None)
        if lat is not None and lon is not None:
            return f"Location at {lat:.2f}, {lon:.2f}, India"
        return "Current Location, India"
