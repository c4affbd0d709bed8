from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from cachelib import SimpleCache
from dotenv import load_dotenv
from datetime import datetime
import asyncio
import math
import os

import structlog

from breathe import __version__
from breathe.cities import DEFAULT_CITY_NAMES
from breathe.classifier import classify, recommendations
from breathe.config import Settings
from breathe.gateway import CACHE_THRESHOLD, AirQualityGateway
from breathe.locations import LocationResolver
from breathe.log import configure_logging
from breathe.models import Pollutants, POLLUTANT_KEYS
from breathe.predictor import WeightedHeuristicPredictor

load_dotenv()
settings = Settings.from_env()
configure_logging(settings.log_level)
logger = structlog.get_logger()

# ===================== APP SETUP =====================
app = Flask(__name__)
CORS(app, resources={r"/api/*": {"origins": "*"}})

# Records are shared across requests for CACHE_TTL_SECONDS (5 minutes by default)
record_cache = SimpleCache(threshold=CACHE_THRESHOLD, default_timeout=settings.cache_ttl)

predictor = WeightedHeuristicPredictor()

logger.info("app_configured", **settings.summary())


async def with_gateway(action):
    """Run an action against a gateway bound to the current event loop"""
    async with AirQualityGateway(settings, cache=record_cache) as gateway:
        return await action(gateway)


async def with_resolver(action):
    resolver = LocationResolver(settings)
    try:
        return await action(resolver)
    finally:
        await resolver.close()


# ===================== WEB ROUTES =====================
@app.route("/")
def index():
    """Serve the dashboard"""
    return send_from_directory(app.root_path, 'index.html')


# ===================== API ROUTES =====================
@app.route("/api/current")
def current():
    """Unified record for a city: current conditions, 7-day forecast and 24h history"""
    city = (request.args.get("city") or "Delhi").strip()
    if not city:
        return jsonify({"error": "city must not be empty"}), 400

    record = asyncio.run(with_gateway(lambda gateway: gateway.fetch_record(city)))
    aqi = record.current.aqi

    payload = record.to_dict()
    payload["category"] = classify(aqi).to_dict()
    payload["health"] = recommendations(aqi).to_dict()
    return jsonify(payload)


@app.route("/api/search")
def search_cities():
    """Autocomplete search for Indian monitoring locations"""
    query = request.args.get("q", "")
    candidates = asyncio.run(with_resolver(lambda resolver: resolver.search(query)))
    return jsonify([c.to_dict() for c in candidates])


@app.route("/api/locate")
def locate():
    """Nearest monitored location for the caller"""
    try:
        lat = float(request.args["lat"]) if request.args.get("lat") else None
        lon = float(request.args["lon"]) if request.args.get("lon") else None
    except ValueError:
        return jsonify({"error": "lat and lon must be numbers"}), 400

    location = asyncio.run(with_resolver(lambda resolver: resolver.locate_here(lat, lon)))
    return jsonify({"location": location})


@app.route("/api/map-data")
def map_data():
    """Map markers for the default cities"""
    names = DEFAULT_CITY_NAMES[:settings.map_city_count]
    snapshots = asyncio.run(with_gateway(lambda gateway: gateway.fetch_city_snapshots(names)))
    return jsonify([s.to_dict() for s in snapshots])


@app.route("/api/estimate", methods=["POST"])
def estimate():
    """Pollutant calculator: AQI estimate from user-entered readings"""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "expected a JSON object"}), 400

    try:
        readings = {k: float(data.get(k, 0)) for k in POLLUTANT_KEYS}
        temperature = float(data.get("temperature", 25))
        humidity = float(data.get("humidity", 50))
        wind_speed = float(data.get("wind_speed", 10))
        if not all(math.isfinite(v) for v in [*readings.values(), temperature, humidity, wind_speed]):
            raise ValueError("readings must be finite")
    except (TypeError, ValueError) as e:
        logger.warning("estimate_bad_input", error=str(e))
        return jsonify({"error": "all readings must be numeric"}), 400

    aqi = predictor.estimate_aqi(Pollutants.from_mapping(readings), temperature, humidity, wind_speed)
    return jsonify({"aqi": aqi, "category": classify(aqi).to_dict()})


@app.route("/api/health")
def health():
    """Health check endpoint"""
    return jsonify({
        "status": "ok",
        "version": __version__,
        "config": settings.summary(),
        "timestamp": datetime.now().isoformat()
    })


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    debug = os.environ.get("FLASK_ENV") != "production"
    print("🚀 Starting BreatheIndia dashboard...")
    app.run(debug=debug, host="0.0.0.0", port=port)
