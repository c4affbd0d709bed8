# ===================== API CONFIG =====================
import os
from dataclasses import dataclass, asdict

# AQICN (WAQI) API for real-time current AQI and station search
AQICN_URL = "https://api.waqi.info"

# OpenWeatherMap current weather API
OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, loaded once at startup and passed to the gateway"""
    aqicn_token: str = ""
    openweather_api_key: str = ""
    aqicn_url: str = AQICN_URL
    openweather_url: str = OPENWEATHER_URL
    request_timeout: float = 10.0
    cache_ttl: int = 300  # 5 minutes
    retry_attempts: int = 1
    max_concurrency: int = 5
    map_city_count: int = 10
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ=None):
        """Build settings from environment variables"""
        env = os.environ if environ is None else environ
        return cls(
            aqicn_token=env.get("AQICN_TOKEN", ""),
            openweather_api_key=env.get("OPENWEATHER_API_KEY", ""),
            aqicn_url=env.get("AQICN_URL", AQICN_URL).rstrip("/"),
            openweather_url=env.get("OPENWEATHER_URL", OPENWEATHER_URL),
            request_timeout=float(env.get("REQUEST_TIMEOUT_SECONDS", 10)),
            cache_ttl=int(env.get("CACHE_TTL_SECONDS", 300)),
            retry_attempts=max(1, int(env.get("RETRY_ATTEMPTS", 1))),
            max_concurrency=max(1, int(env.get("MAP_CONCURRENCY", 5))),
            map_city_count=int(env.get("MAP_CITY_COUNT", 10)),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )

    def summary(self):
        """Configuration without credentials, safe to log or expose"""
        data = asdict(self)
        data["aqicn_token"] = "configured" if self.aqicn_token else "missing"
        data["openweather_api_key"] = "configured" if self.openweather_api_key else "missing"
        return data
