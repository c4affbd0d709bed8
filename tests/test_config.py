import unittest
from unittest.mock import AsyncMock, patch

import aiohttp
from tenacity import wait_none

from breathe.config import AQICN_URL, Settings
from breathe.http import FeedClient, FeedError


class TestSettings(unittest.TestCase):

    def test_01_defaults(self):
        settings = Settings.from_env({})
        self.assertEqual(settings.aqicn_url, AQICN_URL)
        self.assertEqual(settings.cache_ttl, 300)
        self.assertEqual(settings.retry_attempts, 1)
        self.assertEqual(settings.map_city_count, 10)
        self.assertEqual(settings.aqicn_token, "")

    def test_02_environment_overrides(self):
        settings = Settings.from_env({
            "AQICN_TOKEN": "abc",
            "AQICN_URL": "http://localhost:8080/",
            "RETRY_ATTEMPTS": "0",
            "CACHE_TTL_SECONDS": "60",
            "LOG_LEVEL": "debug",
        })
        self.assertEqual(settings.aqicn_token, "abc")
        self.assertEqual(settings.aqicn_url, "http://localhost:8080")
        self.assertEqual(settings.retry_attempts, 1)
        self.assertEqual(settings.cache_ttl, 60)
        self.assertEqual(settings.log_level, "DEBUG")

    def test_03_summary_hides_credentials(self):
        summary = Settings(aqicn_token="secret", openweather_api_key="").summary()
        self.assertEqual(summary["aqicn_token"], "configured")
        self.assertEqual(summary["openweather_api_key"], "missing")
        self.assertNotIn("secret", str(summary))


class TestFeedClientRetries(unittest.IsolatedAsyncioTestCase):

    async def test_01_no_retry_by_default(self):
        fetch = AsyncMock(side_effect=aiohttp.ClientConnectionError())
        with patch.object(FeedClient, "_get_json_once", fetch):
            client = FeedClient(Settings())
        with self.assertRaises(aiohttp.ClientConnectionError):
            await client.get_json("http://example.invalid")
        self.assertEqual(fetch.await_count, 1)

    async def test_02_retries_transport_errors(self):
        fetch = AsyncMock(side_effect=[aiohttp.ClientConnectionError(), aiohttp.ClientConnectionError(), {"ok": 1}])
        with patch.object(FeedClient, "_get_json_once", fetch):
            client = FeedClient(Settings(retry_attempts=3))
        get_json = client.get_json.retry_with(wait=wait_none())

        self.assertEqual(await get_json("http://example.invalid"), {"ok": 1})
        self.assertEqual(fetch.await_count, 3)

    async def test_03_feed_errors_are_not_retried(self):
        fetch = AsyncMock(side_effect=FeedError("bad payload"))
        with patch.object(FeedClient, "_get_json_once", fetch):
            client = FeedClient(Settings(retry_attempts=3))
        with self.assertRaises(FeedError):
            await client.get_json("http://example.invalid")
        self.assertEqual(fetch.await_count, 1)


if __name__ == '__main__':
    unittest.main(verbosity=2)
