# ===================== ASYNC HELPERS =====================

import aiohttp
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = structlog.get_logger()


class FeedError(Exception):
    """A feed answered, but not with usable data"""


class FeedClient:
    """
    Shared aiohttp session for the third-party feeds.

    Requests are retried with exponential backoff on transport errors only,
    up to `settings.retry_attempts` attempts (1 = no retry).
    """

    def __init__(self, settings, session=None):
        self.settings = settings
        self._session = session
        self._owns_session = session is None
        self.get_json = retry(
            stop=stop_after_attempt(settings.retry_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type(aiohttp.ClientError),
            reraise=True,
        )(self._get_json_once)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    @property
    def session(self):
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.request_timeout)
            )
            self._owns_session = True
        return self._session

    async def _get_json_once(self, url, params=None):
        """Async URL fetcher; raises on transport errors and non-2xx responses"""
        async with self.session.get(url, params=params) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    async def close(self):
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
