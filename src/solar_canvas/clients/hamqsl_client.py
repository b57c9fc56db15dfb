import logging

import aiohttp

from solar_canvas.config import HAMQSL_URL

logger = logging.getLogger(__name__)


async def fetch_solar_xml(url: str = HAMQSL_URL, timeout: float = 15.0) -> bytes:
    """
    Download the solar XML feed and return the undecoded body, so the
    parser honors the document's own encoding declaration.
    Raises aiohttp.ClientError on HTTP or network failure and
    asyncio.TimeoutError when the fetch exceeds `timeout` seconds.
    """
    client_timeout = aiohttp.ClientTimeout(total=timeout)
    async with aiohttp.ClientSession(timeout=client_timeout) as session:
        async with session.get(url) as response:
            response.raise_for_status()
            xml_data = await response.read()

    logger.info("Refreshed data from %s (%d bytes)", url, len(xml_data))
    return xml_data


def make_fetcher(url: str = HAMQSL_URL, timeout: float = 15.0):
    """Bind url/timeout into a zero-argument coroutine function for FeedCache."""
    async def fetcher() -> bytes:
        return await fetch_solar_xml(url, timeout=timeout)

    return fetcher
