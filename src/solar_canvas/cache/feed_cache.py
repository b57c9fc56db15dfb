import logging
import time
from typing import Awaitable, Callable, Optional, Union

from solar_canvas.core.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_SECONDS = 5 * 60

RawPayload = Union[str, bytes]


class FeedCache:
    """Last successfully fetched feed payload, shared by all requests.

    Stale-while-error: once a payload exists, a failed refresh logs and
    serves the old payload. Concurrent refreshes are allowed to race; the
    last successful fetch wins.
    """

    def __init__(
        self,
        fetcher: Callable[[], Awaitable[RawPayload]],
        refresh_interval: float = DEFAULT_REFRESH_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.fetcher = fetcher
        self.refresh_interval = refresh_interval
        self.clock = clock
        self.payload: Optional[RawPayload] = None
        self.fetched_at: Optional[float] = None

    def is_due(self) -> bool:
        """True when nothing is cached or the cached payload has expired."""
        if self.payload is None or self.fetched_at is None:
            return True
        return self.clock() - self.fetched_at > self.refresh_interval

    async def get_payload(self) -> RawPayload:
        """Return the cached payload, refreshing it first when due.

        Raises UpstreamUnavailable only if the fetch fails and no payload
        has ever been fetched.
        """
        if not self.is_due():
            return self.payload

        try:
            payload = await self.fetcher()
        except Exception as e:
            if self.payload is None:
                raise UpstreamUnavailable(f"Feed fetch failed and no cached copy exists: {e!r}") from e
            logger.warning("Feed fetch failed, using stale data from %.0fs ago: %r",
                           self.clock() - self.fetched_at, e)
            return self.payload

        self.payload = payload
        self.fetched_at = self.clock()
        return payload
