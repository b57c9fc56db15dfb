"""Error kinds surfaced by the feed cache, parser and layout engine."""


class SolarCanvasError(Exception):
    """Base class; request handlers turn these into a generic 500."""


class UpstreamUnavailable(SolarCanvasError):
    """The feed could not be fetched and nothing is cached yet."""


class MalformedFeed(SolarCanvasError):
    """The document is not a solar feed at all (bad XML or no solardata)."""


class RenderFailure(SolarCanvasError):
    """Drawing or PNG encoding failed."""
