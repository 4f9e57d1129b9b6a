"""
Error Taxonomy
==============

Infrastructure errors (configuration, static server, browser launch) are fatal
to the whole run. Route errors are contained by the batch that raised them.
"""


class PrerenderError(Exception):
    """Base class for all pre-rendering errors."""

    pass


class ConfigurationError(PrerenderError):
    """Render configuration is missing, unparseable or invalid."""

    pass


class ServerStartError(PrerenderError):
    """Static server could not be bound or started."""

    pass


class BrowserLaunchError(PrerenderError):
    """Headless browser could not be launched."""

    pass


class RouteError(PrerenderError):
    """Failure scoped to a single route."""

    def __init__(self, route: str, message: str):
        super().__init__(message)
        self.route = route


class RouteRenderError(RouteError):
    """Navigation or DOM serialization failed for a route."""

    pass


class OutputWriteError(RouteError):
    """Rendered HTML could not be written to disk."""

    pass
