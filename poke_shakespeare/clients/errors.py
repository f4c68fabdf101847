from poke_shakespeare.models import ErrorKind


class UpstreamError(Exception):
    """Base class for failures reported by the external API clients.

    Every subclass carries exactly one ErrorKind. The detail is meant for logs
    only and is never returned to API consumers.
    """

    kind: ErrorKind

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class SpeciesNotFound(UpstreamError):
    kind = ErrorKind.NOT_FOUND


class UpstreamUnavailable(UpstreamError):
    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class RateLimited(UpstreamError):
    kind = ErrorKind.RATE_LIMITED


class UpstreamTimeout(UpstreamError):
    kind = ErrorKind.TIMEOUT
