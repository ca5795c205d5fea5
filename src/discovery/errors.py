"""Failure taxonomy for the discovery pipeline.

None of these are fatal to a caller-visible operation: the cache and the
aggregator catch them and degrade to fewer results; tools turn
ConfigurationMissing into an "unavailable" answer.
"""


class DiscoveryError(Exception):
    """Base for discovery failures."""


class SourceUnavailable(DiscoveryError):
    """A collaborator (channel reader, transport) is missing or unreachable."""


class BackendFailure(DiscoveryError):
    """One search backend errored or answered with a non-success response."""

    def __init__(self, backend: str, reason: str):
        super().__init__(f"{backend}: {reason}")
        self.backend = backend
        self.reason = reason


class ConfigurationMissing(DiscoveryError):
    """Required settings for a collaborator are not configured."""

    def __init__(self, setting: str, hint: str = ""):
        message = f"{setting} is not configured"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)
        self.setting = setting
