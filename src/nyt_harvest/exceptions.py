"""
Exception hierarchy for nyt-harvest.

Fatal errors (transport, malformed top-level structure) derive from
HarvestError and abort a harvest. Per-page failures are not exceptions:
they are recorded as PageFailure results and skipped. A single document
that fails normalization is skipped the same way and its page recorded.
"""

from typing import Optional


class HarvestError(Exception):
    """Base class for all harvest errors."""


class TransportError(HarvestError):
    """
    Network/connection failure or a non-recoverable transport fault.

    Also raised by estimate_total_pages() when the initial request does
    not return a success status.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(HarvestError):
    """Successful transport, but the JSON body lacks an expected field."""


class ConfigurationError(HarvestError):
    """Required configuration (e.g. the API key) could not be resolved."""
