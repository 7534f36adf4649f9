"""Errors raised by the discovery session layer."""

from __future__ import annotations


class DiscoveryError(Exception):
    """Base class for discovery session errors."""


class ManagerExistsError(DiscoveryError):
    """A discovered-services queue was about to be created while one is already stored."""

    def __init__(self, yadis_url: str, session_key: str) -> None:
        self.yadis_url = yadis_url
        self.session_key = session_key
        super().__init__(f"There is already a manager for {yadis_url}")


class MalformedSessionStateError(DiscoveryError):
    """
    Stored session state could not be turned back into a queue.

    Callers may treat this as "start over" (e.g. ``cleanup(force=True)`` and
    retry) instead of a hard failure.
    """

    def __init__(self, message: str, *, session_key: str | None = None) -> None:
        self.session_key = session_key
        super().__init__(message)
