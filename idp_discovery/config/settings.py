"""
Runtime configuration.

Values are read from the environment once at import time; tests override
attributes on the module-level ``config`` object directly.
"""

from __future__ import annotations

import os

DEFAULT_SESSION_NAMESPACE = "OpenID::Consumer::DiscoveredServices"
DEFAULT_SESSION_KEY_SUFFIX = "auth"


class Config:
    def __init__(self) -> None:
        # session key = "<namespace>::<suffix>"
        self.discovery_session_namespace = os.getenv(
            "DISCOVERY_SESSION_NAMESPACE", DEFAULT_SESSION_NAMESPACE
        )
        self.discovery_session_key_suffix = os.getenv(
            "DISCOVERY_SESSION_KEY_SUFFIX", DEFAULT_SESSION_KEY_SUFFIX
        )
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    def __repr__(self) -> str:
        return (
            f"Config(namespace={self.discovery_session_namespace!r}, "
            f"suffix={self.discovery_session_key_suffix!r}, log_level={self.log_level!r})"
        )


config = Config()
