from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urldefrag

from idp_discovery.core.exceptions import MalformedSessionStateError

OPENID_1_0_TYPE = "http://openid.net/signon/1.0"
OPENID_1_1_TYPE = "http://openid.net/signon/1.1"
OPENID_2_0_TYPE = "http://specs.openid.net/auth/2.0/signon"
OPENID_IDP_2_0_TYPE = "http://specs.openid.net/auth/2.0/server"


@dataclass
class ServiceEndpoint:
    """One discovered provider endpoint for a claimed identifier."""

    server_url: str | None = None
    claimed_id: str | None = None
    type_uris: list[str] = field(default_factory=list)
    local_id: str | None = None
    canonical_id: str | None = None
    used_yadis: bool = False
    display_identifier: str | None = None

    def supports_type(self, type_uri: str) -> bool:
        return type_uri in self.type_uris

    def is_op_identifier(self) -> bool:
        return OPENID_IDP_2_0_TYPE in self.type_uris

    def get_local_id(self) -> str | None:
        """Identifier to send to the provider: the delegate if any, else the claimed id."""
        return self.local_id or self.claimed_id

    def get_display_identifier(self) -> str | None:
        if self.display_identifier is not None:
            return self.display_identifier
        if self.claimed_id is None:
            return None
        return urldefrag(self.claimed_id)[0]

    def to_session(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "claimed_id": self.claimed_id,
            "server_url": self.server_url,
            "type_uris": list(self.type_uris),
            "local_id": self.local_id,
            "canonical_id": self.canonical_id,
            "used_yadis": self.used_yadis,
            "display_identifier": self.display_identifier,
        }
        # drop Nones for a compact session payload
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_session(cls, data: Any) -> "ServiceEndpoint":
        if not isinstance(data, Mapping):
            raise MalformedSessionStateError(
                f"Endpoint session data must be a mapping, got {type(data).__name__}"
            )
        server_url = data.get("server_url")
        if not isinstance(server_url, str) or not server_url:
            raise MalformedSessionStateError("Endpoint session data is missing server_url")

        type_uris = data.get("type_uris") or []
        if not isinstance(type_uris, (list, tuple)):
            raise MalformedSessionStateError("Endpoint type_uris must be a list")

        return cls(
            server_url=server_url,
            claimed_id=data.get("claimed_id"),
            type_uris=[str(t) for t in type_uris],
            local_id=data.get("local_id"),
            canonical_id=data.get("canonical_id"),
            used_yadis=bool(data.get("used_yadis", False)),
            display_identifier=data.get("display_identifier"),
        )
