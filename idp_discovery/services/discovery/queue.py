from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, ValidationError

from idp_discovery.core.exceptions import MalformedSessionStateError

from .endpoint import ServiceEndpoint


class SessionSerializable(Protocol):
    def to_session(self) -> dict[str, Any]: ...


class DiscoveredServicesPayload(BaseModel):
    """Shape of a queue's session form."""

    model_config = ConfigDict(extra="ignore")

    starting_url: str
    yadis_url: str | None = None
    services: list[Any]


class DiscoveredServices:
    """
    Ordered, consumable list of endpoints discovered for one identifier.

    ``starting_url`` is what the caller asked for, ``yadis_url`` is what
    discovery resolved it to. Endpoints are handed out front to back by
    :meth:`next`; the last one handed out is kept as ``current``.
    """

    def __init__(
        self,
        starting_url: str,
        yadis_url: str | None,
        services: Sequence[SessionSerializable],
    ) -> None:
        self._starting_url = starting_url
        self._yadis_url = yadis_url
        self._services: list[Any] = list(services)
        self.current: Any | None = None

    @property
    def starting_url(self) -> str:
        return self._starting_url

    @property
    def yadis_url(self) -> str | None:
        return self._yadis_url

    @property
    def pending(self) -> tuple[Any, ...]:
        return tuple(self._services)

    def next(self) -> Any | None:
        """Pop the first pending endpoint and make it current."""
        self.current = self._services.pop(0) if self._services else None
        return self.current

    def for_url(self, url: str) -> bool:
        return url in (self._starting_url, self._yadis_url)

    def started(self) -> bool:
        return self.current is not None

    def empty(self) -> bool:
        return not self._services

    def __len__(self) -> int:
        return len(self._services)

    def __iter__(self) -> Iterator[Any]:
        return iter(tuple(self._services))

    def __repr__(self) -> str:
        return (
            f"<DiscoveredServices starting_url={self._starting_url!r} "
            f"yadis_url={self._yadis_url!r} pending={len(self._services)} "
            f"started={self.started()}>"
        )

    def to_session(self) -> dict[str, Any]:
        # current is not persisted
        return {
            "starting_url": self._starting_url,
            "yadis_url": self._yadis_url,
            "services": [service.to_session() for service in self._services],
        }

    @classmethod
    def from_session(
        cls,
        data: Any,
        endpoint_cls: Any = ServiceEndpoint,
    ) -> "DiscoveredServices":
        """
        Rebuild a queue from its session form.

        The rebuilt queue never remembers ``current``, only what was still
        pending when it was stored.

        Raises:
            MalformedSessionStateError: the mapping or one of its endpoints is invalid
        """
        if isinstance(data, Mapping):
            data = dict(data)
        try:
            payload = DiscoveredServicesPayload.model_validate(data)
        except ValidationError as exc:
            raise MalformedSessionStateError(
                f"Invalid discovered services session data: {exc.error_count()} error(s)"
            ) from exc

        services = []
        for index, raw in enumerate(payload.services):
            try:
                services.append(endpoint_cls.from_session(raw))
            except MalformedSessionStateError:
                raise
            except (KeyError, TypeError, ValueError) as exc:
                raise MalformedSessionStateError(
                    f"Invalid endpoint at index {index}: {type(exc).__name__}"
                ) from exc

        return cls(payload.starting_url, payload.yadis_url, services)
