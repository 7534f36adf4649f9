from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from idp_discovery.config.settings import config
from idp_discovery.core.exceptions import ManagerExistsError, MalformedSessionStateError
from idp_discovery.core.logger import logger

from .endpoint import ServiceEndpoint
from .queue import DiscoveredServices
from .session_store import MappingSessionStore, SessionStore


@runtime_checkable
class DiscoverFunc(Protocol):
    def __call__(self, url: str) -> tuple[str, Sequence[ServiceEndpoint]]: ...


class StoredState(str, Enum):
    """What was found under the session key."""

    ABSENT = "absent"
    RAW_MAPPING = "raw_mapping"
    TYPED_QUEUE = "typed_queue"


def classify_stored_value(value: Any) -> StoredState:
    if value is None:
        return StoredState.ABSENT
    if isinstance(value, DiscoveredServices):
        return StoredState.TYPED_QUEUE
    if isinstance(value, Mapping):
        return StoredState.RAW_MAPPING
    raise MalformedSessionStateError(
        f"Unsupported discovered services session value: {type(value).__name__}"
    )


class DiscoveryManager:
    """
    Calls discovery and tracks which endpoints have already been attempted.

    One manager is bound to one session, one identifier URL and one session
    key. Every public operation is a single load / mutate / store over that
    key; two concurrent requests on the same session and suffix can lose an
    update (the later store wins).

    Usage::

        manager = DiscoveryManager(session, user_url)
        endpoint = manager.get_next_service(discover)
        if endpoint is None:
            ...  # nothing left to try
        ...
        # when the provider redirects back
        endpoint = DiscoveryManager(session, claimed_id).cleanup()
    """

    def __init__(
        self,
        session: SessionStore | MutableMapping[str, Any],
        url: str,
        session_key_suffix: str | None = None,
        *,
        endpoint_cls: Any = ServiceEndpoint,
    ) -> None:
        if not isinstance(session, SessionStore) and isinstance(session, MutableMapping):
            session = MappingSessionStore(session)
        self.session: SessionStore = session
        self.url = url
        self.session_key_suffix = session_key_suffix or config.discovery_session_key_suffix
        self.endpoint_cls = endpoint_cls

    @property
    def session_key(self) -> str:
        return f"{config.discovery_session_namespace}::{self.session_key_suffix}"

    def get_next_service(self, discover: DiscoverFunc) -> Any | None:
        """
        Return the next endpoint to try for ``self.url``, or None to give up.

        Discovery only runs when no usable queue is stored. Errors raised by
        ``discover`` propagate unchanged and leave the session untouched.
        """
        manager = self.get_manager()
        if manager is not None and manager.empty():
            self.destroy_manager()
            manager = None

        if manager is None:
            logger.debug("[DiscoveryManager] running discovery for %s", self.url)
            yadis_url, services = discover(self.url)
            manager = self.create_manager(yadis_url, services)

        if manager is None:
            logger.debug("[DiscoveryManager] no endpoints discovered for %s", self.url)
            return None

        service = manager.next()
        self.store(manager)
        return service

    def cleanup(self, force: bool = False) -> Any | None:
        """
        Drop the stored queue and return its current endpoint.

        With ``force`` the stored queue is dropped even when it belongs to
        another URL.
        """
        manager = self.get_manager(force)
        if manager is None:
            return None
        service = manager.current
        self.destroy_manager(force)
        return service

    def get_manager(self, force: bool = False) -> DiscoveredServices | None:
        manager = self.load()
        if manager is None or force or manager.for_url(self.url):
            return manager
        return None

    def create_manager(
        self, yadis_url: str, services: Sequence[Any]
    ) -> DiscoveredServices | None:
        if self.get_manager() is not None:
            raise ManagerExistsError(yadis_url, self.session_key)
        if not services:
            return None
        manager = DiscoveredServices(self.url, yadis_url, services)
        self.store(manager)
        logger.debug(
            "[DiscoveryManager] created queue for %s (yadis_url=%s, endpoints=%s)",
            self.url,
            yadis_url,
            len(manager),
        )
        return manager

    def destroy_manager(self, force: bool = False) -> None:
        if self.get_manager(force) is not None:
            self.session.delete(self.session_key)
            logger.debug("[DiscoveryManager] destroyed queue under %s", self.session_key)

    def store(self, manager: DiscoveredServices) -> None:
        # plain mapping keeps the session independent of serialization strategy
        self.session.set(self.session_key, manager.to_session())

    def load(self) -> DiscoveredServices | None:
        value = self.session.get(self.session_key)
        try:
            state = classify_stored_value(value)
            if state is StoredState.ABSENT:
                return None
            if state is StoredState.TYPED_QUEUE:
                # already rebuilt upstream (legacy pickled sessions)
                return value
            return DiscoveredServices.from_session(value, endpoint_cls=self.endpoint_cls)
        except MalformedSessionStateError as exc:
            exc.session_key = self.session_key
            logger.warning(
                "[DiscoveryManager] malformed session state under %s: %s",
                self.session_key,
                exc,
            )
            raise
