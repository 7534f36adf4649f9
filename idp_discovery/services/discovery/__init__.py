"""
Discovery session domain

This package centralizes:
- discovered endpoint values and their session form
- the ordered queue of endpoints still to try for an identifier
- the manager that persists that queue across requests in a session store
"""

from idp_discovery.services.discovery.endpoint import (
    OPENID_1_0_TYPE,
    OPENID_1_1_TYPE,
    OPENID_2_0_TYPE,
    OPENID_IDP_2_0_TYPE,
    ServiceEndpoint,
)
from idp_discovery.services.discovery.manager import (
    DiscoverFunc,
    DiscoveryManager,
    StoredState,
    classify_stored_value,
)
from idp_discovery.services.discovery.queue import DiscoveredServices
from idp_discovery.services.discovery.session_store import (
    MappingSessionStore,
    SessionStore,
    SQLAlchemySessionStore,
)

__all__ = [
    "DiscoveryManager",
    "DiscoveredServices",
    # endpoint
    "ServiceEndpoint",
    "OPENID_1_0_TYPE",
    "OPENID_1_1_TYPE",
    "OPENID_2_0_TYPE",
    "OPENID_IDP_2_0_TYPE",
    # protocols / state
    "DiscoverFunc",
    "StoredState",
    "classify_stored_value",
    # stores
    "SessionStore",
    "MappingSessionStore",
    "SQLAlchemySessionStore",
]
