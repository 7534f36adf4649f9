from __future__ import annotations

from types import SimpleNamespace

import pytest

from idp_discovery.core.exceptions import MalformedSessionStateError
from idp_discovery.services.discovery.endpoint import ServiceEndpoint
from idp_discovery.services.discovery.queue import DiscoveredServices

STARTING_URL = "https://example.com/id"
YADIS_URL = "https://example.com/xrds"


def _make_endpoints(count: int) -> list[ServiceEndpoint]:
    return [
        ServiceEndpoint(server_url=f"https://op{i}.example.com/server", claimed_id=STARTING_URL)
        for i in range(count)
    ]


def _make_queue(count: int = 3) -> DiscoveredServices:
    return DiscoveredServices(STARTING_URL, YADIS_URL, _make_endpoints(count))


class TestAdvance:
    def test_each_endpoint_returned_once_in_order(self) -> None:
        endpoints = _make_endpoints(4)
        queue = DiscoveredServices(STARTING_URL, YADIS_URL, endpoints)

        handed_out = [queue.next() for _ in range(len(endpoints))]

        assert handed_out == endpoints
        assert queue.empty() is True
        assert queue.next() is None
        assert queue.current is None

    def test_current_tracks_last_advance(self) -> None:
        queue = _make_queue(2)
        assert queue.started() is False
        assert queue.current is None

        first = queue.next()

        assert queue.started() is True
        assert queue.current is first
        assert first not in queue.pending

    def test_empty_is_independent_of_current(self) -> None:
        queue = _make_queue(1)
        assert queue.empty() is False

        queue.next()

        assert queue.empty() is True
        assert queue.started() is True

    def test_copies_caller_list(self) -> None:
        endpoints = _make_endpoints(2)
        queue = DiscoveredServices(STARTING_URL, YADIS_URL, endpoints)

        endpoints.clear()

        assert len(queue) == 2
        assert queue.next() is not None

    def test_iteration_does_not_consume(self) -> None:
        queue = _make_queue(3)

        assert len(list(queue)) == 3
        assert len(queue) == 3


class TestForUrl:
    def test_matches_starting_and_yadis_url(self) -> None:
        queue = _make_queue()

        assert queue.for_url(STARTING_URL) is True
        assert queue.for_url(YADIS_URL) is True

    @pytest.mark.parametrize(
        "url",
        ["https://example.com/other", "https://example.com/id/", "", "HTTPS://EXAMPLE.COM/ID"],
    )
    def test_rejects_other_urls(self, url: str) -> None:
        assert _make_queue().for_url(url) is False


class TestSessionForm:
    def test_session_form_shape(self) -> None:
        data = _make_queue(2).to_session()

        assert set(data) == {"starting_url", "yadis_url", "services"}
        assert data["starting_url"] == STARTING_URL
        assert data["yadis_url"] == YADIS_URL
        assert [s["server_url"] for s in data["services"]] == [
            "https://op0.example.com/server",
            "https://op1.example.com/server",
        ]

    def test_roundtrip_keeps_pending_and_drops_current(self) -> None:
        queue = _make_queue(3)
        queue.next()

        rebuilt = DiscoveredServices.from_session(queue.to_session())

        assert rebuilt.starting_url == STARTING_URL
        assert rebuilt.yadis_url == YADIS_URL
        assert list(rebuilt.pending) == list(queue.pending)
        assert rebuilt.current is None
        assert rebuilt.started() is False

    def test_from_session_uses_endpoint_cls(self) -> None:
        built: list[dict[str, str]] = []

        class _Endpoint:
            @classmethod
            def from_session(cls, data: dict[str, str]) -> SimpleNamespace:
                built.append(data)
                return SimpleNamespace(**data)

        rebuilt = DiscoveredServices.from_session(
            {"starting_url": STARTING_URL, "yadis_url": YADIS_URL, "services": [{"x": "1"}]},
            endpoint_cls=_Endpoint,
        )

        assert built == [{"x": "1"}]
        assert rebuilt.next() == SimpleNamespace(x="1")

    @pytest.mark.parametrize(
        "data",
        [
            {"yadis_url": YADIS_URL, "services": []},
            {"starting_url": STARTING_URL, "yadis_url": YADIS_URL},
            {"starting_url": STARTING_URL, "yadis_url": YADIS_URL, "services": "nope"},
            ["not", "a", "mapping"],
        ],
    )
    def test_from_session_rejects_malformed_data(self, data: object) -> None:
        with pytest.raises(MalformedSessionStateError):
            DiscoveredServices.from_session(data)

    def test_from_session_rejects_bad_endpoint(self) -> None:
        with pytest.raises(MalformedSessionStateError):
            DiscoveredServices.from_session(
                {
                    "starting_url": STARTING_URL,
                    "yadis_url": YADIS_URL,
                    "services": [{"claimed_id": STARTING_URL}],
                }
            )

    def test_from_session_wraps_endpoint_errors(self) -> None:
        class _Endpoint:
            @classmethod
            def from_session(cls, data: dict[str, str]) -> None:
                raise KeyError("server_url")

        with pytest.raises(MalformedSessionStateError) as excinfo:
            DiscoveredServices.from_session(
                {"starting_url": STARTING_URL, "yadis_url": YADIS_URL, "services": [{}]},
                endpoint_cls=_Endpoint,
            )

        assert isinstance(excinfo.value.__cause__, KeyError)
