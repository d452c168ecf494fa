"""Tests for the Orchestrator module.

Tests the coordination between functional core and imperative shell.
Uses mocks for shell components to test orchestration logic.
"""

import json
import threading
from unittest.mock import Mock, patch

import pytest

from quakereport.orchestrator import EarthquakeQuery
from quakereport.core.config import Config
from quakereport.core.status import QueryResult, QueryState, QueryStatus
from quakereport.shell.usgs_client import (
    FetchConnectionError,
    FetchStatusError,
    FetchTimeoutError,
    USGSQueryParams,
)


def _feature(place, mag=4.5):
    properties = {
        "place": place,
        "time": 1703001600000,
        "url": f"https://earthquake.usgs.gov/earthquakes/eventpage/{place}",
    }
    if mag is not None:
        properties["mag"] = mag
    return {"type": "Feature", "properties": properties}


def _feed(*features) -> bytes:
    return json.dumps({"type": "FeatureCollection", "features": list(features)}).encode()


@pytest.fixture
def config():
    """Create a sample configuration."""
    return Config(min_magnitude="4.5", order_by="time", limit=20)


@pytest.fixture
def mock_usgs_client():
    """Create a mock USGS client returning a three-feature feed."""
    client = Mock()
    client.fetch_feed.return_value = _feed(
        _feature("5km N of Cairo, Egypt", mag=5.2),
        _feature("broken", mag=None),
        _feature("Pacific-Antarctic Ridge", mag=6.1),
    )
    return client


@pytest.fixture
def query(config, mock_usgs_client):
    """Create an orchestrator with mocked collaborators."""
    return EarthquakeQuery(
        config,
        usgs_client=mock_usgs_client,
        connectivity_check=lambda: True,
    )


class TestRun:
    """Tests for EarthquakeQuery.run()."""

    def test_starts_idle(self, query):
        assert query.state == QueryState.IDLE
        assert query.last_result is None

    def test_loads_valid_earthquakes_in_feed_order(self, query):
        """Three features, one missing mag: two records, feed order."""
        result = query.run()

        assert result.state == QueryState.LOADED
        assert result.status == QueryStatus.LOADED_NONEMPTY
        assert [e.location for e in result.earthquakes] == [
            "5km N of Cairo, Egypt",
            "Pacific-Antarctic Ridge",
        ]
        assert query.state == QueryState.LOADED
        assert query.last_result == result

    def test_builds_query_from_config(self, query, mock_usgs_client):
        query.run()

        mock_usgs_client.fetch_feed.assert_called_once_with(
            USGSQueryParams(min_magnitude="4.5", order_by="time", limit=20)
        )

    def test_empty_feed_is_loaded_empty(self, query, mock_usgs_client):
        mock_usgs_client.fetch_feed.return_value = _feed()

        result = query.run()

        assert result.state == QueryState.LOADED
        assert result.status == QueryStatus.LOADED_EMPTY
        assert result.earthquakes == ()

    def test_malformed_document_is_loaded_empty(self, query, mock_usgs_client):
        mock_usgs_client.fetch_feed.return_value = b"<html>oops</html>"

        result = query.run()

        assert result.status == QueryStatus.LOADED_EMPTY
        assert result.earthquakes == ()

    def test_no_connectivity_skips_fetch(self, config, mock_usgs_client):
        query = EarthquakeQuery(
            config,
            usgs_client=mock_usgs_client,
            connectivity_check=lambda: False,
        )

        result = query.run()

        assert result.state == QueryState.FAILED
        assert result.status == QueryStatus.NO_CONNECTIVITY
        assert result.earthquakes == ()
        mock_usgs_client.fetch_feed.assert_not_called()

    @pytest.mark.parametrize("error", [
        FetchTimeoutError("Request timed out"),
        FetchConnectionError("Name or service not known"),
        FetchStatusError(503),
    ])
    def test_fetch_errors_become_failed_results(self, query, mock_usgs_client, error):
        mock_usgs_client.fetch_feed.side_effect = error

        result = query.run()

        assert result.state == QueryState.FAILED
        assert result.status == QueryStatus.FETCH_ERROR
        assert result.earthquakes == ()
        assert result.reason
        assert query.state == QueryState.FAILED

    def test_status_error_reason_names_code(self, query, mock_usgs_client):
        mock_usgs_client.fetch_feed.side_effect = FetchStatusError(404)
        assert query.run().reason == "HTTP 404"

    def test_unexpected_error_does_not_escape(self, query, mock_usgs_client):
        mock_usgs_client.fetch_feed.side_effect = RuntimeError("boom")

        result = query.run()

        assert result.state == QueryState.FAILED
        assert result.status == QueryStatus.FETCH_ERROR
        assert query.state == QueryState.FAILED

    def test_does_not_retry(self, query, mock_usgs_client):
        mock_usgs_client.fetch_feed.side_effect = FetchTimeoutError("timed out")

        query.run()

        assert mock_usgs_client.fetch_feed.call_count == 1

    def test_publishes_result_to_queue(self, query):
        result = query.run()
        assert query.get_result(timeout=0) == result

    def test_deeply_nested_document_is_loaded_empty(self, query, mock_usgs_client):
        mock_usgs_client.fetch_feed.return_value = b"[" * 100000

        result = query.run()

        assert result.state == QueryState.LOADED
        assert result.status == QueryStatus.LOADED_EMPTY
        assert query.state == QueryState.LOADED

    def test_run_while_loading_returns_none(self, config):
        """A busy query is not reported as a failed fetch."""
        release = threading.Event()
        fetching = threading.Event()

        def slow_fetch(params):
            fetching.set()
            release.wait(timeout=5)
            return _feed(_feature("Chile"))

        client = Mock()
        client.fetch_feed.side_effect = slow_fetch
        query = EarthquakeQuery(config, usgs_client=client, connectivity_check=lambda: True)

        query.start()
        assert fetching.wait(timeout=5)

        assert query.run() is None
        assert query.state == QueryState.LOADING
        assert query.last_result is None

        release.set()
        result = query.get_result(timeout=5)

        assert result is not None
        assert result.state == QueryState.LOADED
        assert client.fetch_feed.call_count == 1

    def test_next_run_replaces_result(self, query, mock_usgs_client):
        query.run()
        mock_usgs_client.fetch_feed.return_value = _feed(_feature("Alaska"))

        result = query.run()

        assert [e.location for e in result.earthquakes] == ["Alaska"]
        assert query.last_result == result


class TestStart:
    """Tests for EarthquakeQuery.start()."""

    def test_delivers_exactly_one_result(self, query):
        assert query.start() is True

        result = query.get_result(timeout=5)

        assert result is not None
        assert result.status == QueryStatus.LOADED_NONEMPTY
        assert len(result.earthquakes) == 2
        assert query.get_result(timeout=0.1) is None

    def test_invokes_callback_once(self, query):
        received: list[QueryResult] = []
        done = threading.Event()

        def on_result(result):
            received.append(result)
            done.set()

        query.start(on_result)

        assert done.wait(timeout=5)
        assert len(received) == 1
        assert received[0] == query.get_result(timeout=5)

    def test_callback_error_does_not_break_delivery(self, query):
        def on_result(result):
            raise ValueError("display went away")

        query.start(on_result)

        assert query.get_result(timeout=5) is not None
        assert query.state == QueryState.LOADED

    def test_ignores_start_while_loading(self, config):
        """A second start() during a fetch does nothing."""
        release = threading.Event()
        fetching = threading.Event()

        def slow_fetch(params):
            fetching.set()
            release.wait(timeout=5)
            return _feed(_feature("Chile"))

        client = Mock()
        client.fetch_feed.side_effect = slow_fetch
        query = EarthquakeQuery(config, usgs_client=client, connectivity_check=lambda: True)

        assert query.start() is True
        assert fetching.wait(timeout=5)
        assert query.state == QueryState.LOADING

        assert query.start() is False
        assert query.run() is None
        assert query.state == QueryState.LOADING
        assert query.get_result(timeout=0) is None

        release.set()
        result = query.get_result(timeout=5)

        assert result is not None
        assert [e.location for e in result.earthquakes] == ["Chile"]
        assert client.fetch_feed.call_count == 1
        assert query.get_result(timeout=0.1) is None

    def test_can_restart_after_completion(self, query, mock_usgs_client):
        query.start()
        assert query.get_result(timeout=5) is not None

        assert query.start() is True
        assert query.get_result(timeout=5) is not None
        assert mock_usgs_client.fetch_feed.call_count == 2

    def test_thread_start_failure_is_delivered(self, query, mock_usgs_client):
        """A worker that cannot start still leaves LOADING."""
        received: list[QueryResult] = []

        with patch(
            "quakereport.orchestrator.threading.Thread.start",
            side_effect=RuntimeError("can't start new thread"),
        ):
            assert query.start(received.append) is False

        assert query.state == QueryState.FAILED
        result = query.get_result(timeout=0)
        assert result is not None
        assert result.status == QueryStatus.FETCH_ERROR
        assert result.reason == "can't start new thread"
        assert received == [result]
        mock_usgs_client.fetch_feed.assert_not_called()

        assert query.start() is True
        result = query.get_result(timeout=5)
        assert result is not None
        assert result.status == QueryStatus.LOADED_NONEMPTY

    def test_no_connectivity_is_delivered(self, config, mock_usgs_client):
        query = EarthquakeQuery(
            config,
            usgs_client=mock_usgs_client,
            connectivity_check=lambda: False,
        )

        query.start()
        result = query.get_result(timeout=5)

        assert result is not None
        assert result.status == QueryStatus.NO_CONNECTIVITY


class TestDefaults:
    """Tests for collaborators created by the orchestrator."""

    def test_creates_usgs_client_from_config(self):
        config = Config(base_url="https://example.test/query", request_timeout=7)

        query = EarthquakeQuery(config)

        assert query.usgs_client.base_url == "https://example.test/query"
        assert query.usgs_client.timeout == 7

    def test_each_instance_has_its_own_results(self, config):
        first = EarthquakeQuery(config, connectivity_check=lambda: True)
        second = EarthquakeQuery(config, connectivity_check=lambda: True)

        assert first.results is not second.results
