"""Orchestrator - Wires Functional Core and Imperative Shell.

This module coordinates one fetch -> parse -> deliver cycle: it checks
connectivity, fetches the feed through the USGS client, parses it with
the pure core parser and publishes exactly one QueryResult.

The fetch runs on a background thread. The result crosses back to the
consumer through a thread-safe queue; the consumer reads it on its own
thread with get_result().
"""

import logging
import queue
import threading
from typing import Callable

from quakereport.core.config import Config
from quakereport.core.earthquake import parse_feed
from quakereport.core.status import (
    QueryResult,
    QueryState,
    QueryStatus,
    failed,
    loaded,
)
from quakereport.shell.connectivity import has_network_connection
from quakereport.shell.usgs_client import (
    FetchError,
    FetchStatusError,
    USGSClient,
    USGSQueryParams,
)


logger = logging.getLogger(__name__)


ResultCallback = Callable[[QueryResult], None]


class EarthquakeQuery:
    """Coordinates a single earthquake query for its owner.

    This class wires together:
    - Connectivity probe (is the feed host reachable?)
    - USGS client (fetches the raw feed)
    - Core parser (turns the feed into Earthquakes)

    Each instance is created and owned by the caller that displays its
    results. Only one cycle runs at a time: start() while a cycle is
    loading is ignored.
    """

    def __init__(
        self,
        config: Config,
        usgs_client: USGSClient | None = None,
        connectivity_check: Callable[[], bool] | None = None,
    ) -> None:
        """Initialize orchestrator with configuration.

        Args:
            config: Application configuration
            usgs_client: USGS client (created if not provided)
            connectivity_check: Returns True when the network is usable
                (probes the configured feed host if not provided)
        """
        self.config = config
        self.usgs_client = usgs_client or USGSClient(
            base_url=config.base_url,
            timeout=config.request_timeout,
        )
        self.connectivity_check = connectivity_check or (
            lambda: has_network_connection(
                config.connectivity_host,
                config.connectivity_port,
            )
        )
        self.results: queue.Queue[QueryResult] = queue.Queue()

        self._lock = threading.Lock()
        self._state = QueryState.IDLE
        self._last_result: QueryResult | None = None

    @property
    def state(self) -> QueryState:
        """Current lifecycle state."""
        with self._lock:
            return self._state

    @property
    def last_result(self) -> QueryResult | None:
        """Result of the most recent completed cycle."""
        with self._lock:
            return self._last_result

    def _build_query(self) -> USGSQueryParams:
        return USGSQueryParams(
            min_magnitude=self.config.min_magnitude,
            order_by=self.config.order_by,
            limit=self.config.limit,
        )

    def _begin(self) -> bool:
        """Move to LOADING unless a cycle is already in flight."""
        with self._lock:
            if self._state == QueryState.LOADING:
                return False
            self._state = QueryState.LOADING
            return True

    def _fetch_and_parse(self) -> QueryResult:
        """Run the fetch and parse steps, converting failures to results."""
        if not self.connectivity_check():
            logger.warning("No network connection, skipping fetch")
            return failed(QueryStatus.NO_CONNECTIVITY, "No network connection")

        try:
            raw = self.usgs_client.fetch_feed(self._build_query())
        except FetchStatusError as e:
            return failed(QueryStatus.FETCH_ERROR, f"HTTP {e.status_code}")
        except FetchError as e:
            return failed(QueryStatus.FETCH_ERROR, str(e) or type(e).__name__)

        # Pure core function
        return loaded(parse_feed(raw))

    def _finish(
        self,
        result: QueryResult,
        on_result: ResultCallback | None = None,
    ) -> QueryResult:
        """Record the result, leave LOADING and publish exactly once."""
        with self._lock:
            self._state = result.state
            self._last_result = result

        logger.info("Earthquake query finished: %s", result.summary)

        self.results.put(result)

        if on_result is not None:
            try:
                on_result(result)
            except Exception:
                logger.exception("Result callback raised")

        return result

    def _cycle(self, on_result: ResultCallback | None = None) -> QueryResult:
        try:
            result = self._fetch_and_parse()
        except Exception as e:
            # Never leave the query stuck in LOADING
            logger.exception("Unexpected error during earthquake query")
            result = failed(QueryStatus.FETCH_ERROR, str(e))
        return self._finish(result, on_result)

    def run(self) -> QueryResult | None:
        """Run one fetch-parse cycle on the calling thread.

        The result is also published to the results queue.

        Returns:
            QueryResult describing the outcome, or None if a cycle is
            already in flight (nothing is fetched or published)
        """
        if not self._begin():
            logger.warning("Earthquake query already loading, ignoring run()")
            return None

        return self._cycle()

    def start(self, on_result: ResultCallback | None = None) -> bool:
        """Start one fetch-parse cycle on a background thread.

        Does not block. The result is put on the results queue and, if
        given, passed to on_result from the worker thread.

        Args:
            on_result: Optional callback receiving the QueryResult

        Returns:
            True if a cycle was started, False if one is already loading
            or the worker thread could not be started
        """
        if not self._begin():
            logger.warning("Earthquake query already loading, ignoring start()")
            return False

        logger.info("Starting earthquake query")

        worker = threading.Thread(
            target=self._cycle,
            args=(on_result,),
            name="earthquake-query",
            daemon=True,
        )
        try:
            worker.start()
        except RuntimeError as e:
            logger.error("Could not start earthquake query thread: %s", e)
            self._finish(failed(QueryStatus.FETCH_ERROR, str(e)), on_result)
            return False

        return True

    def get_result(self, timeout: float | None = None) -> QueryResult | None:
        """Wait for the next published result.

        Call this from the consuming (display) thread.

        Args:
            timeout: Seconds to wait, None to wait indefinitely

        Returns:
            The next QueryResult, or None if none arrived in time
        """
        try:
            return self.results.get(timeout=timeout)
        except queue.Empty:
            return None
