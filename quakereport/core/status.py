"""Query state and result models - Pure data structures.

These describe the outcome of one fetch-parse cycle as handed to the
display layer. The orchestrator that produces them lives in the shell
side of the application.
"""

from dataclasses import dataclass, field
from enum import Enum

from quakereport.core.earthquake import Earthquake


class QueryState(Enum):
    """Lifecycle of an earthquake query: IDLE -> LOADING -> LOADED | FAILED."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class QueryStatus(Enum):
    """Signal the display layer uses to choose its empty-state message."""
    NO_CONNECTIVITY = "no_connectivity"
    LOADED_EMPTY = "loaded_empty"
    LOADED_NONEMPTY = "loaded_nonempty"
    FETCH_ERROR = "fetch_error"


@dataclass(frozen=True)
class QueryResult:
    """Result of a single fetch-parse cycle.

    Attributes:
        state: LOADED or FAILED
        status: Status signal for the display layer
        earthquakes: Parsed earthquakes in feed order (empty on failure)
        reason: Failure description, None on success
    """
    state: QueryState
    status: QueryStatus
    earthquakes: tuple[Earthquake, ...] = field(default_factory=tuple)
    reason: str | None = None

    @property
    def success(self) -> bool:
        """Returns True if the feed was fetched and parsed."""
        return self.state == QueryState.LOADED

    @property
    def summary(self) -> str:
        """Human-readable summary of the result."""
        if self.success:
            return f"Loaded {len(self.earthquakes)} earthquakes"
        return f"Query failed ({self.status.value}): {self.reason}"


def loaded(earthquakes: list[Earthquake]) -> QueryResult:
    """Build the result for a successful cycle.

    Pure function.
    """
    status = QueryStatus.LOADED_NONEMPTY if earthquakes else QueryStatus.LOADED_EMPTY
    return QueryResult(
        state=QueryState.LOADED,
        status=status,
        earthquakes=tuple(earthquakes),
    )


def failed(status: QueryStatus, reason: str) -> QueryResult:
    """Build the result for a failed cycle, always carrying no earthquakes.

    Pure function.
    """
    return QueryResult(
        state=QueryState.FAILED,
        status=status,
        reason=reason,
    )
