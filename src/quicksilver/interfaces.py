"""Protocol definitions for pluggable components in Quicksilver."""

from typing import Protocol

from quicksilver.core_types import (
    Coordinates,
    DispatchContext,
    DispatchRequest,
    DispatchSolution,
)


class TravelTimeEstimator(Protocol):
    """Protocol for travel time models between two points."""

    def __init__(self, avg_speed_mps: float) -> None: ...

    def travel_time(self, origin: Coordinates, destination: Coordinates) -> int:
        """Returns whole seconds needed to travel from origin to destination."""
        ...


class Dispatcher(Protocol):
    """Protocol for task-to-courier assignment algorithms.

    Implementations must not keep state between calls: every ``solve`` builds
    its own per-courier state from the request.
    """

    def solve(
        self, request: DispatchRequest, *, context: DispatchContext
    ) -> DispatchSolution:
        """Assign the request's tasks to its couriers."""
        ...

    @property
    def name(self) -> str:
        """Dispatcher name for logging."""
        ...
