"""
Time window evaluation on the relative dispatch clock.

The trajectory clock counts whole seconds from the planning start, while
assembly windows and delivery slots arrive as absolute instants. Windows are
converted once per task with :func:`to_relative_window` so that every
comparison happens on the same epoch: the lower bound is rounded up and the
upper bound rounded down, keeping the relative window inside the absolute
one.
"""

import math
from datetime import datetime
from typing import NamedTuple, Optional

from quicksilver.core_types import TimeWindow


class RelativeWindow(NamedTuple):
    start: int  # seconds since planning start
    end: int


class WindowCheck(NamedTuple):
    effective_time: int
    feasible: bool


def to_relative_window(
    window: Optional[TimeWindow], planning_start: datetime
) -> Optional[RelativeWindow]:
    if window is None:
        return None
    start = (window.start - planning_start).total_seconds()
    end = (window.end - planning_start).total_seconds()
    return RelativeWindow(start=math.ceil(start), end=math.floor(end))


def evaluate_window(arrival: int, window: Optional[RelativeWindow]) -> WindowCheck:
    """Effective event time and feasibility of arriving at ``arrival``.

    Arriving before the window opens means waiting for it; arriving after it
    closes is infeasible. Without a window every arrival is accepted as is.
    """
    if window is None:
        return WindowCheck(effective_time=arrival, feasible=True)
    effective = max(arrival, window.start)
    return WindowCheck(effective_time=effective, feasible=effective <= window.end)


def check_pickup(arrival: int, assembly: Optional[RelativeWindow]) -> WindowCheck:
    """Pickup start against the task's assembly window."""
    return evaluate_window(arrival, assembly)


def check_delivery(arrival: int, slot: Optional[RelativeWindow]) -> WindowCheck:
    """Delivery time against the task's delivery slot."""
    return evaluate_window(arrival, slot)
