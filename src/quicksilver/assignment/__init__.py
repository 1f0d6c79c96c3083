"""
Task-to-courier assignment: per-courier trajectories and the greedy dispatcher.
"""

from .greedy import DURATION_FALLBACKS, GreedyDispatcher, resolve_durations
from .trajectory import CourierState, PlannedVisit, Rejection

__all__ = [
    "DURATION_FALLBACKS",
    "CourierState",
    "GreedyDispatcher",
    "PlannedVisit",
    "Rejection",
    "resolve_durations",
]
