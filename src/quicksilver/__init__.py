"""Quicksilver: single-pass courier dispatch with capacity and time windows."""

__version__ = "0.1.0"

# Main API
from .api import load_request, solve
from .assignment import CourierState, GreedyDispatcher

# Core types
from .config.params import QuicksilverParams
from .core_types import (
    Capacity,
    Coordinates,
    Courier,
    DispatchRequest,
    DispatchSolution,
    InvalidRequestError,
    Route,
    Task,
    TimeWindow,
)
from .feasibility import add_capacity, can_fit
from .interfaces import Dispatcher, TravelTimeEstimator

# Extension system
from .registry import register_dispatcher, register_travel_time_estimator
from .utils.geodistance import haversine_distance, travel_time_seconds

__all__ = [
    # Version
    "__version__",
    # Main API
    "solve",
    "load_request",
    # Building blocks
    "haversine_distance",
    "travel_time_seconds",
    "add_capacity",
    "can_fit",
    "CourierState",
    "GreedyDispatcher",
    # Types
    "QuicksilverParams",
    "Capacity",
    "Coordinates",
    "Courier",
    "DispatchRequest",
    "DispatchSolution",
    "InvalidRequestError",
    "Route",
    "Task",
    "TimeWindow",
    # Extensions
    "register_dispatcher",
    "register_travel_time_estimator",
    "Dispatcher",
    "TravelTimeEstimator",
]
