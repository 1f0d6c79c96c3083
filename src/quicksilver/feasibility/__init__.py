"""
Stateless feasibility services used by the assigner: capacity and time windows.
"""

from .capacity import add_capacity, can_fit
from .time_windows import (
    RelativeWindow,
    WindowCheck,
    check_delivery,
    check_pickup,
    evaluate_window,
    to_relative_window,
)

__all__ = [
    "RelativeWindow",
    "WindowCheck",
    "add_capacity",
    "can_fit",
    "check_delivery",
    "check_pickup",
    "evaluate_window",
    "to_relative_window",
]
