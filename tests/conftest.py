"""Shared fixtures for the Quicksilver test suite."""

import logging
import os
from datetime import datetime, timedelta, timezone

import pytest

from quicksilver.core_types import (
    Capacity,
    Coordinates,
    Courier,
    DispatchContext,
    Task,
    TimeWindow,
)
from quicksilver.utils.geodistance import HaversineTravelTime
from quicksilver.utils.logging import LogLevel, QuicksilverLogger


@pytest.fixture(autouse=True)
def _isolate_logging():
    """Restore logger level, env vars and root handlers touched by setup_logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    root_level = root.level
    effective = os.environ.pop("QUICKSILVER_EFFECTIVE_LOG_LEVEL", None)
    yield
    QuicksilverLogger.set_level(LogLevel.NORMAL)
    os.environ.pop("QUICKSILVER_EFFECTIVE_LOG_LEVEL", None)
    if effective is not None:
        os.environ["QUICKSILVER_EFFECTIVE_LOG_LEVEL"] = effective
    root.handlers[:] = handlers
    root.setLevel(root_level)


@pytest.fixture
def now():
    return datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def context(now):
    return DispatchContext(planning_start=now, travel_time=HaversineTravelTime())


@pytest.fixture
def moscow_courier():
    return Courier(
        guid="c1",
        start_point=Coordinates(lat=55.75, lon=37.62),
        capacity=Capacity(volume=10, weight=10),
        pickup_duration=120,
        drop_duration=60,
    )


@pytest.fixture
def nearby_task(now):
    """A task whose sender is ~630 m (150 s) from the Moscow courier."""
    return Task(
        guid="t1",
        sender_point=Coordinates(lat=55.75, lon=37.63),
        recipient_point=Coordinates(lat=55.76, lon=37.64),
        capacity=Capacity(volume=2, weight=3),
        assembly=TimeWindow(start=now, end=now + timedelta(hours=2)),
        slot=TimeWindow(start=now + timedelta(minutes=30), end=now + timedelta(hours=3)),
    )
