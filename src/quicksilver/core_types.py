import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from quicksilver.utils.time_measurement import TimeMeasurement

if TYPE_CHECKING:
    from quicksilver.interfaces import TravelTimeEstimator


class InvalidRequestError(ValueError):
    """Raised when a dispatch request is structurally incomplete or malformed."""


def parse_timestamp(value: Any, field_name: str = "timestamp") -> datetime:
    """Parse an ISO-8601 instant. Naive values are interpreted as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError as exc:
            raise InvalidRequestError(
                f"Invalid ISO-8601 timestamp for '{field_name}': {value!r}"
            ) from exc
    else:
        raise InvalidRequestError(
            f"Expected an ISO-8601 string for '{field_name}', got {type(value).__name__}"
        )
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


def _require(data: Dict[str, Any], key: str, owner: str) -> Any:
    value = data.get(key)
    if value is None:
        raise InvalidRequestError(f"{owner} is missing required field '{key}'")
    return value


def _optional_seconds(data: Dict[str, Any], key: str, owner: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRequestError(f"{owner}: '{key}' must be a number of seconds")
    # Also rejects NaN and infinities
    if isinstance(value, float) and not value.is_integer():
        raise InvalidRequestError(f"{owner}: '{key}' must be a whole number of seconds")
    return int(value)


def _finite(value: Any, key: str, owner: str) -> float:
    """``value`` as a float, rejecting NaN and infinities."""
    number = float(value)
    if not math.isfinite(number):
        raise InvalidRequestError(f"{owner}: '{key}' must be a finite number")
    return number


@dataclass(frozen=True)
class Coordinates:
    """A point on the Earth's surface, in degrees."""

    lat: float
    lon: float

    @staticmethod
    def from_dict(data: Any, owner: str = "point") -> "Coordinates":
        if not isinstance(data, dict):
            raise InvalidRequestError(f"{owner} must be an object with 'lat' and 'lon'")
        try:
            lat = _finite(data["lat"], "lat", owner)
            lon = _finite(data["lon"], "lon", owner)
        except InvalidRequestError:
            raise
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            raise InvalidRequestError(
                f"{owner} must have numeric 'lat' and 'lon'"
            ) from exc
        return Coordinates(lat=lat, lon=lon)

    def as_tuple(self) -> tuple[float, float]:
        return (self.lat, self.lon)

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


@dataclass(frozen=True)
class Capacity:
    """Cargo volume and weight.

    Used both for a courier's limit, a task's demand and the capacity a courier
    has used so far. Fields are expected to be non-negative.
    """

    volume: float = 0.0
    weight: float = 0.0

    @staticmethod
    def from_dict(data: Any, owner: str = "capacity") -> "Capacity":
        if not isinstance(data, dict):
            raise InvalidRequestError(f"{owner} must be an object with 'volume' and 'weight'")
        try:
            return Capacity(
                volume=_finite(data.get("volume", 0.0), "volume", owner),
                weight=_finite(data.get("weight", 0.0), "weight", owner),
            )
        except InvalidRequestError:
            raise
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidRequestError(f"{owner} must have numeric 'volume' and 'weight'") from exc

    def to_dict(self) -> Dict[str, float]:
        return {"volume": self.volume, "weight": self.weight}


@dataclass(frozen=True)
class TimeWindow:
    """An absolute interval [start, end] in which an event must take place.

    Serialized as ``{"from": ..., "to": ...}``.
    """

    start: datetime
    end: datetime

    @staticmethod
    def from_dict(data: Any, owner: str = "window") -> "TimeWindow":
        if not isinstance(data, dict):
            raise InvalidRequestError(f"{owner} must be an object with 'from' and 'to'")
        return TimeWindow(
            start=parse_timestamp(_require(data, "from", owner), f"{owner}.from"),
            end=parse_timestamp(_require(data, "to", owner), f"{owner}.to"),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"from": format_timestamp(self.start), "to": format_timestamp(self.end)}


@dataclass(frozen=True)
class Courier:
    """Static courier configuration; never changes during a solve."""

    guid: str
    start_point: Coordinates
    pickup_duration: int = 0  # seconds
    drop_duration: int = 0  # seconds
    capacity: Optional[Capacity] = None  # None: no declared limit
    finish_point: Optional[Coordinates] = None
    priority: Optional[int] = None

    @staticmethod
    def from_dict(data: Any) -> "Courier":
        if not isinstance(data, dict):
            raise InvalidRequestError("Each courier must be an object")
        guid = str(_require(data, "guid", "courier"))
        owner = f"courier '{guid}'"
        capacity = data.get("capacity")
        finish_point = data.get("finish_point")
        priority = data.get("priority")
        if priority is not None and (
            isinstance(priority, bool) or not isinstance(priority, int)
        ):
            raise InvalidRequestError(f"{owner}: 'priority' must be an integer")
        return Courier(
            guid=guid,
            start_point=Coordinates.from_dict(
                _require(data, "start_point", owner), f"{owner}.start_point"
            ),
            pickup_duration=_optional_seconds(data, "pickup_duration", owner) or 0,
            drop_duration=_optional_seconds(data, "drop_duration", owner) or 0,
            capacity=Capacity.from_dict(capacity, f"{owner}.capacity")
            if capacity is not None
            else None,
            finish_point=Coordinates.from_dict(finish_point, f"{owner}.finish_point")
            if finish_point is not None
            else None,
            priority=priority,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "guid": self.guid,
            "start_point": self.start_point.to_dict(),
            "pickup_duration": self.pickup_duration,
            "drop_duration": self.drop_duration,
        }
        if self.finish_point is not None:
            data["finish_point"] = self.finish_point.to_dict()
        if self.priority is not None:
            data["priority"] = self.priority
        if self.capacity is not None:
            data["capacity"] = self.capacity.to_dict()
        return data


@dataclass(frozen=True)
class Task:
    """A single pickup-and-delivery job."""

    guid: str
    sender_point: Coordinates
    recipient_point: Coordinates
    capacity: Optional[Capacity] = None  # None: no demand
    assembly: Optional[TimeWindow] = None  # pickup window
    slot: Optional[TimeWindow] = None  # delivery window
    pickup_duration: Optional[int] = None  # overrides the fallback chain
    drop_duration: Optional[int] = None

    @staticmethod
    def from_dict(data: Any) -> "Task":
        if not isinstance(data, dict):
            raise InvalidRequestError("Each task must be an object")
        guid = str(_require(data, "guid", "task"))
        owner = f"task '{guid}'"
        capacity = data.get("capacity")
        assembly = data.get("assembly")
        slot = data.get("slot")
        return Task(
            guid=guid,
            sender_point=Coordinates.from_dict(
                _require(data, "sender_point", owner), f"{owner}.sender_point"
            ),
            recipient_point=Coordinates.from_dict(
                _require(data, "recipient_point", owner), f"{owner}.recipient_point"
            ),
            capacity=Capacity.from_dict(capacity, f"{owner}.capacity")
            if capacity is not None
            else None,
            assembly=TimeWindow.from_dict(assembly, f"{owner}.assembly")
            if assembly is not None
            else None,
            slot=TimeWindow.from_dict(slot, f"{owner}.slot") if slot is not None else None,
            pickup_duration=_optional_seconds(data, "pickup_duration", owner),
            drop_duration=_optional_seconds(data, "drop_duration", owner),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "guid": self.guid,
            "sender_point": self.sender_point.to_dict(),
            "recipient_point": self.recipient_point.to_dict(),
        }
        if self.capacity is not None:
            data["capacity"] = self.capacity.to_dict()
        if self.assembly is not None:
            data["assembly"] = self.assembly.to_dict()
        if self.slot is not None:
            data["slot"] = self.slot.to_dict()
        if self.pickup_duration is not None:
            data["pickup_duration"] = self.pickup_duration
        if self.drop_duration is not None:
            data["drop_duration"] = self.drop_duration
        return data


@dataclass
class DispatchRequest:
    """Input of a single solve: couriers and tasks, both in priority order."""

    couriers: List[Courier] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    planning_start: Optional[datetime] = None
    pickup_duration: Optional[int] = None  # request-level default
    drop_duration: Optional[int] = None

    @staticmethod
    def from_dict(data: Any) -> "DispatchRequest":
        if not isinstance(data, dict):
            raise InvalidRequestError("Request body must be a JSON object")
        couriers = data.get("couriers") or []
        tasks = data.get("tasks") or []
        if not isinstance(couriers, list):
            raise InvalidRequestError("'couriers' must be a list")
        if not isinstance(tasks, list):
            raise InvalidRequestError("'tasks' must be a list")
        planning_start = data.get("planning_start")
        return DispatchRequest(
            couriers=[Courier.from_dict(item) for item in couriers],
            tasks=[Task.from_dict(item) for item in tasks],
            planning_start=parse_timestamp(planning_start, "planning_start")
            if planning_start is not None
            else None,
            pickup_duration=_optional_seconds(data, "pickup_duration", "request"),
            drop_duration=_optional_seconds(data, "drop_duration", "request"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "couriers": [courier.to_dict() for courier in self.couriers],
            "tasks": [task.to_dict() for task in self.tasks],
        }
        if self.planning_start is not None:
            data["planning_start"] = format_timestamp(self.planning_start)
        if self.pickup_duration is not None:
            data["pickup_duration"] = self.pickup_duration
        if self.drop_duration is not None:
            data["drop_duration"] = self.drop_duration
        return data


@dataclass
class DispatchContext:
    """Run-level settings shared by every (task, courier) evaluation."""

    planning_start: datetime
    travel_time: "TravelTimeEstimator"
    duration_fallback: str = "first_courier"  # or "courier"
    default_pickup_duration: Optional[int] = None
    default_drop_duration: Optional[int] = None


@dataclass
class Route:
    """Ordered task identifiers assigned to one courier."""

    courier_guid: str
    route: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"courier_guid": self.courier_guid, "route": list(self.route)}


@dataclass
class DispatchSolution:
    """
    Result of a dispatch run.

    Only ``routes`` and ``unassigned`` belong to the response contract; the
    remaining fields describe the run itself.
    """

    routes: List[Route] = field(default_factory=list)
    unassigned: List[str] = field(default_factory=list)
    solver_name: str = "Unknown"
    solver_runtime_sec: float = 0.0
    planning_start: Optional[datetime] = None
    time_measurements: Optional[List[TimeMeasurement]] = None

    @property
    def assigned_count(self) -> int:
        return sum(len(route.route) for route in self.routes)

    def route_for(self, courier_guid: str) -> Optional[Route]:
        for route in self.routes:
            if route.courier_guid == courier_guid:
                return route
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "routes": [route.to_dict() for route in self.routes],
            "unassigned": list(self.unassigned),
        }
