"""
Per-courier simulated trajectory.

A :class:`CourierState` is the only mutable record of a dispatch run. It is
created from a :class:`Courier` at the start of a solve, probed with
:meth:`CourierState.plan` (pure, no mutation) and advanced with
:meth:`CourierState.commit` once the assigner has accepted a task for it.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from quicksilver.core_types import Capacity, Coordinates, Courier, Task
from quicksilver.feasibility.time_windows import (
    RelativeWindow,
    check_delivery,
    check_pickup,
)
from quicksilver.interfaces import TravelTimeEstimator


@dataclass(frozen=True)
class PlannedVisit:
    """Schedule of one task on one courier, in seconds since planning start."""

    task_guid: str
    arrival_at_sender: int
    pickup_start: int
    departure_from_sender: int
    arrival_at_recipient: int
    delivered_at: int
    finish_time: int


@dataclass(frozen=True)
class Rejection:
    """Why a task could not be appended to a courier's trajectory."""

    reason: str  # "assembly" or "slot"
    effective_time: int
    window_end: int


@dataclass
class CourierState:
    courier: Courier
    location: Coordinates
    elapsed_sec: int = 0
    used_capacity: Capacity = field(default_factory=Capacity)
    task_guids: List[str] = field(default_factory=list)
    visits: List[PlannedVisit] = field(default_factory=list)

    @classmethod
    def initial(cls, courier: Courier) -> "CourierState":
        return cls(courier=courier, location=courier.start_point)

    def plan(
        self,
        task: Task,
        *,
        pickup_duration: int,
        drop_duration: int,
        assembly: Optional[RelativeWindow],
        slot: Optional[RelativeWindow],
        travel_time: TravelTimeEstimator,
    ) -> PlannedVisit | Rejection:
        """Simulate appending ``task`` to this trajectory without mutating it."""
        arrival_at_sender = self.elapsed_sec + travel_time.travel_time(
            self.location, task.sender_point
        )
        pickup = check_pickup(arrival_at_sender, assembly)
        if not pickup.feasible:
            return Rejection("assembly", pickup.effective_time, assembly.end)

        departure = pickup.effective_time + pickup_duration
        arrival_at_recipient = departure + travel_time.travel_time(
            task.sender_point, task.recipient_point
        )
        delivery = check_delivery(arrival_at_recipient, slot)
        if not delivery.feasible:
            return Rejection("slot", delivery.effective_time, slot.end)

        return PlannedVisit(
            task_guid=task.guid,
            arrival_at_sender=arrival_at_sender,
            pickup_start=pickup.effective_time,
            departure_from_sender=departure,
            arrival_at_recipient=arrival_at_recipient,
            delivered_at=delivery.effective_time,
            finish_time=delivery.effective_time + drop_duration,
        )

    def commit(self, task: Task, visit: PlannedVisit, used_capacity: Capacity) -> None:
        """Advance the trajectory past an accepted task."""
        self.location = task.recipient_point
        self.elapsed_sec = visit.finish_time
        self.used_capacity = used_capacity
        self.task_guids.append(task.guid)
        self.visits.append(visit)

    @property
    def has_tasks(self) -> bool:
        return bool(self.task_guids)
