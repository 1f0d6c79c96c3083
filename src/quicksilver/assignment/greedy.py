"""
greedy.py

Single-pass, first-fit assignment of delivery tasks to couriers.

Tasks are processed in input order. For each task the couriers are scanned in
input order and the task goes to the **first** courier that can take it:

1. Capacity – the courier's used capacity plus the task demand must fit the
   courier's declared limit (couriers without a declared limit skip the check).
2. Pickup – the courier must reach the sender before the assembly window closes
   (arriving early means waiting for the window to open).
3. Delivery – the cargo must reach the recipient before the delivery slot
   closes (again waiting if early).

An accepted task is appended to the courier's trajectory and is never moved
again. Tasks no courier can take are reported as unassigned. The outcome
depends on the order of both tasks and couriers: there is no comparison among
feasible couriers and no backtracking.

Typical usage
-------------
>>> from quicksilver.assignment import GreedyDispatcher
>>> solution = GreedyDispatcher().solve(request, context=context)
>>> print(solution.unassigned)
"""

from typing import List, Optional

from quicksilver.config.params import DURATION_FALLBACKS
from quicksilver.core_types import (
    Courier,
    DispatchContext,
    DispatchRequest,
    DispatchSolution,
    Route,
    Task,
)
from quicksilver.feasibility import add_capacity, can_fit, to_relative_window
from quicksilver.registry import register_dispatcher
from quicksilver.utils.logging import QuicksilverLogger, Symbols, log_detail, log_warning

from .trajectory import CourierState, PlannedVisit

logger = QuicksilverLogger.get_logger(__name__)


def _first_present(*values: Optional[int]) -> int:
    for value in values:
        if value is not None:
            return value
    return 0


def resolve_durations(
    task: Task,
    request: DispatchRequest,
    context: DispatchContext,
    fallback_courier: Optional[Courier],
) -> tuple[int, int]:
    """Pickup and drop durations (seconds) for ``task``.

    Lookup order: task override, request default, configured default, and
    finally ``fallback_courier``'s own defaults.
    """
    courier_pickup = fallback_courier.pickup_duration if fallback_courier else None
    courier_drop = fallback_courier.drop_duration if fallback_courier else None
    pickup = _first_present(
        task.pickup_duration,
        request.pickup_duration,
        context.default_pickup_duration,
        courier_pickup,
    )
    drop = _first_present(
        task.drop_duration,
        request.drop_duration,
        context.default_drop_duration,
        courier_drop,
    )
    return pickup, drop


@register_dispatcher("greedy")
class GreedyDispatcher:
    """First-fit dispatcher over per-courier simulated trajectories."""

    @property
    def name(self) -> str:
        return "greedy"

    def solve(
        self, request: DispatchRequest, *, context: DispatchContext
    ) -> DispatchSolution:
        if context.duration_fallback not in DURATION_FALLBACKS:
            raise ValueError(
                f"duration_fallback must be one of {DURATION_FALLBACKS}, "
                f"got '{context.duration_fallback}'"
            )

        # Fresh state per call, indexed by courier position
        states = [CourierState.initial(courier) for courier in request.couriers]
        unassigned: List[str] = []

        if not states and request.tasks:
            log_warning(
                f"No couriers in request: all {len(request.tasks)} tasks are unassigned"
            )

        first_courier = request.couriers[0] if request.couriers else None

        for task in request.tasks:
            assembly = to_relative_window(task.assembly, context.planning_start)
            slot = to_relative_window(task.slot, context.planning_start)
            shared_durations = resolve_durations(task, request, context, first_courier)

            assigned = False
            for state in states:
                if context.duration_fallback == "courier":
                    pickup_duration, drop_duration = resolve_durations(
                        task, request, context, state.courier
                    )
                else:
                    pickup_duration, drop_duration = shared_durations

                new_capacity = add_capacity(state.used_capacity, task.capacity)
                if state.courier.capacity is not None and not can_fit(
                    state.courier.capacity, new_capacity
                ):
                    logger.debug(
                        "Task %s skips courier %s: capacity %s exceeds limit %s",
                        task.guid,
                        state.courier.guid,
                        new_capacity,
                        state.courier.capacity,
                    )
                    continue

                outcome = state.plan(
                    task,
                    pickup_duration=pickup_duration,
                    drop_duration=drop_duration,
                    assembly=assembly,
                    slot=slot,
                    travel_time=context.travel_time,
                )
                if not isinstance(outcome, PlannedVisit):
                    logger.debug(
                        "Task %s skips courier %s: %s window missed (t=%ss > %ss)",
                        task.guid,
                        state.courier.guid,
                        outcome.reason,
                        outcome.effective_time,
                        outcome.window_end,
                    )
                    continue

                state.commit(task, outcome, new_capacity)
                logger.debug(
                    "Task %s -> courier %s (pickup at %ss, delivered at %ss, free at %ss)",
                    task.guid,
                    state.courier.guid,
                    outcome.pickup_start,
                    outcome.delivered_at,
                    outcome.finish_time,
                )
                assigned = True
                break

            if not assigned:
                unassigned.append(task.guid)

        routes = [
            Route(courier_guid=state.courier.guid, route=list(state.task_guids))
            for state in states
            if state.has_tasks
        ]

        log_detail(
            f"{Symbols.TRUCK} {len(routes)}/{len(states)} couriers used, "
            f"{len(request.tasks) - len(unassigned)}/{len(request.tasks)} tasks assigned"
        )
        if unassigned:
            log_detail(f"{Symbols.PACKAGE} Unassigned tasks: {', '.join(unassigned)}")

        return DispatchSolution(
            routes=routes,
            unassigned=unassigned,
            solver_name=self.name,
            planning_start=context.planning_start,
        )
