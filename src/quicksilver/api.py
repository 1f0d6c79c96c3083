"""
API facade for Quicksilver - provides a single entry point for programmatic usage.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

# Built-in components register themselves on import
import quicksilver.assignment  # noqa: F401
import quicksilver.utils.geodistance  # noqa: F401
from quicksilver.config import load_default_params, load_quicksilver_params
from quicksilver.config.params import QuicksilverParams
from quicksilver.core_types import (
    DispatchContext,
    DispatchRequest,
    DispatchSolution,
    InvalidRequestError,
)
from quicksilver.registry import get_dispatcher, get_travel_time_estimator
from quicksilver.utils.logging import QuicksilverLogger, log_warning
from quicksilver.utils.save_results import save_solution
from quicksilver.utils.time_measurement import TimeRecorder

logger = QuicksilverLogger.get_logger("quicksilver.api")


def load_request(path: str | Path) -> DispatchRequest:
    """Read a JSON dispatch request from disk."""
    request_path = Path(path)
    if not request_path.exists():
        raise FileNotFoundError(
            f"Request file not found: {request_path}\n"
            f"Please check the file path and ensure it exists."
        )
    try:
        with request_path.open() as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidRequestError(f"Request file {request_path} is not valid JSON: {e}") from e
    return DispatchRequest.from_dict(data)


def _resolve_params(config: str | Path | QuicksilverParams | None) -> QuicksilverParams:
    if config is None:
        return load_default_params()
    if isinstance(config, QuicksilverParams):
        return config
    config_path = Path(config)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Please check the file path and ensure it exists."
        )
    return load_quicksilver_params(config_path)


def _resolve_request(request: DispatchRequest | dict[str, Any] | str | Path) -> DispatchRequest:
    if isinstance(request, DispatchRequest):
        return request
    if isinstance(request, dict):
        return DispatchRequest.from_dict(request)
    return load_request(request)


def solve(
    request: DispatchRequest | dict[str, Any] | str | Path,
    config: str | Path | QuicksilverParams | None = None,
    planning_start: Optional[datetime] = None,
    output_dir: str | Path | None = None,
    format: Optional[str] = None,
) -> DispatchSolution:
    """
    Assign a batch of tasks to couriers in a single greedy pass.

    Args:
        request: The dispatch request - can be:
            - A DispatchRequest object
            - A dict shaped like the JSON request body
            - Path to a JSON request file
        config: Configuration parameters - can be:
            - Path to YAML configuration file
            - QuicksilverParams object
            - None (uses the packaged default configuration)
        planning_start: Instant the relative dispatch clock starts at. Defaults
            to the request's ``planning_start``, then to the current UTC time.
        output_dir: Directory to save results to (default: don't save)
        format: Output format - "json" or "csv" (default: from config)

    Returns:
        DispatchSolution: Routes per courier and unassigned task identifiers

    Raises:
        FileNotFoundError: If the request or config file doesn't exist
        InvalidRequestError: If the request is malformed or incomplete
        ValueError: If the configuration names an unknown component

    Example:
        >>> solution = solve("request.json")
        >>> for route in solution.routes:
        ...     print(route.courier_guid, route.route)
        >>> print(solution.unassigned)
    """
    params = _resolve_params(config)
    dispatch_request = _resolve_request(request)

    anchor = planning_start or dispatch_request.planning_start
    if anchor is None:
        anchor = datetime.now(timezone.utc)
    elif anchor.tzinfo is None:
        anchor = anchor.replace(tzinfo=timezone.utc)

    dispatcher = get_dispatcher(params.algorithm.dispatcher)
    context = DispatchContext(
        planning_start=anchor,
        travel_time=get_travel_time_estimator(
            params.algorithm.travel_time_estimator, params.problem.avg_speed_mps
        ),
        duration_fallback=params.algorithm.duration_fallback,
        default_pickup_duration=params.problem.default_pickup_duration,
        default_drop_duration=params.problem.default_drop_duration,
    )

    logger.info(
        f"Dispatching {len(dispatch_request.tasks)} tasks to "
        f"{len(dispatch_request.couriers)} couriers with '{dispatcher.name}'"
    )

    time_recorder = TimeRecorder()
    with time_recorder.measure("solve"):
        solution = dispatcher.solve(dispatch_request, context=context)

    solution.time_measurements = time_recorder.measurements
    solution.solver_runtime_sec = time_recorder.measurements[-1].wall_time

    if solution.unassigned:
        log_warning(f"{len(solution.unassigned)} task(s) could not be assigned")

    if output_dir is not None:
        save_solution(
            solution,
            results_dir=output_dir,
            format=format or params.io.format,
        )

    return solution
