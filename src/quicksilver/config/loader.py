from __future__ import annotations

"""Utilities for loading Quicksilver configuration YAML files into the
parameter dataclass hierarchy.

Every key is optional: anything left out falls back to the dataclass default,
so an empty file is a valid configuration.
"""

from pathlib import Path
from typing import Any, Dict

import yaml

from quicksilver.utils.logging import QuicksilverLogger

from .params import (
    AlgorithmParams,
    IOParams,
    ProblemParams,
    QuicksilverParams,
    ServerParams,
)

logger = QuicksilverLogger.get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default_config.yaml"


# ---------------------------------------------------------------------------
# Helper parsing routines
# ---------------------------------------------------------------------------


def _pop_section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.pop(key, {}) or {}
    if not isinstance(section, dict):
        raise ValueError(f"YAML key '{key}' must be a mapping.")
    return dict(section)


def _reject_unknown(section: Dict[str, Any], where: str) -> None:
    if section:
        unknown_keys = ", ".join(sorted(section.keys()))
        raise ValueError(f"Unknown configuration keys in {where}: {unknown_keys}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_yaml(path: str | Path) -> QuicksilverParams:
    """Load YAML configuration file into `QuicksilverParams`."""

    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(cfg_path)

    try:
        with cfg_path.open() as f:
            data: Dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(
            f"Error parsing YAML configuration {cfg_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"YAML configuration {cfg_path} must be a mapping.")

    # ---------------------------------------------------------------------
    # Problem definition
    # ---------------------------------------------------------------------

    problem_defaults = ProblemParams()
    problem = ProblemParams(
        avg_speed_mps=float(data.pop("avg_speed_mps", problem_defaults.avg_speed_mps)),
        default_pickup_duration=data.pop("default_pickup_duration", None),
        default_drop_duration=data.pop("default_drop_duration", None),
    )

    # ---------------------------------------------------------------------
    # Algorithm parameters
    # ---------------------------------------------------------------------

    dispatch = _pop_section(data, "dispatch")
    algorithm = AlgorithmParams(
        dispatcher=dispatch.pop("dispatcher", "greedy"),
        travel_time_estimator=dispatch.pop("travel_time_estimator", "haversine"),
        duration_fallback=dispatch.pop("duration_fallback", "first_courier"),
    )
    _reject_unknown(dispatch, "'dispatch'")

    # ---------------------------------------------------------------------
    # Server parameters
    # ---------------------------------------------------------------------

    server_raw = _pop_section(data, "server")
    server = ServerParams(
        host=server_raw.pop("host", "0.0.0.0"),
        port=int(server_raw.pop("port", 3000)),
    )
    _reject_unknown(server_raw, "'server'")

    # ---------------------------------------------------------------------
    # IO parameters
    # ---------------------------------------------------------------------

    io_params = IOParams(
        format=data.pop("format", "json"),
    )

    # Any remaining unknown keys will raise an error to avoid silent mistakes.
    _reject_unknown(data, "top level")

    logger.debug(
        "Loaded configuration – problem: %s algorithm: %s server: %s io: %s",
        problem,
        algorithm,
        server,
        io_params,
    )

    return QuicksilverParams(
        problem=problem, algorithm=algorithm, server=server, io=io_params
    )


def load_default() -> QuicksilverParams:
    """Load the configuration shipped with the package."""
    return load_yaml(DEFAULT_CONFIG_PATH)
