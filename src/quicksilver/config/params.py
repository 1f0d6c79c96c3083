from __future__ import annotations

"""Parameter container dataclasses for the Quicksilver configuration system.

Problem definition, dispatch algorithm settings, the HTTP server and I/O
options live in separate immutable dataclasses grouped by `QuicksilverParams`.
"""

from dataclasses import dataclass, field

__all__ = [
    "ProblemParams",
    "AlgorithmParams",
    "ServerParams",
    "IOParams",
    "QuicksilverParams",
]

DURATION_FALLBACKS = ("first_courier", "courier")
OUTPUT_FORMATS = ("json", "csv")


# ---------------------------------------------------------------------------
# Problem definition parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProblemParams:
    """Physical assumptions and defaults independent from the algorithm used."""

    avg_speed_mps: float = 4.17
    default_pickup_duration: int | None = None
    default_drop_duration: int | None = None

    def __post_init__(self):  # type: ignore[override]
        if self.avg_speed_mps <= 0:
            raise ValueError("ProblemParams.avg_speed_mps must be positive.")

        for field_name in ("default_pickup_duration", "default_drop_duration"):
            value = getattr(self, field_name)
            if value is not None and value < 0:
                raise ValueError(f"ProblemParams.{field_name} must be non-negative.")


# ---------------------------------------------------------------------------
# Algorithm parameters – things that influence dispatcher behaviour
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AlgorithmParams:
    """Dispatch algorithm configuration options."""

    dispatcher: str = "greedy"
    travel_time_estimator: str = "haversine"
    duration_fallback: str = "first_courier"

    def __post_init__(self):  # type: ignore[override]
        if self.duration_fallback not in DURATION_FALLBACKS:
            raise ValueError(
                f"AlgorithmParams.duration_fallback must be one of {DURATION_FALLBACKS}."
            )


# ---------------------------------------------------------------------------
# HTTP server parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ServerParams:
    host: str = "0.0.0.0"
    port: int = 3000

    def __post_init__(self):  # type: ignore[override]
        if not 0 < self.port < 65536:
            raise ValueError("ServerParams.port must be between 1 and 65535.")


# ---------------------------------------------------------------------------
# IO parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IOParams:
    """Settings for result output."""

    format: str = "json"  # One of: json, csv

    def __post_init__(self):  # type: ignore[override]
        if self.format not in OUTPUT_FORMATS:
            raise ValueError("IOParams.format must be 'json' or 'csv'.")


# ---------------------------------------------------------------------------
# Aggregate container
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class QuicksilverParams:
    """Aggregate parameter object passed throughout the codebase."""

    problem: ProblemParams = field(default_factory=ProblemParams)
    algorithm: AlgorithmParams = field(default_factory=AlgorithmParams)
    server: ServerParams = field(default_factory=ServerParams)
    io: IOParams = field(default_factory=IOParams)
