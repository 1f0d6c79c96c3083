"""Registry for pluggable components in Quicksilver."""

from quicksilver.utils.logging import QuicksilverLogger

from .interfaces import Dispatcher, TravelTimeEstimator

logger = QuicksilverLogger.get_logger(__name__)

# Registries for each component type
DISPATCHER_REGISTRY: dict[str, type[Dispatcher]] = {}
TRAVEL_TIME_ESTIMATOR_REGISTRY: dict[str, type[TravelTimeEstimator]] = {}

__all__ = [
    "register_dispatcher",
    "register_travel_time_estimator",
    "get_dispatcher",
    "get_travel_time_estimator",
    # Expose registries for advanced users who need direct access
    "DISPATCHER_REGISTRY",
    "TRAVEL_TIME_ESTIMATOR_REGISTRY",
]


def register_dispatcher(name: str):
    """Decorator to register a dispatcher implementation."""

    def decorator(cls: type[Dispatcher]):
        if name in DISPATCHER_REGISTRY:
            raise ValueError(f"Dispatcher '{name}' is already registered")
        DISPATCHER_REGISTRY[name] = cls
        return cls

    return decorator


def register_travel_time_estimator(name: str):
    """Decorator to register a travel time estimator implementation."""

    def decorator(cls: type[TravelTimeEstimator]):
        if name in TRAVEL_TIME_ESTIMATOR_REGISTRY:
            raise ValueError(f"Travel time estimator '{name}' is already registered")
        TRAVEL_TIME_ESTIMATOR_REGISTRY[name] = cls
        return cls

    return decorator


def get_dispatcher(name: str) -> Dispatcher:
    try:
        cls = DISPATCHER_REGISTRY[name]
    except KeyError:
        available = ", ".join(sorted(DISPATCHER_REGISTRY)) or "none"
        raise ValueError(
            f"Unknown dispatcher '{name}'. Available dispatchers: {available}"
        ) from None
    logger.debug("Using dispatcher '%s'", name)
    return cls()


def get_travel_time_estimator(name: str, avg_speed_mps: float) -> TravelTimeEstimator:
    try:
        cls = TRAVEL_TIME_ESTIMATOR_REGISTRY[name]
    except KeyError:
        available = ", ".join(sorted(TRAVEL_TIME_ESTIMATOR_REGISTRY)) or "none"
        raise ValueError(
            f"Unknown travel time estimator '{name}'. Available estimators: {available}"
        ) from None
    logger.debug("Using travel time estimator '%s' at %.2f m/s", name, avg_speed_mps)
    return cls(avg_speed_mps)
