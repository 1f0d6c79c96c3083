"""Configuration module for Quicksilver parameters."""

# Structured parameter system
from .loader import load_default as load_default_params
from .loader import load_yaml as load_quicksilver_params
from .params import (
    AlgorithmParams,
    IOParams,
    ProblemParams,
    QuicksilverParams,
    ServerParams,
)

__all__ = [
    "ProblemParams",
    "AlgorithmParams",
    "ServerParams",
    "IOParams",
    "QuicksilverParams",
    "load_quicksilver_params",
    "load_default_params",
]
