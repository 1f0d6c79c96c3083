"""Shared utilities: geodistance, logging, timing and result persistence."""
