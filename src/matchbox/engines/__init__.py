"""Comparison engines: the pluggable operator layer."""

from .base import ComparisonEngine, load_engine
from .default import DefaultComparisonEngine

__all__ = ["ComparisonEngine", "DefaultComparisonEngine", "load_engine"]
