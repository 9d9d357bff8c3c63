"""
Engine resolution.

Order:
    1. the engine passed for this call
    2. the process-wide configured default
    3. DefaultComparisonEngine

Entry points resolve once per top-level call and pass the engine down
explicitly. Nothing below them looks an engine up again.
"""

from typing import Any

from matchbox import config
from matchbox.engines import DefaultComparisonEngine, load_engine

_DEFAULT_ENGINE = DefaultComparisonEngine()


def resolve_engine(comparison_engine: Any = None) -> Any:
    if comparison_engine is not None:
        return load_engine(comparison_engine)

    configured = config.get_default_engine()
    if configured is not None:
        return configured

    return _DEFAULT_ENGINE
