"""
Call-level model objects.

Plain data classes passed into and returned from the entry points:
    - Options (per-call settings)
    - Selector (a condition paired with a transformation)
    - TransformResult (outcome of a multi-selector transform)

ARCHITECTURAL RULE:
    These objects hold values only. They never evaluate anything.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

from matchbox.config import check_max_depth


class OnMatch(Enum):
    """
    What transform_many does after a selector matches.

    HALT_ON_FIRST: stop after the first matching selector (default)
    CONTINUE_ALL: keep going, each selector sees the updated subject
    """

    HALT_ON_FIRST = "halt_on_first"
    CONTINUE_ALL = "continue_all"


@dataclass(frozen=True)
class Options:
    """
    Settings recognized by every entry point.

    Properties:
        comparison_engine:
            Engine instance, class or import path for this call only.
            If None: the configured default, else DefaultComparisonEngine.

        on_match:
            OnMatch policy (or its string value) for transform_many.

        max_depth:
            Evaluation depth ceiling for this call.
            If None: the configured ceiling.
            Must be a positive integer (ConfigurationError otherwise).
    """

    comparison_engine: Any = None
    on_match: Union[OnMatch, str] = OnMatch.HALT_ON_FIRST
    max_depth: Optional[int] = None

    def __post_init__(self):
        if self.max_depth is not None:
            check_max_depth(self.max_depth)


@dataclass(frozen=True)
class Selector:
    """
    A condition and the transformation applied when it matches.

    `fn` takes either the current subject or no arguments.
    A zero-argument fn is a pure replacement.
    """

    condition: Any
    fn: Callable[..., Any]


@dataclass(frozen=True)
class TransformResult:
    """The possibly transformed value and whether any selector matched."""

    value: Any
    matched: bool
