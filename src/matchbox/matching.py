"""
Top-level matching entry points.

Each call resolves its comparison engine once, parses the condition
against it, and evaluates. The engine is passed down explicitly, so a
call never mixes engines even if another thread passes its own.
"""

from typing import Any, Iterable, List, Optional

from matchbox import config
from matchbox.conditions import Condition
from matchbox.errors import DepthLimitExceeded
from matchbox.evaluator import evaluate
from matchbox.log import get_logger
from matchbox.model import Options
from matchbox.parser import parse_condition
from matchbox.resolver import resolve_engine

logger = get_logger("matchbox.matching")


def _max_depth(opts: Options) -> int:
    return opts.max_depth if opts.max_depth is not None else config.get_max_depth()


def _prepare(condition: Any, engine: Any, max_depth: int) -> Optional[Condition]:
    """Parse once; a condition nested past the ceiling yields None (never matches)."""
    try:
        return parse_condition(condition, engine, max_depth)
    except DepthLimitExceeded:
        logger.warning("Condition exceeds depth ceiling", max_depth=max_depth, stage="parse")
        return None


def _match(subject: Any, node: Optional[Condition], engine: Any, max_depth: int) -> bool:
    if node is None:
        return False
    try:
        return bool(evaluate(subject, node, engine, max_depth))
    except DepthLimitExceeded:
        logger.warning("Condition exceeds depth ceiling", max_depth=max_depth, stage="evaluate")
        return False


def matches(subject: Any, condition: Any, opts: Optional[Options] = None) -> bool:
    """
    Return True if `subject` satisfies `condition`.

    Examples:
        matches("hello", "hello")                         -> True
        matches({"body": "hello"}, {"body": {"=~": "h"}}) -> True
        matches([1, 2, 3], {"in": 1})                     -> True
        matches({"a": 1}, {"all": {"b": 1}})              -> False
        matches(anything, {})                             -> False

    Raises:
        ConditionError: If the condition has a malformed shape
        TypeError: If an ordering operator meets values with no defined order
    """
    opts = opts or Options()
    engine = resolve_engine(opts.comparison_engine)
    max_depth = _max_depth(opts)
    return _match(subject, _prepare(condition, engine, max_depth), engine, max_depth)


def filter_matches(subjects: Iterable[Any], condition: Any, opts: Optional[Options] = None) -> List[Any]:
    """
    Return the subjects that satisfy `condition`, in order.

    The engine is resolved and the condition parsed once for the batch.
    """
    opts = opts or Options()
    engine = resolve_engine(opts.comparison_engine)
    max_depth = _max_depth(opts)
    node = _prepare(condition, engine, max_depth)
    return [subject for subject in subjects if _match(subject, node, engine, max_depth)]
