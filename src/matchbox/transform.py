"""
Conditional transforms.

Apply a function to a subject only when it matches a condition.

    transform("hello", {"all": "hello"}, str.upper)   -> "HELLO"
    transform("world", {"all": "hello"}, str.upper)   -> "world"

transform_many() walks an ordered list of (condition, fn) selectors.
Every selector is tested against the current, possibly already
transformed, subject.
"""

import inspect
from typing import Any, Callable, List, Optional

from matchbox.matching import _match, _max_depth, _prepare
from matchbox.model import OnMatch, Options, Selector, TransformResult
from matchbox.resolver import resolve_engine


def _accepts_subject(fn: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # no introspectable signature, assume the one-argument form
        return True
    try:
        signature.bind(None)
    except TypeError:
        return False
    return True


def _apply(fn: Callable[..., Any], subject: Any) -> Any:
    if _accepts_subject(fn):
        return fn(subject)
    return fn()


def _as_selectors(selectors: Any) -> List[Selector]:
    if isinstance(selectors, Selector):
        return [selectors]
    if isinstance(selectors, tuple) and len(selectors) == 2 and callable(selectors[1]):
        return [Selector(*selectors)]

    result = []
    for item in selectors:
        if isinstance(item, Selector):
            result.append(item)
        elif isinstance(item, tuple) and len(item) == 2 and callable(item[1]):
            result.append(Selector(*item))
        else:
            raise TypeError(f"Expected a Selector or a (condition, fn) pair, got {item!r}")
    return result


def transform(subject: Any, condition: Any, fn: Callable[..., Any], opts: Optional[Options] = None) -> Any:
    """
    Return fn(subject) (or fn()) if `subject` matches `condition`,
    otherwise `subject` unchanged.
    """
    opts = opts or Options()
    engine = resolve_engine(opts.comparison_engine)
    max_depth = _max_depth(opts)
    if _match(subject, _prepare(condition, engine, max_depth), engine, max_depth):
        return _apply(fn, subject)
    return subject


def transform_many(subject: Any, selectors: Any, opts: Optional[Options] = None) -> TransformResult:
    """
    Apply matching selectors in order.

    Args:
        subject: Value to test and transform
        selectors: A Selector, a (condition, fn) pair, or a list of them
        opts: Options; on_match picks HALT_ON_FIRST (default) or CONTINUE_ALL

    Returns:
        TransformResult(value, matched). With no match the value is the
        original subject and matched is False.
    """
    opts = opts or Options()
    policy = OnMatch(opts.on_match)
    engine = resolve_engine(opts.comparison_engine)
    max_depth = _max_depth(opts)

    value = subject
    matched = False
    for selector in _as_selectors(selectors):
        node = _prepare(selector.condition, engine, max_depth)
        if not _match(value, node, engine, max_depth):
            continue
        value = _apply(selector.fn, value)
        matched = True
        if policy is OnMatch.HALT_ON_FIRST:
            break

    return TransformResult(value=value, matched=matched)
