"""
Comparison engine contract.

A comparison engine decides what operators mean. The evaluator only
asks three questions of it:

    operators()        -> every operator it recognizes, in a stable order
    is_operator(key)   -> whether `key` is one of them
    compare(subject, application) -> whether the subject satisfies a bare
                         operator atom or an (operator, operand) pair

Creating an engine:

    class StrictEqualityEngine(ComparisonEngine):
        def operators(self):
            return ("==",)

        def compare(self, subject, application):
            if isinstance(application, tuple) and application[0] == "==":
                return subject == application[1]
            return False

Unsupported (subject, application) pairs must return False rather than
raise. Ordering values that have no defined order is the one exception:
the TypeError propagates to the caller.
"""

import importlib
from abc import ABC, abstractmethod
from collections.abc import Hashable
from typing import Any, Sequence

from matchbox.errors import ConfigurationError

_ENGINE_METHODS = ("operators", "is_operator", "compare")


class ComparisonEngine(ABC):
    """Base class for pluggable comparison engines."""

    @abstractmethod
    def operators(self) -> Sequence[Any]:
        """Return the operators this engine recognizes, in a stable order."""

    def is_operator(self, key: Any) -> bool:
        """Return True if `key` is a recognized operator."""
        if not isinstance(key, Hashable):
            return False
        try:
            return key in self.operators()
        except TypeError:
            return False

    @abstractmethod
    def compare(self, subject: Any, application: Any) -> bool:
        """Return True if `subject` satisfies the operator application."""


def _import_engine(path: str) -> Any:
    """Import "package.module:Name" or "package.module.Name"."""
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ConfigurationError(f"Invalid comparison engine path: {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import comparison engine module {module_name!r}: {e}") from e
    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise ConfigurationError(f"Module {module_name!r} has no attribute {attr!r}") from e


def load_engine(ref: Any) -> Any:
    """
    Turn an engine reference into an engine instance.

    Accepts:
        - an engine instance (returned as-is)
        - an engine class (instantiated with no arguments)
        - an import path string, "package.module:Name"
        - any object exposing operators/is_operator/compare

    Raises:
        ConfigurationError: If the reference cannot be turned into an engine
    """
    if isinstance(ref, str):
        ref = _import_engine(ref)

    if isinstance(ref, type):
        if not all(callable(getattr(ref, name, None)) for name in _ENGINE_METHODS):
            raise ConfigurationError(f"{ref.__name__} does not implement the comparison engine API")
        ref = ref()

    if isinstance(ref, ComparisonEngine):
        return ref

    if all(callable(getattr(ref, name, None)) for name in _ENGINE_METHODS):
        return ref

    raise ConfigurationError(f"Not a comparison engine: {ref!r}")
