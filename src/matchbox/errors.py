"""
Exception hierarchy for Matchbox.

Two kinds of failure exist:
    - Usage errors: the condition or configuration is malformed.
      These are raised immediately.
    - Type-domain errors: an ordering operator was applied to values
      with no defined order. These are the native TypeError and are
      never wrapped.

A missing key or a length mismatch is NOT an error. It is a non-match.
"""


class MatchboxError(Exception):
    """Base class for all Matchbox errors."""
    pass


class ConditionError(MatchboxError, ValueError):
    """Raised when a condition has a shape the parser cannot interpret."""
    pass


class ConfigurationError(MatchboxError):
    """Raised when configuration is applied twice or an engine cannot be loaded."""
    pass


class DepthLimitExceeded(MatchboxError):
    """
    Raised when evaluation nests deeper than the configured ceiling.

    Entry points catch this and report a non-match.
    """

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Condition evaluation exceeded max depth {max_depth}")
