from __future__ import annotations


class RuleSpecError(ValueError):
    """Base class for every failure raised while building or composing rule specs."""


class TimelineError(RuleSpecError):
    """Invalid timeline bounds, or an age that does not fall on the timeline."""


class StructuralError(RuleSpecError):
    """Unknown target, partner edit without a partner, or a malformed payload."""


class NumericError(RuleSpecError):
    """Non-finite input, invalid operation bound, or a value driven negative."""


class ShapeError(RuleSpecError):
    """A materialized series does not line up with its timeline."""
