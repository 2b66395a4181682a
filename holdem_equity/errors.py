"""
Exception types raised by the hand evaluator and the equity engine.
"""


class HoldemEquityError(ValueError):
    """Base class for all errors raised by holdem_equity."""


class InvalidEvaluatorConfigError(HoldemEquityError):
    """
    The evaluator cannot be built from the given lookup table.

    Raised at construction time (missing file, wrong size, wrong dtype).
    Nothing can be evaluated without a valid table, so this is not retried.
    """


class InvalidInputError(HoldemEquityError):
    """A caller passed cards, hands or counts that break the input contract."""
