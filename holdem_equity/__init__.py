"""
Hold'em hand ranking and equity estimation.
"""

from typing import Optional

from .config import EquityConfig
from .equity import EquityCalculator
from .errors import HoldemEquityError, InvalidEvaluatorConfigError, InvalidInputError
from .poker_eval import (
    EMPTY_HANDLE,
    Card,
    HandCategory,
    HandHandle,
    HandRank,
    LookupTableEvaluator,
    Rank,
    Suit,
    cards_from_string,
    parse_card,
)

__version__ = "0.1.0"


def lookup_table_evaluator(path: Optional[str] = None) -> LookupTableEvaluator:
    """Evaluator backed by HandRanks.dat at `path` or $HOLDEM_EQUITY_HANDRANKS."""
    return LookupTableEvaluator.from_file(path)


def default_equity_calculator(
    path: Optional[str] = None, config: Optional[EquityConfig] = None
) -> EquityCalculator:
    config = config or EquityConfig()
    return EquityCalculator(lookup_table_evaluator(path or config.table_path), config)


__all__ = [
    "EquityConfig",
    "EquityCalculator",
    "HoldemEquityError",
    "InvalidEvaluatorConfigError",
    "InvalidInputError",
    "EMPTY_HANDLE",
    "Card",
    "HandCategory",
    "HandHandle",
    "HandRank",
    "LookupTableEvaluator",
    "Rank",
    "Suit",
    "cards_from_string",
    "parse_card",
    "lookup_table_evaluator",
    "default_equity_calculator",
]
