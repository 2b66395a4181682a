"""
Configuration for the equity engine.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SPLIT_RULES = ("all_splits", "lowest_to_opponents")


class EquityConfig(BaseModel):
    """Tuning knobs for equity estimation."""

    model_config = ConfigDict(extra="forbid")

    # Exhaustive enumeration is used up to this many combinations
    max_combinations: int = Field(1_000_000, ge=1)
    # Number of random completions drawn when enumeration is too large
    monte_carlo_samples: int = Field(1_000_000, ge=1)

    # Completions scored per jitted kernel call
    batch_size: int = Field(65_536, ge=1)

    # Seed for calls made without an explicit PRNG key
    seed: int = 0

    # How an enumerated draw is split into opponent hands and board cards
    split_rule: Literal["all_splits", "lowest_to_opponents"] = "all_splits"
    # Most showdowns "all_splits" may score in one exact enumeration
    max_split_showdowns: int = Field(10_000_000, ge=1)

    # Location of HandRanks.dat, overrides HOLDEM_EQUITY_HANDRANKS
    table_path: Optional[str] = None
