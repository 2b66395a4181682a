"""
Hand strength values produced by the lookup table.

A finalized table value packs the hand category in the bits above 12 and a
12-bit ordinal within that category below, so comparing raw values is the
same as comparing (category, subrank) lexicographically.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .tables.constants import CATEGORY_SHIFT, SUBRANK_MASK


class HandCategory(IntEnum):
    HIGH_CARD = 1
    ONE_PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9


HAND_DESCRIPTIONS = {
    HandCategory.HIGH_CARD: "High Card",
    HandCategory.ONE_PAIR: "Pair",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.FLUSH: "Flush",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
}

MIN_CATEGORY = min(HandCategory)
MAX_CATEGORY = max(HandCategory)


@dataclass(frozen=True, order=True)
class HandRank:
    """Total-order strength of a 5 to 7 card hand."""

    category: HandCategory
    subrank: int

    @property
    def value(self) -> int:
        return (int(self.category) << CATEGORY_SHIFT) + self.subrank

    @property
    def description(self) -> str:
        return HAND_DESCRIPTIONS[self.category]

    @classmethod
    def from_value(cls, value: int) -> Optional["HandRank"]:
        """Decode a table value, or None if it does not hold a known category."""
        value = int(value)
        if value < 0 or value > 0xFFFF:
            return None
        category = value >> CATEGORY_SHIFT
        if not MIN_CATEGORY <= category <= MAX_CATEGORY:
            return None
        return cls(HandCategory(category), value & SUBRANK_MASK)

    def __str__(self) -> str:
        return f"{self.description} ({self.subrank})"


def hand_class(value: int) -> Optional[HandCategory]:
    """
    Get hand category from a raw table value.

    Returns:
        HandCategory, or None for values that are not a finished hand
    """
    rank = HandRank.from_value(value)
    return rank.category if rank is not None else None


def hand_description(value: int) -> str:
    """Get human-readable description of a raw table value."""
    category = hand_class(value)
    return HAND_DESCRIPTIONS.get(category, "Unknown")
