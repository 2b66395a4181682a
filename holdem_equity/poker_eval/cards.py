"""
Card representation and conversion utilities for poker hand evaluation.

Cards are identified by the dense id used as an offset into the lookup
table: id = 1 + suit + 4 * rank, so ids run from 1 (2 of clubs) to 52
(ace of spades).
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Sequence, Union

import numpy as np

from ..errors import InvalidInputError

NUM_RANKS = 13
NUM_SUITS = 4
NUM_CARDS = NUM_RANKS * NUM_SUITS

RANK_CHARS = "23456789TJQKA"
SUIT_CHARS = "cdhs"
SUIT_SYMBOLS = "♣♦♥♠"


class Rank(IntEnum):
    TWO = 0
    THREE = 1
    FOUR = 2
    FIVE = 3
    SIX = 4
    SEVEN = 5
    EIGHT = 6
    NINE = 7
    TEN = 8
    JACK = 9
    QUEEN = 10
    KING = 11
    ACE = 12

    def __str__(self) -> str:
        return RANK_CHARS[self]


class Suit(IntEnum):
    CLUB = 0
    DIAMOND = 1
    HEART = 2
    SPADE = 3

    def __str__(self) -> str:
        return SUIT_SYMBOLS[self]


@dataclass(frozen=True)
class Card:
    """One of the 52 playing cards."""

    rank: Rank
    suit: Suit

    @property
    def id(self) -> int:
        return 1 + int(self.suit) + 4 * int(self.rank)

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"


CardLike = Union[Card, str]


def card_from_id(card_id: int) -> Card:
    """
    Convert a table card id back to a card.

    Args:
        card_id: Card ID (1-52)

    Returns:
        The matching Card
    """
    if not 1 <= card_id <= NUM_CARDS:
        raise InvalidInputError(f"Invalid card id: {card_id}")
    rank, suit = divmod(card_id - 1, NUM_SUITS)
    return Card(Rank(rank), Suit(suit))


def parse_card(card_str: str) -> Card:
    """
    Parse card string to a Card.

    Args:
        card_str: String like "As", "2c" or "A♠"

    Returns:
        The parsed Card
    """
    if len(card_str) != 2:
        raise InvalidInputError(f"Invalid card string: {card_str}")

    rank_char, suit_char = card_str[0].upper(), card_str[1]
    rank = RANK_CHARS.find(rank_char)
    suit = SUIT_CHARS.find(suit_char.lower())
    if suit < 0:
        suit = SUIT_SYMBOLS.find(suit_char)
    if rank < 0 or suit < 0:
        raise InvalidInputError(f"Invalid card string: {card_str}")
    return Card(Rank(rank), Suit(suit))


def to_card(card: CardLike) -> Card:
    """Accept a Card or its two-character string form."""
    if isinstance(card, Card):
        return card
    if isinstance(card, str):
        return parse_card(card)
    raise InvalidInputError(f"Expected a Card or card string, got {card!r}")


def format_card(card: Card) -> str:
    """
    Format card as an ASCII string.

    Returns:
        String like "As" (Ace of spades) or "2c" (2 of clubs)
    """
    return RANK_CHARS[card.rank] + SUIT_CHARS[card.suit]


def cards_from_string(cards_str: str) -> List[Card]:
    """Convert card string like 'As Kh Qd Jc Ts' to a list of cards."""
    return [parse_card(card) for card in cards_str.split()]


def format_hand(cards: Iterable[Card]) -> str:
    """
    Format cards as readable string.

    Returns:
        String like "As Kh Qd Jc Ts"
    """
    return " ".join(format_card(card) for card in cards)


def full_deck() -> List[Card]:
    """All 52 cards in card id order."""
    return [card_from_id(card_id) for card_id in range(1, NUM_CARDS + 1)]


def card_ids(cards: Sequence[Card]) -> np.ndarray:
    """Card ids as an int32 array, ready to be used as table offsets."""
    return np.array([card.id for card in cards], dtype=np.int32)
