"""
Fast poker hand evaluation using the precomputed HandRanks.dat perfect-hash table.

Each card costs a single table read, and a seven-card hand is ranked
without enumerating its five-card subsets.
"""

from .cards import (
    Card,
    Rank,
    Suit,
    card_from_id,
    card_ids,
    cards_from_string,
    format_card,
    format_hand,
    full_deck,
    parse_card,
)
from .evaluator import EMPTY_HANDLE, HandHandle, LookupTableEvaluator
from .hand_rank import HandCategory, HandRank, hand_class, hand_description

__all__ = [
    'Card',
    'Rank',
    'Suit',
    'card_from_id',
    'card_ids',
    'cards_from_string',
    'format_card',
    'format_hand',
    'full_deck',
    'parse_card',
    'EMPTY_HANDLE',
    'HandHandle',
    'LookupTableEvaluator',
    'HandCategory',
    'HandRank',
    'hand_class',
    'hand_description',
]
