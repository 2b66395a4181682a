"""
Lookup-table hand evaluator.

The HandRanks.dat table is a perfect-hash automaton over card ids: starting
from ROOT_INDEX, each card moves the state to table[state + card_id]. After
five or six cards the finalized value sits at table[state]; after seven
cards the state itself is the value of the best five-card hand.

The scalar API threads an immutable HandHandle through add_card calls. The
jitted kernels below apply the same transitions to whole batches of states
and are what the equity engine runs.
"""

import logging
from functools import partial
from typing import Iterable, NamedTuple, Optional, Sequence, Union

import jax
import jax.numpy as jnp
import numpy as np

from ..errors import InvalidInputError
from .cards import NUM_CARDS, Card, parse_card
from .hand_rank import MAX_CATEGORY, MIN_CATEGORY, HandRank
from .tables import (
    CATEGORY_SHIFT,
    MAX_HAND_SIZE,
    RANKED_HAND_SIZES,
    ROOT_INDEX,
    decode_table,
    load_hand_ranks,
)
from .tables.loader import TableBuffer

logger = logging.getLogger(__name__)

CardInput = Union[Card, str, int]


class HandHandle(NamedTuple):
    """Position of a partial hand in the automaton."""

    index: int
    count: int = 0


EMPTY_HANDLE = HandHandle(ROOT_INDEX, 0)


@jax.jit
def fold_cards(table: jnp.ndarray, index: jnp.ndarray, cards: jnp.ndarray) -> jnp.ndarray:
    """
    Fold cards into a batch of states.

    Args:
        table: Transition table
        index: State indices of any shape S
        cards: Card ids (1-52) of shape S + (n,)

    Returns:
        State indices of shape S after n transitions
    """
    for i in range(cards.shape[-1]):
        index = table[index + cards[..., i]]
    return index


@partial(jax.jit, static_argnums=2)
def final_values(table: jnp.ndarray, index: jnp.ndarray, count: int) -> jnp.ndarray:
    """Raw finalized values for states holding `count` cards (0 when unrankable)."""
    if count == MAX_HAND_SIZE:
        return index
    if count in RANKED_HAND_SIZES:
        return table[index]
    return jnp.zeros_like(index)


@partial(jax.jit, static_argnums=2)
def ranking_values(table: jnp.ndarray, index: jnp.ndarray, count: int) -> jnp.ndarray:
    """
    Comparable hand strengths for a batch of states.

    Returns:
        The raw value (category << 12 | subrank) where it decodes to a known
        category, -1 elsewhere, so unranked hands lose every comparison
    """
    values = final_values(table, index, count)
    category = values >> CATEGORY_SHIFT
    valid = (category >= int(MIN_CATEGORY)) & (category <= int(MAX_CATEGORY))
    return jnp.where(valid, values, -1)


def to_card_id(card: CardInput) -> int:
    """Table offset for a Card, a card string or a raw id."""
    if isinstance(card, Card):
        return card.id
    if isinstance(card, str):
        return parse_card(card).id
    if isinstance(card, (int, np.integer)) and not isinstance(card, bool):
        if not 1 <= card <= NUM_CARDS:
            raise InvalidInputError(f"Invalid card id: {card}")
        return int(card)
    raise InvalidInputError(f"Expected a card, got {card!r}")


class LookupTableEvaluator:
    """Ranks 5, 6 and 7 card hands with one table read per card."""

    def __init__(self, table: TableBuffer):
        self._table = jnp.asarray(decode_table(table))
        logger.debug("Hand ranks table on %s", self._table.devices())

    @classmethod
    def from_file(cls, path: Optional[str] = None) -> "LookupTableEvaluator":
        return cls(load_hand_ranks(path))

    @property
    def table(self) -> jnp.ndarray:
        return self._table

    def add_card(self, handle: HandHandle, card: CardInput) -> HandHandle:
        """Return the handle reached by adding one card; `handle` is left untouched."""
        card_id = to_card_id(card)
        if handle.count >= MAX_HAND_SIZE:
            raise InvalidInputError(f"Hand already holds {handle.count} cards")
        return HandHandle(int(self._table[handle.index + card_id]), handle.count + 1)

    def add_cards(self, handle: HandHandle, cards: Iterable[CardInput]) -> HandHandle:
        for card in cards:
            handle = self.add_card(handle, card)
        return handle

    def finalize(self, handle: HandHandle) -> Optional[HandRank]:
        """
        Rank of the hand behind `handle`.

        Returns:
            HandRank for 5, 6 or 7 cards; None for any other count or when
            the value does not decode to a known category
        """
        if handle.count == MAX_HAND_SIZE:
            return HandRank.from_value(handle.index)
        if handle.count in RANKED_HAND_SIZES:
            return HandRank.from_value(int(self._table[handle.index]))
        return None

    def evaluate(self, cards: Iterable[CardInput]) -> Optional[HandRank]:
        """Fold `cards` from the empty hand and finalize."""
        return self.finalize(self.add_cards(EMPTY_HANDLE, cards))

    def evaluate_batch(self, hands: Union[np.ndarray, Sequence[Sequence[CardInput]]]) -> jnp.ndarray:
        """
        Evaluate many hands of the same size at once.

        Args:
            hands: Array of shape (batch_size, num_cards) with card ids, or
                a sequence of equally sized hands

        Returns:
            Array of comparable strengths, -1 where a hand has no rank
        """
        if not isinstance(hands, np.ndarray):
            hands = np.array([[to_card_id(card) for card in hand] for hand in hands], dtype=np.int32)
        hands = np.asarray(hands, dtype=np.int32)
        if hands.ndim != 2:
            raise InvalidInputError(f"Expected a (batch, cards) array, got shape {hands.shape}")
        num_cards = hands.shape[1]
        if num_cards > MAX_HAND_SIZE:
            raise InvalidInputError(f"Hands hold at most {MAX_HAND_SIZE} cards, got {num_cards}")
        if hands.size and (hands.min() < 1 or hands.max() > NUM_CARDS):
            raise InvalidInputError("Card ids must be in 1..52")

        index = jnp.full(hands.shape[0], ROOT_INDEX, dtype=jnp.int32)
        index = fold_cards(self._table, index, jnp.asarray(hands))
        return ranking_values(self._table, index, num_cards)
