"""
Hold'em equity estimation on top of the lookup-table evaluator.

Equity is the hero's expected share of the pot: every candidate completion
of the unknown cards scores 0 when an opponent holds a better hand and
1 / (tied opponents + 1) otherwise, and the scores are averaged. Completions
come either from an exhaustive enumeration or, when that would be larger
than the configured limit, from independent random draws. Both producers
yield batches of card ids that the same jitted kernels score.
"""

import itertools
import logging
import math
from functools import partial
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import jax
import jax.numpy as jnp
import numpy as np

from .config import EquityConfig
from .errors import InvalidInputError
from .poker_eval.cards import NUM_CARDS, Card, CardLike, card_ids, cards_from_string, to_card
from .poker_eval.evaluator import EMPTY_HANDLE, LookupTableEvaluator, fold_cards, ranking_values

logger = logging.getLogger(__name__)

HAND_SIZE = 2
BOARD_SIZE = 5
SHOWDOWN_SIZE = HAND_SIZE + BOARD_SIZE

CardsInput = Union[str, Sequence[CardLike]]


# ============================================================================
# SCORING KERNELS
# ============================================================================


@partial(jax.jit, static_argnums=5)
def score_showdowns(table, board_index, hero, board_fill, opponents, hand_size):
    """
    Hero's pot share for a batch of fully dealt showdowns.

    Args:
        table: Transition table
        board_index: State index of the known board cards
        hero: Hero hole card ids, shape (2,)
        board_fill: Missing board card ids, shape (batch, m)
        opponents: Opponent hole card ids, shape (batch, n, 2)
        hand_size: Cards each player holds at showdown

    Returns:
        Array of shape (batch,): 0 when beaten, 1 / (ties + 1) otherwise
    """
    batch = board_fill.shape[0]
    board = fold_cards(table, jnp.full((batch,), board_index, dtype=jnp.int32), board_fill)

    hero_index = fold_cards(table, board, jnp.broadcast_to(hero, (batch, HAND_SIZE)))
    hero_value = ranking_values(table, hero_index, hand_size)

    # Every opponent continues from the same board state
    opponent_board = jnp.broadcast_to(board[:, None], opponents.shape[:2])
    opponent_value = ranking_values(table, fold_cards(table, opponent_board, opponents), hand_size)

    beaten = jnp.any(opponent_value > hero_value[:, None], axis=1)
    ties = jnp.sum(opponent_value == hero_value[:, None], axis=1)
    share = 1.0 / (ties + 1).astype(jnp.float32)
    return jnp.where(beaten | (hero_value < 0), 0.0, share)


@partial(jax.jit, static_argnums=5)
def score_board_completions(table, board_index, hero, completions, opponents, hand_size):
    """Pot share per board completion against known opponent hands of shape (n, 2)."""
    opponents = jnp.broadcast_to(opponents, (completions.shape[0],) + opponents.shape)
    return score_showdowns(table, board_index, hero, completions, opponents, hand_size)


@partial(jax.jit, static_argnums=(5, 6))
def score_draws(table, board_index, hero, draws, splits, num_opponents, hand_size):
    """
    Pot share per draw of unknown cards, averaged over the given splits.

    Args:
        draws: Unknown card ids, shape (batch, k)
        splits: Column orders of shape (num_splits, k); in each order the
            first 2 * num_opponents positions are dealt to the opponents in
            consecutive pairs and the rest complete the board

    Returns:
        Array of shape (batch,)
    """
    batch, draw_size = draws.shape
    arranged = draws[:, splits].reshape(-1, draw_size)
    opponents = arranged[:, : 2 * num_opponents].reshape(-1, num_opponents, HAND_SIZE)
    board_fill = arranged[:, 2 * num_opponents :]
    shares = score_showdowns(table, board_index, hero, board_fill, opponents, hand_size)
    return shares.reshape(batch, -1).mean(axis=1)


# ============================================================================
# COMPLETION PRODUCERS
# ============================================================================


def enumerate_draws(deck: np.ndarray, draw_size: int, batch_size: int) -> Iterator[np.ndarray]:
    """
    Every `draw_size`-card combination of `deck` in lexicographic order.

    Yields:
        int32 arrays of shape (<= batch_size, draw_size)
    """
    combinations = itertools.combinations(deck.tolist(), draw_size)
    while True:
        chunk = list(itertools.islice(combinations, batch_size))
        if not chunk:
            return
        yield np.array(chunk, dtype=np.int32).reshape(len(chunk), draw_size)


@partial(jax.jit, static_argnums=(2, 3))
def _sample_batch(key, deck, num_draws, draw_size):
    keys = jax.random.split(key, num_draws)
    return jax.vmap(lambda k: jax.random.choice(k, deck, shape=(draw_size,), replace=False))(keys)


def sample_draws(
    key: jax.Array, deck: np.ndarray, draw_size: int, num_samples: int, batch_size: int
) -> Iterator[jnp.ndarray]:
    """
    Independent uniform draws of `draw_size` distinct cards from `deck`.

    Cards within a draw come in random order, so any fixed positional split
    of a draw is itself uniformly distributed.
    """
    deck = jnp.asarray(deck)
    remaining = num_samples
    while remaining > 0:
        key, subkey = jax.random.split(key)
        size = min(batch_size, remaining)
        yield _sample_batch(subkey, deck, size, draw_size)
        remaining -= size


def average_score(batches: Iterable[jnp.ndarray], score: Callable[[jnp.ndarray], jnp.ndarray]) -> float:
    """Mean of `score` over every row of every batch."""
    total = 0.0
    count = 0
    for draws in batches:
        total += float(jnp.sum(score(draws)))
        count += draws.shape[0]
    return total / count


# ============================================================================
# DRAW SPLITS
# ============================================================================


def _pairings(positions: Tuple[int, ...]) -> Iterator[Tuple[int, ...]]:
    """All groupings of `positions` into unordered pairs, flattened."""
    if not positions:
        yield ()
        return
    first, rest = positions[0], positions[1:]
    for i, partner in enumerate(rest):
        for tail in _pairings(rest[:i] + rest[i + 1 :]):
            yield (first, partner) + tail


def count_splits(num_opponents: int, board_count: int, rule: str) -> int:
    """Number of splits `draw_splits` returns, without building them."""
    if rule == "lowest_to_opponents":
        return 1
    pairings = math.prod(range(2 * num_opponents - 1, 0, -2))
    return math.comb(2 * num_opponents + board_count, board_count) * pairings


def draw_splits(num_opponents: int, board_count: int, rule: str) -> np.ndarray:
    """
    Ways to deal an enumerated draw to the opponents and the board.

    "lowest_to_opponents" deals the draw in card id order: consecutive pairs
    to the opponents, the highest cards to the board. "all_splits" lists
    every choice of board cards combined with every pairing of the rest, so
    each (board, opponent holdings) outcome is scored exactly once.

    Returns:
        int32 array of shape (num_splits, 2 * num_opponents + board_count)
    """
    draw_size = 2 * num_opponents + board_count
    if rule == "lowest_to_opponents":
        return np.arange(draw_size, dtype=np.int32)[None, :]

    positions = tuple(range(draw_size))
    splits = []
    for board in itertools.combinations(positions, board_count):
        rest = tuple(p for p in positions if p not in board)
        for pairs in _pairings(rest):
            splits.append(pairs + board)
    return np.array(splits, dtype=np.int32).reshape(len(splits), draw_size)


def plan_completions(deck_size: int, draw_size: int, config: EquityConfig) -> Tuple[bool, int]:
    """
    Decide between exhaustive enumeration and Monte Carlo.

    Returns:
        (exact, number of draws that will be scored)
    """
    combinations = math.comb(deck_size, draw_size)
    if combinations <= config.max_combinations:
        logger.debug("Enumerating %d combinations", combinations)
        return True, combinations
    logger.debug(
        "%d combinations exceed %d, sampling %d draws",
        combinations,
        config.max_combinations,
        config.monte_carlo_samples,
    )
    return False, config.monte_carlo_samples


def choose_splits(num_opponents: int, board_count: int, combinations: int, config: EquityConfig) -> np.ndarray:
    """
    Splits to score for each of `combinations` enumerated draws.

    "all_splits" falls back to the positional split when scoring every split
    of every draw would exceed `config.max_split_showdowns`.
    """
    rule = config.split_rule
    if rule == "all_splits":
        splits = count_splits(num_opponents, board_count, rule)
        if combinations * splits > config.max_split_showdowns:
            logger.warning(
                "%d combinations x %d splits exceed %d showdowns, dealing lowest cards to opponents",
                combinations,
                splits,
                config.max_split_showdowns,
            )
            rule = "lowest_to_opponents"
    return draw_splits(num_opponents, board_count, rule)


# ============================================================================
# INPUT VALIDATION
# ============================================================================


def _to_cards(cards: CardsInput) -> List[Card]:
    if isinstance(cards, str):
        return cards_from_string(cards)
    return [to_card(card) for card in cards]


def _check_hand(cards: CardsInput, name: str) -> List[Card]:
    hand = _to_cards(cards)
    if len(hand) != HAND_SIZE:
        raise InvalidInputError(f"{name} must have {HAND_SIZE} cards, got {len(hand)}")
    return hand


def _check_board(cards: CardsInput) -> List[Card]:
    board = _to_cards(cards)
    if len(board) > BOARD_SIZE:
        raise InvalidInputError(f"Board can have 0-{BOARD_SIZE} cards, got {len(board)}")
    return board


def _check_distinct(cards: Sequence[Card]) -> None:
    seen = set()
    for card in cards:
        if card in seen:
            raise InvalidInputError(f"Cannot have duplicate cards: {card}")
        seen.add(card)


def remaining_deck(dead: Sequence[Card]) -> np.ndarray:
    """Card ids not in `dead`, ascending."""
    dead_ids = {card.id for card in dead}
    return np.array([i for i in range(1, NUM_CARDS + 1) if i not in dead_ids], dtype=np.int32)


# ============================================================================
# CALCULATOR
# ============================================================================


class EquityCalculator:
    """Estimates the hero's share of the pot for a hold'em hand."""

    def __init__(self, evaluator: LookupTableEvaluator, config: Optional[EquityConfig] = None):
        self._evaluator = evaluator
        self.config = config or EquityConfig()

    @property
    def evaluator(self) -> LookupTableEvaluator:
        return self._evaluator

    def equity(
        self,
        hand: CardsInput,
        board: CardsInput,
        opponents: Union[int, Sequence[CardsInput]],
        key: Optional[jax.Array] = None,
    ) -> float:
        """Equity against `opponents` random hands (int) or the listed hands."""
        if isinstance(opponents, (int, np.integer)) and not isinstance(opponents, bool):
            return self.equity_vs_random(hand, board, int(opponents), key=key)
        return self.equity_vs_hands(hand, board, opponents, key=key)

    def equity_vs_hands(
        self,
        hand: CardsInput,
        board: CardsInput,
        opponent_hands: Sequence[CardsInput],
        key: Optional[jax.Array] = None,
    ) -> float:
        """
        Equity against opponents whose hole cards are known.

        Averages over every completion of the board, or over random
        completions when there are more than `config.max_combinations`.
        """
        hand = _check_hand(hand, "Hand")
        board = _check_board(board)
        if isinstance(opponent_hands, (str, bytes)) or not opponent_hands:
            raise InvalidInputError("At least one opponent hand is required")
        opponents = [_check_hand(cards, "Opponent hand") for cards in opponent_hands]
        known = hand + board + [card for cards in opponents for card in cards]
        _check_distinct(known)

        deck = remaining_deck(known)
        missing = BOARD_SIZE - len(board)
        exact, _ = plan_completions(len(deck), missing, self.config)

        table = self._evaluator.table
        board_index = self._evaluator.add_cards(EMPTY_HANDLE, board).index
        hero = jnp.asarray(card_ids(hand))
        opponent_ids = jnp.asarray(np.stack([card_ids(cards) for cards in opponents]))

        def score(completions):
            return score_board_completions(table, board_index, hero, completions, opponent_ids, SHOWDOWN_SIZE)

        return average_score(self._completions(deck, missing, exact, key, self.config.batch_size), score)

    def equity_vs_random(
        self,
        hand: CardsInput,
        board: CardsInput,
        num_opponents: int,
        key: Optional[jax.Array] = None,
    ) -> float:
        """
        Equity against `num_opponents` opponents holding unknown cards.

        The missing board cards and the opponents' hole cards are drawn
        jointly from the remaining deck.
        """
        hand = _check_hand(hand, "Hand")
        board = _check_board(board)
        if isinstance(num_opponents, bool) or not isinstance(num_opponents, (int, np.integer)):
            raise InvalidInputError(f"Number of opponents must be an integer, got {num_opponents!r}")
        if num_opponents < 1:
            raise InvalidInputError(f"Need at least one opponent, got {num_opponents}")
        num_opponents = int(num_opponents)
        _check_distinct(hand + board)

        deck = remaining_deck(hand + board)
        missing = BOARD_SIZE - len(board)
        draw_size = 2 * num_opponents + missing
        if draw_size > len(deck):
            raise InvalidInputError(f"Not enough cards left to deal {num_opponents} opponents")

        exact, count = plan_completions(len(deck), draw_size, self.config)
        if exact:
            splits = choose_splits(num_opponents, missing, count, self.config)
        else:
            splits = draw_splits(num_opponents, missing, "lowest_to_opponents")
        batch_size = max(1, self.config.batch_size // splits.shape[0])

        table = self._evaluator.table
        board_index = self._evaluator.add_cards(EMPTY_HANDLE, board).index
        hero = jnp.asarray(card_ids(hand))
        split_ids = jnp.asarray(splits)

        def score(draws):
            return score_draws(table, board_index, hero, draws, split_ids, num_opponents, SHOWDOWN_SIZE)

        return average_score(self._completions(deck, draw_size, exact, key, batch_size), score)

    def _completions(
        self, deck: np.ndarray, draw_size: int, exact: bool, key: Optional[jax.Array], batch_size: int
    ) -> Iterator[jnp.ndarray]:
        if exact:
            return enumerate_draws(deck, draw_size, batch_size)
        if key is None:
            key = jax.random.PRNGKey(self.config.seed)
        return sample_draws(key, deck, draw_size, self.config.monte_carlo_samples, batch_size)
