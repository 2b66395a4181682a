"""
Shared fixtures.

The real HandRanks.dat is a 124MB generated artifact, so most tests run
against a synthetic table of the same length. It is a genuine commutative
automaton: a state encodes (cards folded, sum of card ids), and a finished
hand is worth toy_value(sum of its card ids). That is enough to exercise
every evaluator transition and to check equity results against brute force.
"""

import os

import numpy as np
import pytest

from holdem_equity.poker_eval.evaluator import LookupTableEvaluator
from holdem_equity.poker_eval.tables import HAND_RANKS_COUNT, HAND_RANKS_ENV, MAX_HAND_SIZE, ROOT_INDEX

# Card id sums stay below this for up to 6 cards
TOY_SUM_SLOTS = 400


def toy_base(count, total):
    """Index of the state holding `count` cards whose ids add up to `total`."""
    return ROOT_INDEX * (1 + count * TOY_SUM_SLOTS + total)


def toy_value(total):
    """Finalized value of a hand whose card ids add up to `total`; category 1..9."""
    return (((total % 9) + 1) << 12) | total


def toy_rank(card_ids):
    return toy_value(sum(card_ids))


def build_toy_table() -> np.ndarray:
    table = np.zeros(HAND_RANKS_COUNT, dtype=np.int32)
    ids = np.arange(1, 53)
    for count in range(MAX_HAND_SIZE):
        totals = np.arange(52 * count + 1)
        bases = toy_base(count, totals)
        slots = bases[:, None] + ids[None, :]
        next_totals = totals[:, None] + ids[None, :]
        if count + 1 < MAX_HAND_SIZE:
            table[slots] = toy_base(count + 1, next_totals)
        else:
            # Seventh card: the next state is the hand value itself
            table[slots] = toy_value(next_totals)
        if count in (5, 6):
            table[bases] = toy_value(totals)
    return table


@pytest.fixture(scope="session")
def toy_table():
    return build_toy_table()


@pytest.fixture(scope="session")
def toy_evaluator(toy_table):
    return LookupTableEvaluator(toy_table)


@pytest.fixture(scope="session")
def hand_ranks_evaluator():
    """Evaluator over the real table; skips when HandRanks.dat is not available."""
    path = os.environ.get(HAND_RANKS_ENV)
    if not path or not os.path.isfile(path):
        pytest.skip(f"{HAND_RANKS_ENV} does not point at HandRanks.dat")
    return LookupTableEvaluator.from_file(path)
