"""
Decoding and loading of the HandRanks.dat transition table.
"""

import logging
import os
from typing import Optional, Union

import numpy as np

from ...errors import InvalidEvaluatorConfigError
from .constants import HAND_RANKS_BYTES, HAND_RANKS_COUNT, HAND_RANKS_DTYPE, HAND_RANKS_ENV

logger = logging.getLogger(__name__)

TableBuffer = Union[bytes, bytearray, memoryview, np.ndarray]


def decode_table(buffer: TableBuffer) -> np.ndarray:
    """
    Decode a table buffer into a flat int32 array.

    Args:
        buffer: Raw little-endian bytes, or an already decoded 1-D integer array

    Returns:
        Array of exactly HAND_RANKS_COUNT int32 entries
    """
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        if len(buffer) != HAND_RANKS_BYTES:
            raise InvalidEvaluatorConfigError(
                f"Hand ranks blob has {len(buffer)} bytes, expected {HAND_RANKS_BYTES}"
            )
        return np.frombuffer(buffer, dtype=HAND_RANKS_DTYPE).astype(np.int32)

    # Accept numpy and jax arrays alike
    if not hasattr(buffer, "shape") or not hasattr(buffer, "dtype"):
        raise InvalidEvaluatorConfigError(f"Unsupported hand ranks buffer: {type(buffer).__name__}")
    table = np.asarray(buffer)
    if table.ndim != 1 or table.shape[0] != HAND_RANKS_COUNT:
        raise InvalidEvaluatorConfigError(
            f"Hand ranks table has shape {table.shape}, expected ({HAND_RANKS_COUNT},)"
        )
    if not np.issubdtype(table.dtype, np.integer):
        raise InvalidEvaluatorConfigError(f"Hand ranks table must be integers, got {table.dtype}")
    return table.astype(np.int32, copy=False)


def resolve_table_path(path: Optional[str] = None) -> str:
    """Explicit path first, then the HOLDEM_EQUITY_HANDRANKS environment variable."""
    path = path or os.environ.get(HAND_RANKS_ENV)
    if not path:
        raise InvalidEvaluatorConfigError(
            f"No hand ranks table given; pass a path or set {HAND_RANKS_ENV}"
        )
    return path


def load_hand_ranks(path: Optional[str] = None) -> np.ndarray:
    """
    Read HandRanks.dat from disk.

    The file size is checked before anything is read, so a truncated or
    foreign file fails without allocating the full table.
    """
    path = resolve_table_path(path)
    if not os.path.isfile(path):
        raise InvalidEvaluatorConfigError(f"Missing hand ranks table: {path}")

    size = os.path.getsize(path)
    if size != HAND_RANKS_BYTES:
        raise InvalidEvaluatorConfigError(
            f"Invalid hand ranks table {path}: {size} bytes, expected {HAND_RANKS_BYTES}"
        )

    logger.info("Loading hand ranks table from %s", path)
    table = np.fromfile(path, dtype=HAND_RANKS_DTYPE)
    return decode_table(table)
