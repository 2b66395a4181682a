from .constants import (
    CATEGORY_SHIFT,
    HAND_RANKS_BYTES,
    HAND_RANKS_COUNT,
    HAND_RANKS_ENV,
    MAX_HAND_SIZE,
    RANKED_HAND_SIZES,
    ROOT_INDEX,
    SUBRANK_MASK,
)
from .loader import decode_table, load_hand_ranks, resolve_table_path
