"""
Constants of the HandRanks.dat perfect-hash transition table.
"""

# Number of int32 entries in the table
HAND_RANKS_COUNT = 32487834
HAND_RANKS_BYTES = HAND_RANKS_COUNT * 4

# Byte order of the persisted table (little-endian int32)
HAND_RANKS_DTYPE = "<i4"

# State index of an empty hand
ROOT_INDEX = 53

# Finalized values: category << 12 | subrank
CATEGORY_SHIFT = 12
SUBRANK_MASK = 0xFFF

# Hands with these card counts can be finalized
RANKED_HAND_SIZES = (5, 6, 7)
MAX_HAND_SIZE = 7

# Environment variable pointing at HandRanks.dat
HAND_RANKS_ENV = "HOLDEM_EQUITY_HANDRANKS"
