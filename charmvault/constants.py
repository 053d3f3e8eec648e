"""
CharmVault Constants

All contract constants defined here for single source of truth.
"""

from typing import Final, Dict

# ==============================================================================
# ENCODING
# ==============================================================================

BIG_ENDIAN: Final[str] = "big"
LITTLE_ENDIAN: Final[str] = "little"

HASH_SIZE: Final[int] = 32                      # SHA-256 output
TXID_SIZE: Final[int] = 32                      # Bitcoin txid
TXID_HEX_LENGTH: Final[int] = TXID_SIZE * 2
UTXO_ID_SEPARATOR: Final[str] = ":"
MAX_U32: Final[int] = 0xFFFFFFFF
MAX_U64: Final[int] = 0xFFFFFFFFFFFFFFFF

# ==============================================================================
# APP TAGS
# ==============================================================================

TAG_NFT: Final[str] = "n"                       # Non-fungible charm
TAG_TOKEN: Final[str] = "t"                     # Fungible charm (unsupported)

SUPPORTED_TAGS: Final[frozenset] = frozenset({TAG_NFT})

# ==============================================================================
# BENEFICIARIES
# ==============================================================================

PERCENTAGE_TOTAL: Final[int] = 100
MIN_PERCENTAGE: Final[int] = 0
MAX_PERCENTAGE: Final[int] = 100

# ==============================================================================
# STATUS ENCODING (payload byte)
# ==============================================================================

STATUS_ACTIVE: Final[int] = 0
STATUS_TRIGGERED: Final[int] = 1
STATUS_DISTRIBUTED: Final[int] = 2

# ==============================================================================
# DISTRIBUTION POLICY
# ==============================================================================

DISTRIBUTION_MODE_DEFERRED: Final[str] = "deferred"
DISTRIBUTION_MODE_STRICT: Final[str] = "strict"
DISTRIBUTION_MODES: Final[frozenset] = frozenset({
    DISTRIBUTION_MODE_DEFERRED,
    DISTRIBUTION_MODE_STRICT,
})

DEFAULT_DISTRIBUTION_FEE_SATS: Final[int] = 2000   # Charms proof fee estimate

# ==============================================================================
# SPELL FORMAT
# ==============================================================================

SPELL_VERSION: Final[int] = 8
SPELL_APP_KEY_PREFIX: Final[str] = "$"

# Witness keys accepted for strict distribution
WITNESS_CURRENT_HEIGHT_KEY: Final[str] = "current_height"

# ==============================================================================
# CLI EXIT CODES
# ==============================================================================

EXIT_ACCEPT: Final[int] = 0
EXIT_REJECT: Final[int] = 1
EXIT_BAD_INPUT: Final[int] = 2

TAG_NAMES: Final[Dict[str, str]] = {
    TAG_NFT: "nft",
    TAG_TOKEN: "token",
}
