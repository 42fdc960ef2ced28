"""Protocol constants shared by the agent components."""

# Addresses
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Integer widths declared by the game contracts
UINT256_MAX = 2**256 - 1
UINT32_MAX = 2**32 - 1

# Time
SECONDS_PER_DAY = 24 * 60 * 60

# Storage retention
DEFAULT_RETENTION_DAYS = 7

# Planet queries
DEFAULT_SEARCH_RADIUS = 100
