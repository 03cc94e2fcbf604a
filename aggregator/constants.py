"""Protocol constants for the swap aggregator.

Centralizes fee, deadline and path parameters.
"""

# Fee expressed in basis points of the input amount.
# UniswapV2 charges 0.3%, i.e. the familiar 997/1000 factor.
FEE_DENOMINATOR = 10_000
DEFAULT_FEE_BPS = 30

# Default slack added to "now" when the caller gives no swap deadline
DEFAULT_DEADLINE_SECONDS = 20 * 60

# Paths are [source, destination] or [source, connector, destination]
MIN_PATH_LENGTH = 2
MAX_PATH_LENGTH = 3
