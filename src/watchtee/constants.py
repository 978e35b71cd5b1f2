"""Constants for the watchtee supervisor."""

# Seconds between iterations when neither --delay nor WATCHTEE_DELAY is given
DEFAULT_DELAY_S = 1.0

# Pause after each iteration so the tail thread catches up before the status line
SETTLE_PAUSE_S = 0.5

# Tail backoff after an empty read
DEFAULT_POLL_INTERVAL_S = 0.05

# Max bytes pulled from the sink per tail read
TAIL_CHUNK_SIZE = 64 * 1024

# Prefix for anonymous log files
TEMP_LOG_PREFIX = "watchtee-"

SPARKLE_SYMBOLS = ["🟈", "✹", "*", "✧", "⭑", "✯", "✵", "✦", "☆", "✰", "꙳"]

TRUE_VALUES = {"1", "true", "yes", "on"}
