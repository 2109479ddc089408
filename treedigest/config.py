"""Global configuration: constants shared by the digest engine and walker."""

from pathlib import Path

VERSION = (0, 1, 1)
VERSION_STRING = ".".join(str(v) for v in VERSION)

# Chunk size used when streaming file content into a digest
BUFFER_SIZE = 65536

DEFAULT_HASH_ALGO = "sha256"

# Squash output carries "[squash][vN]" so v1 and v2 lines are never confused
SQUASH_LABEL = "squash"
SQUASH_VERSIONS = (1, 2)
DEFAULT_SQUASH_VERSION = 2

# Fixed inner algorithms, independent of the user-selected one
SQUASH1_ALGO = "md5"
SQUASH2_ALGO = "sha1"

# Shortest hex string accepted for verification (128 bit)
MIN_HEXSUM_LENGTH = 32

DEFAULT_CONFIG_PATH = Path("~/.config/treedigest/config.json")
