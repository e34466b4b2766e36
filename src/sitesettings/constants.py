"""Shared constants for pattern parsing and configuration."""

from typing import Final

# Pattern that applies to every URL
MATCH_ALL: Final = "*"

# Wildcard used for protocol, host and port components
WILDCARD: Final = "*"

# Dual-protocol markers: "http?" and "https?" both mean http or https
DUAL_PROTOCOL_MARKERS: Final = frozenset({"http?", "https?"})
DUAL_PROTOCOLS: Final = frozenset({"http", "https"})

# Ports assumed when a URL does not name one
DEFAULT_PORTS: Final[dict[str, int]] = {
    "http": 80,
    "https": 443,
    "ws": 80,
    "wss": 443,
    "ftp": 21,
}

# Environment variable that points at the configuration file
CONFIG_ENV_VAR: Final = "SITESETTINGS_CONFIG"

# Store document format version
STORE_VERSION: Final = 1
