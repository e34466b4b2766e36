"""Site settings package - pattern-keyed settings store, matching and persistence."""

__version__ = "0.1.0"

from .errors import SiteSettingsError, StoreFileError, StoreFormatError
from .patterns import host_pattern_for_url, parse_pattern, parse_url
from .persistence import dump_store, load_store, load_store_file, save_store_file
from .store import (
    SiteSettingsStore,
    merge_setting,
    resolve_for_host_pattern,
    resolve_for_url,
)

# Define what gets imported with: from sitesettings import *
__all__ = [
    "SiteSettingsError",
    "SiteSettingsStore",
    "StoreFileError",
    "StoreFormatError",
    "dump_store",
    "host_pattern_for_url",
    "load_store",
    "load_store_file",
    "merge_setting",
    "parse_pattern",
    "parse_url",
    "resolve_for_host_pattern",
    "resolve_for_url",
    "save_store_file",
]
