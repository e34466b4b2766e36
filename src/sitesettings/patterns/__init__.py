"""Pattern grammar, URL decomposition and matching."""

from .matching import covers, matches_url, specificity
from .parser import HostMatch, HostSpec, PatternDescriptor, PatternKind, parse_pattern
from .url import ParsedURL, host_pattern_for_url, parse_url

__all__ = [
    "HostMatch",
    "HostSpec",
    "ParsedURL",
    "PatternDescriptor",
    "PatternKind",
    "covers",
    "host_pattern_for_url",
    "matches_url",
    "parse_pattern",
    "parse_url",
    "specificity",
]
