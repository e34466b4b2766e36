"""Parser for site setting patterns.

Recognised shapes::

    *                              match-all
    https://*                      protocol-only
    https://www.brave.com          host-only (any port)
    https://www.brave.com:*        host with wildcard port
    https://www.brave.com:8080     host with exact port
    https://*.brave.com[:port]     host plus every subdomain
    https://www.brave.com/path     exact URL

The protocol may be a single scheme, ``http?`` or ``https?`` (http or https)
or ``*``.
Parsing is total: anything else yields None and never matches.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Final

from sitesettings.constants import (
    DEFAULT_PORTS,
    DUAL_PROTOCOL_MARKERS,
    DUAL_PROTOCOLS,
    MATCH_ALL,
    WILDCARD,
)

logger: Final = logging.getLogger(__name__)

_PATTERN_RE: Final = re.compile(
    r"""
    ^(?P<protocol>\*|[a-z][a-z0-9+.\-]*\??)
    ://
    (?P<host>\*|(?:\*\.)?[^/:?#*\[\]\s]+|\[[0-9a-f:.]+\])
    (?::(?P<port>\*|\d{1,5}))?
    (?P<path>[/?#].*)?$
    """,
    re.IGNORECASE | re.VERBOSE | re.DOTALL,
)


class PatternKind(Enum):
    """Shape of a parsed pattern."""

    MATCH_ALL = "match-all"
    PROTOCOL_ONLY = "protocol-only"
    HOST_ONLY = "host-only"
    HOST_PORT = "host-port"
    HOST_WILDCARD_PORT = "host-wildcard-port"
    SUBDOMAIN_WILDCARD = "subdomain-wildcard"
    EXACT_URL = "exact-url"


class HostMatch(Enum):
    """How the host component is compared."""

    ANY = 0
    SUFFIX = 1
    EXACT = 2


@dataclass(frozen=True)
class HostSpec:
    """Host part of a pattern; ``value`` is the base domain for SUFFIX."""

    match: HostMatch
    value: str = ""

    def accepts(self, host: str) -> bool:
        """Check whether a concrete (lower-cased) host is accepted."""
        if self.match is HostMatch.ANY:
            return True
        if self.match is HostMatch.EXACT:
            return host == self.value
        return host == self.value or host.endswith("." + self.value)


ANY_HOST: Final = HostSpec(HostMatch.ANY)


@dataclass(frozen=True)
class PatternDescriptor:
    """Structured form of a pattern string.

    Attributes:
        kind: Which recognised shape the pattern had
        protocols: Accepted protocols, or None for any
        host: Host specification
        port: None when omitted, ``"*"`` for the explicit wildcard, else a number
        path: Exact path+query+fragment for exact-URL patterns
    """

    kind: PatternKind
    protocols: frozenset[str] | None = None
    host: HostSpec = ANY_HOST
    port: int | str | None = None
    path: str | None = None

    @property
    def is_match_all(self) -> bool:
        return self.kind is PatternKind.MATCH_ALL

    @property
    def any_port(self) -> bool:
        """Omitted and ``*`` ports accept every port, except on exact URLs."""
        if self.port is None:
            return self.path is None
        return self.port == WILDCARD

    def port_for(self, protocol: str) -> int | None:
        """Port a URL of ``protocol`` must use; exact URLs default to the protocol's port."""
        if isinstance(self.port, int):
            return self.port
        return DEFAULT_PORTS.get(protocol)


MATCH_ALL_DESCRIPTOR: Final = PatternDescriptor(PatternKind.MATCH_ALL)


def _parse_protocols(raw: str) -> frozenset[str] | None:
    if raw == WILDCARD:
        return None
    if raw in DUAL_PROTOCOL_MARKERS:
        return DUAL_PROTOCOLS
    if raw.endswith("?"):
        raise ValueError(f"unsupported optional protocol {raw!r}")
    return frozenset({raw})


def _parse_host(raw: str) -> HostSpec:
    if raw == WILDCARD:
        return ANY_HOST
    if raw.startswith("*."):
        base = raw[2:]
        if not base or base.startswith(".") or ".." in base:
            raise ValueError(f"bad wildcard domain {raw!r}")
        return HostSpec(HostMatch.SUFFIX, base)
    if raw.startswith("["):
        return HostSpec(HostMatch.EXACT, raw[1:-1])
    return HostSpec(HostMatch.EXACT, raw)


def _kind_for(host: HostSpec, port: int | str | None, path: str | None) -> PatternKind:
    if path is not None:
        return PatternKind.EXACT_URL
    if host.match is HostMatch.ANY:
        return PatternKind.PROTOCOL_ONLY
    if host.match is HostMatch.SUFFIX:
        return PatternKind.SUBDOMAIN_WILDCARD
    if port is None:
        return PatternKind.HOST_ONLY
    if port == WILDCARD:
        return PatternKind.HOST_WILDCARD_PORT
    return PatternKind.HOST_PORT


@lru_cache(maxsize=1024)
def parse_pattern(pattern: str) -> PatternDescriptor | None:
    """Parse a pattern string into a descriptor.

    Args:
        pattern: Pattern such as ``https?://*.brave.com:*``

    Returns:
        PatternDescriptor, or None if the string is not a recognised shape
    """
    if not isinstance(pattern, str):
        return None

    text = pattern.strip()
    if text == MATCH_ALL:
        return MATCH_ALL_DESCRIPTOR

    m = _PATTERN_RE.match(text)
    if m is None:
        logger.debug("Pattern %r is not a recognised shape", pattern)
        return None

    raw_port = m.group("port")
    try:
        protocols = _parse_protocols(m.group("protocol").lower())
        host = _parse_host(m.group("host").lower())
        if raw_port is None or raw_port == WILDCARD:
            port: int | str | None = raw_port
        else:
            port = int(raw_port)
            if port > 65535:
                raise ValueError(f"port {port} out of range")
    except ValueError as exc:
        logger.debug("Pattern %r rejected: %s", pattern, exc)
        return None

    path = m.group("path")
    return PatternDescriptor(
        kind=_kind_for(host, port, path),
        protocols=protocols,
        host=host,
        port=port,
        path=path,
    )
