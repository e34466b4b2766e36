"""Pattern matching against URLs and specificity ranking."""

from __future__ import annotations

from sitesettings.constants import WILDCARD
from sitesettings.patterns.parser import HostMatch, PatternDescriptor
from sitesettings.patterns.url import ParsedURL

Specificity = tuple[int, int, int, int, int]


def matches_url(descriptor: PatternDescriptor, url: ParsedURL) -> bool:
    """Check whether a parsed pattern applies to a parsed URL.

    Args:
        descriptor: Parsed pattern
        url: Parsed URL

    Returns:
        True if protocol, host, port and (for exact URLs) path all match
    """
    if descriptor.is_match_all:
        return True
    if descriptor.protocols is not None and url.protocol not in descriptor.protocols:
        return False
    if not descriptor.host.accepts(url.host):
        return False
    if not descriptor.any_port and descriptor.port_for(url.protocol) != url.port:
        return False
    return descriptor.path is None or descriptor.path == url.path


def _host_covers(outer: PatternDescriptor, inner: PatternDescriptor) -> bool:
    if outer.host.match is HostMatch.ANY:
        return True
    if inner.host.match is HostMatch.ANY:
        return False
    if outer.host.match is HostMatch.EXACT:
        return inner.host.match is HostMatch.EXACT and inner.host.value == outer.host.value
    # A suffix spec covers any host or base domain inside its own domain
    return outer.host.accepts(inner.host.value)


def _port_covers(outer: PatternDescriptor, inner: PatternDescriptor) -> bool:
    if inner.any_port:
        return False
    if inner.protocols is None:
        return inner.port == outer.port
    return all(outer.port_for(p) == inner.port_for(p) for p in inner.protocols)


def covers(outer: PatternDescriptor, inner: PatternDescriptor) -> bool:
    """Check whether every URL matched by ``inner`` is also matched by ``outer``.

    Args:
        outer: Candidate ancestor pattern
        inner: Pattern being resolved

    Returns:
        True if ``outer`` is at least as broad as ``inner``
    """
    if outer.is_match_all:
        return True
    if inner.is_match_all:
        return False
    if outer.protocols is not None:
        if inner.protocols is None or not inner.protocols <= outer.protocols:
            return False
    if not _host_covers(outer, inner):
        return False
    if not outer.any_port and not _port_covers(outer, inner):
        return False
    return outer.path is None or outer.path == inner.path


def specificity(descriptor: PatternDescriptor) -> Specificity:
    """Rank a pattern; larger tuples are more specific.

    Order of significance: not match-all, exact path, host
    (exact > subdomain > any), port (exact > omitted > ``*``),
    protocol (single > dual > any).
    """
    if descriptor.is_match_all:
        return (0, 0, 0, 0, 0)

    if descriptor.port is None:
        port_rank = 1
    elif descriptor.port == WILDCARD:
        port_rank = 0
    else:
        port_rank = 2

    if descriptor.protocols is None:
        protocol_rank = 0
    else:
        protocol_rank = 2 if len(descriptor.protocols) == 1 else 1

    return (
        1,
        1 if descriptor.path is not None else 0,
        descriptor.host.match.value,
        port_rank,
        protocol_rank,
    )
