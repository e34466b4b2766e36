"""Decomposition of concrete URLs into the components patterns match on."""

from __future__ import annotations

import logging
import urllib.parse
from dataclasses import dataclass
from typing import Final

from sitesettings.constants import DEFAULT_PORTS

logger: Final = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedURL:
    """A URL reduced to protocol, host, effective port and path.

    ``path`` is the raw text following the authority (path, query and
    fragment), kept verbatim so exact-URL patterns can compare it.
    """

    protocol: str
    host: str
    port: int | None
    path: str
    explicit_port: bool = False


def parse_url(url: str) -> ParsedURL | None:
    """Split a URL into its matchable components.

    Args:
        url: Absolute URL such as ``https://www.brave.com:8080/a?b#c``

    Returns:
        ParsedURL, or None when the URL has no scheme, authority or host,
        or carries an invalid port
    """
    if not isinstance(url, str):
        return None

    raw = url.strip()
    try:
        parts = urllib.parse.urlsplit(raw)
        port = parts.port
    except ValueError as exc:
        logger.debug("Unparsable URL %r: %s", url, exc)
        return None

    if not parts.scheme or not parts.netloc or not parts.hostname:
        logger.debug("URL %r has no scheme or host", url)
        return None

    prefix = f"{parts.scheme}://{parts.netloc}"
    if not raw.lower().startswith(prefix.lower()):
        # urlsplit dropped characters, so the raw path can't be recovered
        logger.debug("URL %r does not round-trip through urlsplit", url)
        return None

    protocol = parts.scheme.lower()
    return ParsedURL(
        protocol=protocol,
        host=parts.hostname.lower(),
        port=port if port is not None else DEFAULT_PORTS.get(protocol),
        path=raw[len(prefix) :],
        explicit_port=port is not None,
    )


def host_pattern_for_url(url: str) -> str | None:
    """Build the site-level pattern for a URL.

    The explicit port is kept only when it differs from the protocol
    default, so ``https://www.brave.com:443/x`` gives ``https://www.brave.com``.

    Args:
        url: Absolute URL

    Returns:
        Pattern string like ``https://www.brave.com``, or None for bad URLs
    """
    parsed = parse_url(url)
    if parsed is None:
        return None

    host = f"[{parsed.host}]" if ":" in parsed.host else parsed.host
    if parsed.explicit_port and parsed.port != DEFAULT_PORTS.get(parsed.protocol):
        return f"{parsed.protocol}://{host}:{parsed.port}"
    return f"{parsed.protocol}://{host}"
