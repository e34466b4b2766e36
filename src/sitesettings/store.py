"""Immutable store of per-pattern site settings.

Every write returns a new ``SiteSettingsStore``; earlier snapshots stay
valid and never share mutable records with later ones.

Examples:
    store = SiteSettingsStore()
    store = merge_setting(store, "https://*.brave.com", "shields", False)
    store = merge_setting(store, "https://www.brave.com", "zoom", 1.5)
    resolve_for_url(store, "https://www.brave.com/about")
    # {"shields": False, "zoom": 1.5}
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Final

from sitesettings.patterns.matching import Specificity, covers, matches_url, specificity
from sitesettings.patterns.parser import PatternDescriptor, parse_pattern
from sitesettings.patterns.url import parse_url

logger: Final = logging.getLogger(__name__)

SettingsRecord = dict[str, Any]


@dataclass(frozen=True)
class _Entry:
    record: Mapping[str, Any]
    seq: int


def _copy_record(record: Mapping[str, Any]) -> SettingsRecord:
    return {key: copy.deepcopy(value) for key, value in record.items()}


def _fold(layers: Iterable[tuple[Specificity, int, _Entry]]) -> SettingsRecord | None:
    """Overlay records from least to most specific."""
    result: SettingsRecord | None = None
    for _, _, entry in sorted(layers, key=lambda layer: (layer[0], layer[1])):
        if result is None:
            result = {}
        result.update(_copy_record(entry.record))
    return result


class SiteSettingsStore:
    """Snapshot mapping pattern strings to settings records.

    Each pattern carries a write sequence number bumped on every merge into
    it; it only breaks ties between equally specific patterns.
    """

    __slots__ = ("_entries", "_next_seq")

    def __init__(self) -> None:
        self._entries: Mapping[str, _Entry] = MappingProxyType({})
        self._next_seq = 0

    @classmethod
    def _from_entries(cls, entries: dict[str, _Entry], next_seq: int) -> SiteSettingsStore:
        store = cls()
        store._entries = MappingProxyType(entries)
        store._next_seq = next_seq
        return store

    @classmethod
    def from_mapping(cls, sites: Mapping[str, Mapping[str, Any]]) -> SiteSettingsStore:
        """Build a store pre-seeded from ``{pattern: {key: value}}``.

        Patterns receive write sequence numbers in iteration order.

        Args:
            sites: Mapping of pattern to settings record

        Returns:
            New store holding copies of the records
        """
        entries = {
            str(pattern): _Entry(MappingProxyType(_copy_record(record)), seq)
            for seq, (pattern, record) in enumerate(sites.items())
        }
        return cls._from_entries(entries, len(entries))

    # ---- writes ----
    def merge(self, pattern: str, key: str, value: Any) -> SiteSettingsStore:
        """Return a new store with ``key`` set to ``value`` under ``pattern``.

        Other keys of the pattern's record are preserved. Patterns that
        do not parse are stored verbatim and simply never match.
        """
        entries = dict(self._entries)
        existing = entries.get(pattern)
        record = dict(existing.record) if existing else {}
        record[key] = copy.deepcopy(value)
        entries[pattern] = _Entry(MappingProxyType(record), self._next_seq)
        return SiteSettingsStore._from_entries(entries, self._next_seq + 1)

    # ---- reads ----
    def get(self, pattern: str) -> SettingsRecord | None:
        """Exact record stored under ``pattern``, without any overlay."""
        entry = self._entries.get(pattern)
        return _copy_record(entry.record) if entry else None

    def patterns(self) -> list[str]:
        """Stored patterns, most specific first."""
        return [pattern for pattern, _ in self._ranked(reverse=True)]

    def resolve_for_url(self, url: str) -> SettingsRecord | None:
        """Effective settings for a concrete URL.

        Args:
            url: Absolute URL

        Returns:
            Merged record of every matching pattern, or None if nothing
            matches or the URL cannot be parsed
        """
        parsed = parse_url(url)
        if parsed is None:
            return None

        layers = []
        for pattern, entry in self._entries.items():
            descriptor = parse_pattern(pattern)
            if descriptor is not None and matches_url(descriptor, parsed):
                layers.append((specificity(descriptor), entry.seq, entry))

        result = _fold(layers)
        logger.debug("Resolved %s from %d pattern(s)", url, len(layers))
        return result

    def resolve_for_host_pattern(self, pattern: str) -> SettingsRecord | None:
        """Settings for a literal pattern, overlaid on its ancestors.

        The pattern's own record is the top layer. Beneath it sit stored
        patterns that match every URL the literal does and are no more
        specific than it. More specific patterns are never included.

        Args:
            pattern: Pattern string, looked up verbatim

        Returns:
            Merged record, or None if neither the pattern nor an ancestor
            is stored
        """
        layers: list[tuple[Specificity, int, _Entry]] = []
        target = parse_pattern(pattern)
        if target is not None:
            rank = specificity(target)
            for other, entry in self._entries.items():
                if other == pattern:
                    continue
                descriptor = parse_pattern(other)
                if descriptor is None:
                    continue
                other_rank = specificity(descriptor)
                if other_rank <= rank and covers(descriptor, target):
                    layers.append((other_rank, entry.seq, entry))

        result = _fold(layers)
        exact = self._entries.get(pattern)
        if exact is not None:
            result = result or {}
            result.update(_copy_record(exact.record))
        return result

    # ---- serialisation helpers ----
    def to_dict(self) -> dict[str, SettingsRecord]:
        """Plain ``{pattern: record}`` copy in write order."""
        ordered = sorted(self._entries.items(), key=lambda item: item[1].seq)
        return {pattern: _copy_record(entry.record) for pattern, entry in ordered}

    def _ranked(self, reverse: bool = False) -> list[tuple[str, _Entry]]:
        def sort_key(item: tuple[str, _Entry]) -> tuple[Specificity, int]:
            descriptor: PatternDescriptor | None = parse_pattern(item[0])
            rank = specificity(descriptor) if descriptor else (-1, 0, 0, 0, 0)
            return rank, item[1].seq

        return sorted(self._entries.items(), key=sort_key, reverse=reverse)

    def ranked_dict(self) -> dict[str, SettingsRecord]:
        """Plain ``{pattern: record}`` copy ordered least to most specific."""
        return {pattern: _copy_record(entry.record) for pattern, entry in self._ranked()}

    # ---- container protocol ----
    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.to_dict())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SiteSettingsStore):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SiteSettingsStore({self.to_dict()!r})"


def merge_setting(store: SiteSettingsStore, pattern: str, key: str, value: Any) -> SiteSettingsStore:
    """Upsert one setting; returns the new store."""
    return store.merge(pattern, key, value)


def resolve_for_host_pattern(store: SiteSettingsStore, pattern: str) -> SettingsRecord | None:
    """Settings for a literal pattern (see ``SiteSettingsStore.resolve_for_host_pattern``)."""
    return store.resolve_for_host_pattern(pattern)


def resolve_for_url(store: SiteSettingsStore, url: str) -> SettingsRecord | None:
    """Effective settings for a URL (see ``SiteSettingsStore.resolve_for_url``)."""
    return store.resolve_for_url(url)
