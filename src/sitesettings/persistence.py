"""Reading and writing stores as YAML or JSON documents.

Document layout::

    version: 1
    sites:
      "https://*.brave.com":
        shields: false
      "https://www.brave.com":
        zoom: 1.5

Pattern order in ``sites`` is the write order restored on load.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sitesettings.constants import STORE_VERSION
from sitesettings.errors import StoreFileError, StoreFormatError
from sitesettings.store import SiteSettingsStore

logger: Final = logging.getLogger(__name__)


class StoreDocument(BaseModel):
    """Schema of a serialised store."""

    model_config = ConfigDict(extra="forbid")

    version: int = Field(STORE_VERSION, ge=1, le=STORE_VERSION, description="Document format version")
    sites: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Pattern to settings record"
    )


def dump_store(store: SiteSettingsStore, ranked: bool = False) -> dict[str, Any]:
    """Convert a store to a plain document.

    Args:
        store: Store to serialise
        ranked: Order patterns least to most specific instead of by write order

    Returns:
        Document dictionary
    """
    sites = store.ranked_dict() if ranked else store.to_dict()
    return StoreDocument(version=STORE_VERSION, sites=sites).model_dump()


def load_store(data: Any, path: Path | None = None) -> SiteSettingsStore:
    """Build a store from a decoded document.

    Args:
        data: Decoded YAML/JSON content; None is treated as empty
        path: Source file, for error messages

    Returns:
        Store seeded with the document's sites

    Raises:
        StoreFormatError: If the document does not match the schema
    """
    if data is None:
        return SiteSettingsStore()
    try:
        document = StoreDocument.model_validate(data)
    except ValidationError as err:
        raise StoreFormatError(f"Invalid store document:\n{err}", path) from err
    return SiteSettingsStore.from_mapping(document.sites)


def _is_json(path: Path) -> bool:
    return path.suffix.lower() == ".json"


def load_store_file(path: Path) -> SiteSettingsStore:
    """Load a store from disk; a missing file gives an empty store.

    Raises:
        StoreFileError: If the file cannot be read or decoded
        StoreFormatError: If the content does not match the schema
    """
    if not path.exists():
        logger.info("Store file %s not found, starting empty", path)
        return SiteSettingsStore()

    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text) if _is_json(path) else yaml.safe_load(text)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise StoreFileError(f"Unable to read store: {exc}", path, exc) from exc

    store = load_store(data, path)
    logger.info("Loaded %d pattern(s) from %s", len(store), path)
    return store


def save_store_file(store: SiteSettingsStore, path: Path, ranked: bool = False) -> None:
    """Write a store to disk as YAML, or JSON for ``.json`` paths.

    Raises:
        StoreFileError: If the file cannot be written
    """
    document = dump_store(store, ranked=ranked)
    if _is_json(path):
        text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    else:
        text = yaml.safe_dump(document, sort_keys=False, allow_unicode=True)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise StoreFileError(f"Unable to write store: {exc}", path, exc) from exc
    logger.info("Saved %d pattern(s) to %s", len(store), path)
