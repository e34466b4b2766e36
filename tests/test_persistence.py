from pathlib import Path

import pytest
import yaml
from sitesettings.errors import StoreFileError, StoreFormatError
from sitesettings.persistence import dump_store, load_store, load_store_file, save_store_file
from sitesettings.store import SiteSettingsStore, merge_setting, resolve_for_url


STORE_YAML = """\
version: 1
sites:
  "*":
    javascript: true
  "https://*.brave.com":
    shields: false
    zoom: 1.25
  "https://www.brave.com/":
    notes: [a, b]
"""


@pytest.mark.parametrize("filename", ["sites.yaml", "sites.json"])
def test_round_trip_preserves_every_mapping(
    tmp_path: Path, layered_store: SiteSettingsStore, filename: str
) -> None:
    store = merge_setting(layered_store, "https://www.brave.com/", "nested", {"a": [1, None]})
    path = tmp_path / filename

    save_store_file(store, path)
    loaded = load_store_file(path)

    assert loaded == store
    assert loaded.to_dict() == store.to_dict()
    assert resolve_for_url(loaded, "https://www.brave.com") == resolve_for_url(
        store, "https://www.brave.com"
    )


def test_round_trip_keeps_write_order_for_ties(tmp_path: Path) -> None:
    store = merge_setting(SiteSettingsStore(), "https://*.brave.com", "k", 1)
    store = merge_setting(store, "https://*.www.brave.com", "k", 2)
    path = tmp_path / "sites.yaml"

    save_store_file(store, path)
    loaded = load_store_file(path)
    assert resolve_for_url(loaded, "https://www.brave.com") == {"k": 2}


def test_ranked_dump_orders_least_specific_first(layered_store: SiteSettingsStore) -> None:
    document = dump_store(layered_store, ranked=True)
    assert document["version"] == 1
    assert list(document["sites"]) == [
        "*",
        "https://*.brave.com",
        "https://www.brave.com:*",
        "https://www.brave.com",
    ]


def test_load_store_file_yaml(tmp_path: Path) -> None:
    path = tmp_path / "sites.yaml"
    path.write_text(STORE_YAML)

    store = load_store_file(path)
    assert len(store) == 3
    assert resolve_for_url(store, "https://www.brave.com/") == {
        "javascript": True,
        "shields": False,
        "zoom": 1.25,
        "notes": ["a", "b"],
    }


def test_saved_yaml_is_readable(tmp_path: Path, layered_store: SiteSettingsStore) -> None:
    path = tmp_path / "nested" / "sites.yaml"
    save_store_file(layered_store, path)
    data = yaml.safe_load(path.read_text())
    assert data["sites"]["*"] == {"prop1": 4, "prop2": 4, "prop3": 4, "prop4": 4}


def test_missing_file_is_empty_store(tmp_path: Path) -> None:
    store = load_store_file(tmp_path / "missing.yaml")
    assert len(store) == 0


def test_empty_document_is_empty_store() -> None:
    assert len(load_store(None)) == 0


@pytest.mark.parametrize(
    "data",
    [
        {"version": 2, "sites": {}},
        {"sites": {"*": "not a record"}},
        {"sites": {}, "extra": True},
        ["*"],
    ],
)
def test_invalid_documents_raise_format_error(data: object) -> None:
    with pytest.raises(StoreFormatError):
        load_store(data)


def test_undecodable_file_raises_file_error(tmp_path: Path) -> None:
    path = tmp_path / "sites.json"
    path.write_text("{not json")
    with pytest.raises(StoreFileError) as info:
        load_store_file(path)
    assert info.value.path == path
    assert isinstance(info.value.original_error, ValueError)
