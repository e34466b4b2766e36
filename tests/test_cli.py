from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from sitesettings.cli import app
from sitesettings.persistence import load_store_file, save_store_file
from sitesettings.store import SiteSettingsStore

runner = CliRunner()


@pytest.fixture
def store_file(tmp_path: Path, layered_store: SiteSettingsStore) -> Path:
    path = tmp_path / "sites.yaml"
    save_store_file(layered_store, path)
    return path


@pytest.fixture
def config_file(tmp_path: Path, store_file: Path) -> Path:
    path = tmp_path / "sitesettings.yaml"
    path.write_text(f"store_file: {store_file}\nlog_level: WARNING\n")
    return path


def test_help() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "url" in result.output


def test_url_command(store_file: Path) -> None:
    result = runner.invoke(app, ["url", "https://www.brave.com/", "--store", str(store_file)])
    assert result.exit_code == 0
    assert yaml.safe_load(result.output) == {"prop1": 1, "prop2": 2, "prop3": 3, "prop4": 4}


def test_url_command_uses_config_store(config_file: Path) -> None:
    result = runner.invoke(app, ["url", "http://example.com", "--config", str(config_file)])
    assert result.exit_code == 0
    assert yaml.safe_load(result.output)["prop1"] == 4


def test_url_command_without_match(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["url", "https://www.brave.com/", "--store", str(tmp_path / "empty.yaml")]
    )
    assert result.exit_code == 1


def test_pattern_command(store_file: Path) -> None:
    result = runner.invoke(app, ["pattern", "https://www.brave.com:*", "-s", str(store_file)])
    assert result.exit_code == 0
    assert yaml.safe_load(result.output) == {"prop1": 2, "prop2": 2, "prop3": 3, "prop4": 4}


def test_set_command_merges_and_saves(store_file: Path) -> None:
    result = runner.invoke(
        app, ["set", "https://www.brave.com", "prop5", "true", "--store", str(store_file)]
    )
    assert result.exit_code == 0

    store = load_store_file(store_file)
    assert store.get("https://www.brave.com") == {"prop1": 1, "prop5": True}
    assert len(store) == 4


def test_set_command_creates_store(tmp_path: Path) -> None:
    path = tmp_path / "new" / "sites.json"
    result = runner.invoke(app, ["set", "*", "zoom", "1.5", "--store", str(path)])
    assert result.exit_code == 0
    assert load_store_file(path).get("*") == {"zoom": 1.5}


def test_list_command(store_file: Path) -> None:
    result = runner.invoke(app, ["list", "--store", str(store_file)])
    assert result.exit_code == 0
    listed = yaml.safe_load(result.output)
    assert list(listed) == [
        "https://www.brave.com",
        "https://www.brave.com:*",
        "https://*.brave.com",
        "*",
    ]


def test_list_command_empty(tmp_path: Path) -> None:
    result = runner.invoke(app, ["list", "--store", str(tmp_path / "none.yaml")])
    assert result.exit_code == 0
    assert "No patterns stored" in result.output


def test_origin_command() -> None:
    result = runner.invoke(app, ["origin", "https://www.brave.com:443/projects#test"])
    assert result.exit_code == 0
    assert result.output.strip() == "https://www.brave.com"


def test_origin_command_rejects_bad_url() -> None:
    result = runner.invoke(app, ["origin", "nonsense"])
    assert result.exit_code == 1


def test_config_validate(config_file: Path, tmp_path: Path) -> None:
    result = runner.invoke(app, ["config", "validate", str(config_file)])
    assert result.exit_code == 0
    assert "Config valid" in result.output

    bad = tmp_path / "bad.yaml"
    bad.write_text("log_level: LOUD\n")
    result = runner.invoke(app, ["config", "validate", str(bad)])
    assert result.exit_code == 1


def test_corrupt_store_reports_error(tmp_path: Path) -> None:
    path = tmp_path / "sites.yaml"
    path.write_text("sites: [1, 2]\n")
    result = runner.invoke(app, ["list", "--store", str(path)])
    assert result.exit_code == 1
