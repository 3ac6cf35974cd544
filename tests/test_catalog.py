import json

import pytest

from doccatalog.catalog import Catalog, CatalogEntry
from doccatalog.config import DEFAULT_MAX_CONTENT_CHARS, load_catalog, load_settings
from doccatalog.errors import CatalogError, ConfigError


def test_from_mapping_keeps_declaration_order():
    catalog = Catalog.from_mapping(
        {
            "skills": [{"name": "Build", "path": "skills/build.md"}, {"name": "Deploy", "path": "skills/deploy.md"}],
            "general": [{"name": "Readme", "path": "README.md"}],
            "empty": [],
        }
    )

    assert catalog.categories == ["skills", "general", "empty"]
    assert list(catalog) == [
        ("skills", CatalogEntry("Build", "skills/build.md")),
        ("skills", CatalogEntry("Deploy", "skills/deploy.md")),
        ("general", CatalogEntry("Readme", "README.md")),
    ]
    assert len(catalog) == 3
    assert catalog.entries("empty") == ()


def test_catalog_is_immutable():
    catalog = Catalog.from_mapping({"general": [{"name": "Readme", "path": "README.md"}]})

    with pytest.raises(AttributeError):
        catalog.sections = ()
    with pytest.raises(AttributeError):
        catalog.entries("general")[0].relative_path = "other.md"


def test_to_mapping_round_trips_source_shape():
    raw = {"general": [{"name": "Readme", "path": "README.md"}]}

    assert Catalog.from_mapping(raw).to_mapping() == raw


@pytest.mark.parametrize(
    "raw",
    [
        ["not", "a", "mapping"],
        {"general": "README.md"},
        {"general": [{"name": "Readme"}]},
        {"general": [{"path": "README.md", "name": "  "}]},
        {"general": ["README.md"]},
    ],
)
def test_from_mapping_rejects_bad_shapes(raw):
    with pytest.raises(CatalogError):
        Catalog.from_mapping(raw)


def test_load_catalog_reads_yaml_and_json(tmp_path):
    yaml_path = tmp_path / "catalog.yaml"
    yaml_path.write_text(
        "runtime:\n  - {name: Runtime Info, path: runtime/runtime.md}\ngeneral:\n  - name: Readme\n    path: README.md\n",
        encoding="utf-8",
    )
    json_path = tmp_path / "catalog.json"
    json_path.write_text(json.dumps({"general": [{"name": "Readme", "path": "README.md"}]}), encoding="utf-8")

    assert load_catalog(yaml_path).categories == ["runtime", "general"]
    assert list(load_catalog(json_path)) == [("general", CatalogEntry("Readme", "README.md"))]


def test_load_catalog_errors_are_config_errors(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("general: [unclosed\n", encoding="utf-8")
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_catalog(tmp_path / "missing.yaml")
    with pytest.raises(ConfigError):
        load_catalog(broken)
    with pytest.raises(ConfigError):
        load_catalog(empty)


def test_shipped_catalog_is_valid():
    from pathlib import Path

    catalog = load_catalog(Path(__file__).resolve().parents[1] / "catalog.yaml")

    assert catalog.categories[0] == "bouwblokken"
    assert catalog.entries("general")[0].relative_path == "README.md"


def test_load_settings_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DOCCATALOG_CONTENT_ROOT", str(tmp_path))
    monkeypatch.setenv("DOCCATALOG_INDEX_PATH", "out/index.json")
    monkeypatch.setenv("DOCCATALOG_MAX_CONTENT_CHARS", "120")
    monkeypatch.setenv("DOCCATALOG_API_TOKEN", "secret")

    settings = load_settings()

    assert settings.content_root == tmp_path
    assert str(settings.index_path) == "out/index.json"
    assert settings.max_content_chars == 120
    assert settings.api_token == "secret"


def test_load_settings_falls_back_on_bad_values(monkeypatch):
    monkeypatch.setenv("DOCCATALOG_MAX_CONTENT_CHARS", "lots")
    monkeypatch.setenv("DOCCATALOG_API_TOKEN", "  ")

    settings = load_settings()

    assert settings.max_content_chars == DEFAULT_MAX_CONTENT_CHARS
    assert settings.api_token is None
