"""Unit tests for the config store (grablin.store).

Tests cover:
- resolve_path defaulting
- load: missing file, valid document, invalid JSON, wrongly typed fields
  left to the validator
- save: version stamping, caller version kept, trailing newline, overwrite,
  absolute return path, no temp files left behind
- load(save(c)) round trip
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from grablin.schema import validate
from grablin.schema.models import ProjectDescription
from grablin.store import SCHEMA_VERSION, ConfigParseError, ConfigStore, resolve_path

pytestmark = pytest.mark.unit


@pytest.fixture
def store(tmp_path: Path) -> ConfigStore:
    return ConfigStore(base_dir=tmp_path)


class TestResolvePath:
    def test_default(self):
        assert resolve_path() == "grablin.json"
        assert resolve_path(None) == "grablin.json"

    def test_explicit_path_unchanged(self):
        assert resolve_path("configs/app.json") == "configs/app.json"

    def test_custom_default(self):
        assert ConfigStore(default_file="other.json").resolve_path() == "other.json"

    def test_pure(self, tmp_path: Path):
        ConfigStore(base_dir=tmp_path).resolve_path("nowhere/x.json")
        assert not (tmp_path / "nowhere").exists()


class TestLoad:
    def test_missing_file_returns_none(self, store: ConfigStore):
        assert store.load() is None
        assert store.load("missing.json") is None

    def test_loads_default_file(self, store: ConfigStore, tmp_path: Path, valid_document):
        (tmp_path / "grablin.json").write_text(json.dumps(valid_document), encoding="utf-8")
        config = store.load()
        assert isinstance(config, ProjectDescription)
        assert config.project_name == "test-app"
        assert len(config.modules) == 3

    def test_loads_absolute_path(self, tmp_path: Path, valid_document):
        target = tmp_path / "nested" / "app.json"
        target.parent.mkdir()
        target.write_text(json.dumps(valid_document), encoding="utf-8")
        assert ConfigStore().load(target).domain == "test.com"

    def test_invalid_json_raises_parse_error(self, store: ConfigStore, tmp_path: Path):
        (tmp_path / "grablin.json").write_text("{ not json", encoding="utf-8")
        with pytest.raises(ConfigParseError, match="Failed to parse config file"):
            store.load()

    def test_non_object_raises_parse_error(self, store: ConfigStore, tmp_path: Path):
        (tmp_path / "grablin.json").write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(ConfigParseError, match="expected a JSON object"):
            store.load()

    def test_parse_error_carries_path(self, store: ConfigStore, tmp_path: Path):
        (tmp_path / "grablin.json").write_text("", encoding="utf-8")
        with pytest.raises(ConfigParseError) as info:
            store.load()
        assert info.value.path.endswith("grablin.json")

    @pytest.mark.parametrize("modules", ["frontend", {}, 42])
    def test_wrongly_typed_modules_left_to_validator(
        self, store: ConfigStore, tmp_path: Path, valid_document, modules
    ):
        valid_document["modules"] = modules
        (tmp_path / "grablin.json").write_text(json.dumps(valid_document), encoding="utf-8")

        config = store.load()
        assert "modules array is required" in validate(config).errors

    def test_wrongly_typed_environments_only_warn(
        self, store: ConfigStore, tmp_path: Path, valid_document
    ):
        valid_document["environments"] = "dev"
        (tmp_path / "grablin.json").write_text(json.dumps(valid_document), encoding="utf-8")

        result = validate(store.load())
        assert result.valid is True
        assert "No environments specified, using defaults (dev, staging, prod)" in result.warnings

    def test_non_object_module_reported_by_validator(
        self, store: ConfigStore, tmp_path: Path, valid_document
    ):
        valid_document["modules"].append("stripe")
        valid_document["modules"][0]["layers"] = "frontend"
        (tmp_path / "grablin.json").write_text(json.dumps(valid_document), encoding="utf-8")

        config = store.load()
        errors = validate(config).errors
        assert "modules[3].kind is required (code, extension, provider, vcs)" in errors
        assert "modules[3].moduleId is required" in errors
        assert config.modules[0].layers == "frontend"
        assert len(config.module_list()) == 3

    def test_wrongly_typed_scalar_left_to_validator(
        self, store: ConfigStore, tmp_path: Path, valid_document
    ):
        valid_document["projectName"] = 123
        (tmp_path / "grablin.json").write_text(json.dumps(valid_document), encoding="utf-8")

        errors = validate(store.load()).errors
        assert any(e.startswith("projectName must start with a letter") for e in errors)

    def test_parse_error_is_not_validation(self, store: ConfigStore, tmp_path: Path):
        # A structurally fine but invalid document loads; rules are checked later.
        (tmp_path / "grablin.json").write_text('{"projectName": "1bad"}', encoding="utf-8")
        config = store.load()
        assert config is not None
        assert config.project_name == "1bad"


class TestSave:
    def test_stamps_version(self, store: ConfigStore, tmp_path: Path, valid_config):
        store.save(valid_config)
        data = json.loads((tmp_path / "grablin.json").read_text(encoding="utf-8"))
        assert data["version"] == SCHEMA_VERSION == "1.0"

    def test_keeps_caller_version(self, store: ConfigStore, tmp_path: Path, valid_document):
        valid_document["version"] = "2.3"
        store.save(valid_document)
        data = json.loads((tmp_path / "grablin.json").read_text(encoding="utf-8"))
        assert data["version"] == "2.3"

    def test_returns_absolute_path(self, store: ConfigStore, tmp_path: Path, valid_config):
        written = store.save(valid_config, "out/app.json")
        assert written.is_absolute()
        assert written == (tmp_path / "out" / "app.json").resolve()
        assert written.exists()

    def test_trailing_newline_and_indent(self, store: ConfigStore, valid_config):
        text = store.save(valid_config).read_text(encoding="utf-8")
        assert text.endswith("}\n")
        assert '\n  "projectName": "test-app"' in text

    def test_overwrites(self, store: ConfigStore, valid_config):
        store.save({"projectName": "old"})
        written = store.save(valid_config)
        assert json.loads(written.read_text(encoding="utf-8"))["projectName"] == "test-app"

    def test_no_temp_files_left(self, store: ConfigStore, tmp_path: Path, valid_config):
        store.save(valid_config)
        assert [p.name for p in tmp_path.iterdir()] == ["grablin.json"]

    def test_does_not_mutate_input(self, store: ConfigStore, valid_document):
        store.save(valid_document)
        assert "version" not in valid_document

    def test_exists(self, store: ConfigStore, valid_config):
        assert store.exists() is False
        store.save(valid_config)
        assert store.exists() is True


class TestRoundTrip:
    def test_load_save_round_trip(self, store: ConfigStore, valid_config):
        path = store.save(valid_config, "grablin.json")
        loaded = store.load(path)

        assert loaded.version == "1.0"
        assert loaded.project_name == valid_config.project_name
        assert loaded.domain == valid_config.domain
        assert loaded.modules == valid_config.modules

    def test_unicode_preserved(self, store: ConfigStore, valid_document):
        valid_document["description"] = "Café ☕"
        path = store.save(valid_document)
        assert store.load(path).description == "Café ☕"
