"""Tests for mapping file loader and validator."""

import json
from pathlib import Path

import pytest

from s3_spa_upload.utils.config_loader import (
    ConfigError,
    MappingFileError,
    load_pattern_mapping,
    validate_pattern_mapping,
)


class TestLoadPatternMapping:
    """Tests for load_pattern_mapping function."""

    def test_load_json_keeps_file_order(self, tmp_path: Path):
        """Test entries come back in file order."""
        mapping_file = tmp_path / "cache.json"
        mapping_file.write_text(
            '{"*.js": "forever", "index.html": "no-cache", "*.css": "forever"}'
        )

        mapping = load_pattern_mapping(mapping_file)

        assert mapping == (
            ("*.js", "forever"),
            ("index.html", "no-cache"),
            ("*.css", "forever"),
        )

    def test_load_yaml(self, tmp_path: Path):
        """Test .yaml files are parsed with YAML."""
        mapping_file = tmp_path / "mime.yaml"
        mapping_file.write_text(
            """
".wasm": application/wasm
"*.map": application/json
"""
        )

        mapping = load_pattern_mapping(str(mapping_file))

        assert mapping == ((".wasm", "application/wasm"), ("*.map", "application/json"))

    def test_empty_object(self, tmp_path: Path):
        """Test an empty object is a valid, empty mapping."""
        mapping_file = tmp_path / "none.json"
        mapping_file.write_text("{}")

        assert load_pattern_mapping(mapping_file) == ()

    def test_load_nonexistent_file(self, tmp_path: Path):
        """Test a missing file raises MappingFileError."""
        with pytest.raises(MappingFileError, match="not found"):
            load_pattern_mapping(tmp_path / "nonexistent.json")

    def test_load_directory_raises_error(self, tmp_path: Path):
        """Test a directory path is rejected."""
        with pytest.raises(MappingFileError, match="not a file"):
            load_pattern_mapping(tmp_path)

    def test_load_empty_file(self, tmp_path: Path):
        """Test an empty file is rejected."""
        mapping_file = tmp_path / "empty.json"
        mapping_file.write_text("  \n")

        with pytest.raises(MappingFileError, match="empty"):
            load_pattern_mapping(mapping_file)

    def test_load_invalid_json(self, tmp_path: Path):
        """Test malformed JSON is reported with the path."""
        mapping_file = tmp_path / "broken.json"
        mapping_file.write_text('{"*.js": ')

        with pytest.raises(MappingFileError, match="Invalid JSON") as excinfo:
            load_pattern_mapping(mapping_file)

        assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)
        assert "broken.json" in str(excinfo.value)

    def test_load_invalid_yaml(self, tmp_path: Path):
        """Test malformed YAML raises MappingFileError."""
        mapping_file = tmp_path / "broken.yml"
        mapping_file.write_text("key: [unclosed bracket\n")

        with pytest.raises(MappingFileError, match="Invalid YAML"):
            load_pattern_mapping(mapping_file)

    def test_non_object_root(self, tmp_path: Path):
        """Test a JSON array is rejected."""
        mapping_file = tmp_path / "list.json"
        mapping_file.write_text('["*.js", "forever"]')

        with pytest.raises(MappingFileError, match="Must be an object"):
            load_pattern_mapping(mapping_file)

    def test_non_string_value(self, tmp_path: Path):
        """Test nested or numeric values are rejected."""
        mapping_file = tmp_path / "nested.json"
        mapping_file.write_text('{"*.js": {"max-age": 60}, "*.css": 3600}')

        with pytest.raises(MappingFileError) as excinfo:
            load_pattern_mapping(mapping_file)

        message = str(excinfo.value)
        assert "*.js: Value must be a string" in message
        assert "*.css: Value must be a string" in message

    def test_error_is_a_value_error(self, tmp_path: Path):
        """Test callers can catch ValueError."""
        with pytest.raises(ValueError):
            load_pattern_mapping(tmp_path / "missing.json")


class TestValidatePatternMapping:
    """Tests for validate_pattern_mapping function."""

    def test_valid(self):
        assert validate_pattern_mapping({"*.js": "forever", "index.html": "no-cache"}) == []

    def test_empty_pattern(self):
        errors = validate_pattern_mapping({"": "x"})
        assert len(errors) == 1
        assert "non-empty" in errors[0].message

    def test_non_string_pattern_from_yaml(self):
        """Test YAML keys that parse to non-strings are rejected."""
        errors = validate_pattern_mapping({404: "no-cache"})
        assert len(errors) == 1

    def test_root_type(self):
        errors = validate_pattern_mapping("just a string")
        assert errors[0].field == "<root>"
        assert errors[0].value == "str"


class TestConfigError:
    """Tests for ConfigError formatting."""

    def test_config_error_string_without_value(self):
        """Test ConfigError string representation without value."""
        error = ConfigError("*.js", "Value must be a string")
        assert str(error) == "*.js: Value must be a string"

    def test_config_error_string_with_value(self):
        """Test ConfigError string representation with value."""
        error = ConfigError("*.js", "Value must be a string", "int")
        assert str(error) == "*.js: Value must be a string (got: 'int')"
