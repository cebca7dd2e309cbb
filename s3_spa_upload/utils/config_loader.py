"""
Loader and validator for pattern mapping files.

A mapping file is a flat object of glob pattern to string value, in file
order. JSON is the standard format; files ending in .yaml or .yml are read
with PyYAML, which accepts the same documents.

Example file (cache-control.json):
    ```json
    {
      "index.html": "no-cache",
      "static/**": "public,max-age=31536000,immutable",
      "*.svg": "public,max-age=86400"
    }
    ```

Usage:
    >>> from s3_spa_upload.utils.config_loader import load_pattern_mapping
    >>> mapping = load_pattern_mapping("cache-control.json")
    >>> mapping[0]
    ('index.html', 'no-cache')
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml

from s3_spa_upload.utils.logging import get_logger, log_function_call
from s3_spa_upload.utils.matching import PatternMapping, as_pattern_mapping

logger = get_logger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


class MappingFileError(ValueError):
    """A mapping file is missing, unreadable, malformed or not flat."""


@dataclass
class ConfigError:
    """Validation error in a mapping file."""

    field: str
    message: str
    value: Optional[Any] = None

    def __str__(self) -> str:
        """Format error message."""
        if self.value is not None:
            return f"{self.field}: {self.message} (got: {self.value!r})"
        return f"{self.field}: {self.message}"


def validate_pattern_mapping(data: Any) -> List[ConfigError]:
    """
    Validate parsed mapping data.

    Args:
        data: Parsed JSON/YAML document

    Returns:
        List of validation errors (empty if valid)
    """
    if not isinstance(data, dict):
        return [
            ConfigError("<root>", "Must be an object of pattern -> value", type(data).__name__)
        ]

    errors: List[ConfigError] = []
    for pattern, value in data.items():
        if not isinstance(pattern, str) or not pattern:
            errors.append(ConfigError(repr(pattern), "Pattern must be a non-empty string"))
            continue
        if not isinstance(value, str):
            errors.append(ConfigError(pattern, "Value must be a string", type(value).__name__))
    return errors


def _parse(path: Path, text: str) -> Any:
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise MappingFileError(f"Invalid YAML in mapping file {path}: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise MappingFileError(f"Invalid JSON in mapping file {path}: {e}") from e


@log_function_call
def load_pattern_mapping(mapping_path: Union[str, Path]) -> PatternMapping:
    """
    Load an ordered pattern mapping from a file.

    Args:
        mapping_path: Path to a JSON (or YAML) mapping file

    Returns:
        Ordered pattern mapping in file order

    Raises:
        MappingFileError: If the file is missing, unreadable, malformed,
            empty or not a flat string-to-string object
    """
    path = Path(mapping_path)
    logger.debug(f"Loading pattern mapping from: {path}")

    if not path.exists():
        raise MappingFileError(f"Mapping file not found: {path}")

    if not path.is_file():
        raise MappingFileError(f"Mapping path is not a file: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MappingFileError(f"Cannot read mapping file {path}: {e}") from e

    if not text.strip():
        raise MappingFileError(f"Mapping file is empty: {path}")

    data = _parse(path, text)

    errors = validate_pattern_mapping(data)
    if errors:
        details = "; ".join(str(error) for error in errors)
        raise MappingFileError(f"Invalid mapping file {path}: {details}")

    mapping = as_pattern_mapping(data)
    logger.info(f"Loaded {len(mapping)} pattern(s) from {path}")
    return mapping
