"""
Glob-pattern lookup for cache-control and content-type headers.

A pattern mapping is an ordered sequence of ``(glob, value)`` pairs; the first
pattern that matches a path wins. Patterns follow shell glob rules with brace
expansion (``*.{js,css}``) and ``**`` for any number of directories; ``*`` never
crosses a ``/``. Patterns without a ``/`` are matched against the last path
segment only (``*.js`` matches ``static/js/app.js``).

Example usage:
    >>> from s3_spa_upload.utils.matching import match_pattern, DEFAULT_CACHE_CONTROL_MAPPING
    >>> match_pattern("static/js/app.js", DEFAULT_CACHE_CONTROL_MAPPING)
    'public,max-age=31536000,immutable'
"""

import mimetypes
import posixpath
from typing import Iterable, Mapping, Optional, Tuple, Union

from wcmatch import glob

# Ordered (glob pattern, value) pairs
PatternMapping = Tuple[Tuple[str, str], ...]

CACHE_FOREVER = "public,max-age=31536000,immutable"
CACHE_ONE_DAY = "public,max-age=86400"
NO_CACHE = "no-cache"

DEFAULT_CACHE_CONTROL_MAPPING: PatternMapping = (
    ("index.html", NO_CACHE),
    ("*.css", CACHE_FOREVER),
    ("*.js", CACHE_FOREVER),
    ("*.png", CACHE_ONE_DAY),
    ("*.ico", CACHE_ONE_DAY),
    ("*.txt", CACHE_ONE_DAY),
)

# Standard types that are served as text and get an explicit charset
_CHARSET_TYPES = frozenset(
    [
        "application/javascript",
        "application/json",
        "application/xml",
        "application/manifest+json",
        "image/svg+xml",
    ]
)

# Slash-separated paths and case-sensitive matching on every platform
_GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.MATCHBASE | glob.FORCEUNIX

# Built-in extension table only; the process-wide one also reads host files
# such as /etc/mime.types
_MIME_TYPES = mimetypes.MimeTypes()


def as_pattern_mapping(
    mapping: Union[Mapping[str, str], Iterable[Tuple[str, str]], None]
) -> PatternMapping:
    """
    Freeze a dict or an iterable of pairs into an ordered pattern mapping.

    Dicts keep their insertion order, so a mapping parsed from a JSON file
    matches in file order.
    """
    if mapping is None:
        return ()
    items = mapping.items() if isinstance(mapping, Mapping) else mapping
    return tuple((str(pattern), str(value)) for pattern, value in items)


def glob_matches(path: str, pattern: str) -> bool:
    """Return True if ``pattern`` matches ``path`` (case-sensitive)."""
    return glob.globmatch(path, pattern, flags=_GLOB_FLAGS)


def match_pattern(path: str, mapping: PatternMapping) -> Optional[str]:
    """
    Return the value of the first entry whose pattern matches ``path``.

    Args:
        path: Slash-separated file path
        mapping: Ordered pattern mapping

    Returns:
        Matched value, or None when no pattern matches
    """
    for pattern, value in mapping:
        if glob_matches(path, pattern):
            return value
    return None


def get_cache_control(path: str, mapping: PatternMapping) -> Optional[str]:
    """Resolve the Cache-Control header for ``path``; None means no header."""
    return match_pattern(path, mapping)


def _standard_content_type(path: str) -> Optional[str]:
    content_type, _ = _MIME_TYPES.guess_type(path, strict=False)
    if content_type is None:
        return None
    if content_type.startswith("text/") or content_type in _CHARSET_TYPES:
        return f"{content_type}; charset=utf-8"
    return content_type


def get_content_type(path: str, mapping: PatternMapping) -> Optional[str]:
    """
    Resolve the Content-Type header for ``path``.

    Lookup order:
        1. a mapping entry keyed by the exact extension (``".xyz"``)
        2. the first mapping entry whose glob matches the path
        3. the standard extension table
        4. None (unknown, no header is sent)

    Args:
        path: Slash-separated file path
        mapping: Ordered mime-type pattern mapping

    Returns:
        Content type, or None when unknown
    """
    extension = posixpath.splitext(path)[1]
    if extension:
        for key, value in mapping:
            if key == extension:
                return value

    matched = match_pattern(path, mapping)
    if matched is not None:
        return matched

    return _standard_content_type(path)
