"""Extension-to-mime classification for file nodes.

Uses the standard ``mimetypes`` registry first and falls back to the mime
types advertised by Pygments lexers, which cover most source-code suffixes
the registry does not know.
"""

from __future__ import annotations

import mimetypes
from collections.abc import Mapping
from functools import lru_cache

from pygments.lexers import find_lexer_class_for_filename


def normalize_extension(extension: str) -> str:
    """Return ``extension`` lower-cased with exactly one leading dot."""
    stripped = extension.strip().lower().lstrip(".")
    return f".{stripped}" if stripped else ""


@lru_cache(maxsize=512)
def _registry_mime_type(extension: str) -> str | None:
    mime_type, _encoding = mimetypes.guess_type(f"file{extension}", strict=False)
    return mime_type


@lru_cache(maxsize=512)
def _lexer_mime_type(extension: str) -> str | None:
    lexer_class = find_lexer_class_for_filename(f"file{extension}")
    if lexer_class is None or not lexer_class.mimetypes:
        return None
    return lexer_class.mimetypes[0]


def guess_mime_type(extension: str, overrides: Mapping[str, str] | None = None) -> str | None:
    """Classify a file extension (``".txt"`` or ``"txt"``); ``None`` if unknown."""
    normalized = normalize_extension(extension)
    if not normalized:
        return None
    if overrides:
        override = overrides.get(normalized)
        if override:
            return override
    return _registry_mime_type(normalized) or _lexer_mime_type(normalized)


def clear_mime_cache() -> None:
    _registry_mime_type.cache_clear()
    _lexer_mime_type.cache_clear()


__all__ = [
    "normalize_extension",
    "guess_mime_type",
    "clear_mime_cache",
]
