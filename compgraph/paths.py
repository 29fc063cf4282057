"""Conversions between markup paths, declaration paths and graph keys.

Graph keys are project-root relative, use forward slashes and carry no file
extension, e.g. ``components/card/index`` for ``components/card/index.wxml``.
Every helper is pure; malformed input is passed through unchanged.
"""

from __future__ import annotations

import posixpath
from typing import Tuple

MARKUP_EXT = ".wxml"
DECLARATION_EXT = ".json"
SCRIPT_EXTS: Tuple[str, ...] = (".js", ".ts")
INDEX_NAME = "index"


def format_path(path: str) -> str:
    """Normalise path separators to forward slashes."""
    return path.replace("\\", "/")


def strip_extension(path: str) -> str:
    """Drop the extension of the final path segment, if any."""
    root, _ = posixpath.splitext(format_path(path))
    return root


def normalize(path: str) -> str:
    """Collapse ``.``/``..`` segments; the project root is the empty string."""
    formatted = format_path(path)
    if not formatted:
        return ""
    normalized = posixpath.normpath(formatted)
    return "" if normalized == "." else normalized


def canonicalize(markup_path: str) -> str:
    """Return the graph key for a markup (or any sibling) file path."""
    path = normalize(format_path(markup_path).lstrip("/"))
    return strip_extension(path)


def to_markup_path(path: str, markup_ext: str = MARKUP_EXT) -> str:
    return strip_extension(path) + markup_ext


def to_declaration_path(path: str) -> str:
    return strip_extension(path) + DECLARATION_EXT


def to_script_paths(path: str) -> Tuple[str, ...]:
    base = strip_extension(path)
    return tuple(base + ext for ext in SCRIPT_EXTS)


def dirname(path: str) -> str:
    return posixpath.dirname(format_path(path))


def basename(path: str) -> str:
    return posixpath.basename(format_path(path))


def join_reference(base_dir: str, reference: str) -> str:
    """Join ``reference`` onto ``base_dir`` and normalise the result."""
    return normalize(posixpath.join(format_path(base_dir), format_path(reference)))


def is_absolute_reference(reference: str) -> bool:
    return reference.startswith(("/", "\\"))


def is_relative_reference(reference: str) -> bool:
    return reference.startswith(".")


def is_within(path: str, root: str) -> bool:
    """Return True when ``path`` equals ``root`` or lies below it."""
    root = root.rstrip("/")
    if not root:
        return True
    return path == root or path.startswith(root + "/")


__all__ = [
    "DECLARATION_EXT",
    "INDEX_NAME",
    "MARKUP_EXT",
    "SCRIPT_EXTS",
    "basename",
    "canonicalize",
    "dirname",
    "format_path",
    "is_absolute_reference",
    "is_relative_reference",
    "is_within",
    "join_reference",
    "normalize",
    "strip_extension",
    "to_declaration_path",
    "to_markup_path",
    "to_script_paths",
]
