"""Display-name computation for components, including vendored-package prefixes."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from .builtins import VENDOR_DIR
from .models import BuiltInLibrary
from .paths import INDEX_NAME, canonicalize, format_path, is_within

PREFIX_SEPARATOR = "-"


def component_name_from_path(path: str) -> str:
    """Return the unprefixed component name for ``path``.

    ``components/card/card`` and ``components/card/index`` both name the
    component ``card``; any other file keeps its own base name.
    """
    parts = [part for part in canonicalize(path).split("/") if part]
    if not parts:
        return ""
    base = parts[-1]
    if len(parts) > 1 and base in (parts[-2], INDEX_NAME):
        return parts[-2]
    return base


def normalize_prefixes(table: Mapping[str, object]) -> Dict[str, str]:
    """Ensure every non-empty prefix ends with exactly one trailing separator."""
    normalized: Dict[str, str] = {}
    for package, prefix in table.items():
        value = str(prefix) if prefix else ""
        if value and not value.endswith(PREFIX_SEPARATOR):
            value += PREFIX_SEPARATOR
        normalized[str(package)] = value
    return normalized


def merge_prefix_tables(*tables: Optional[Mapping[str, object]]) -> Dict[str, str]:
    """Merge prefix tables left to right; later tables override earlier ones."""
    merged: Dict[str, object] = {}
    for table in tables:
        if table:
            merged.update(table)
    return normalize_prefixes(merged)


class PrefixResolver:
    """Computes display names, prefixing components that come from vendored packages."""

    def __init__(
        self,
        prefixes: Mapping[str, object],
        vendor_roots: Sequence[str] = (VENDOR_DIR,),
    ) -> None:
        self._prefixes = normalize_prefixes(prefixes)
        self._vendor_roots: Tuple[str, ...] = tuple(
            format_path(root).strip("/") for root in vendor_roots if root
        )

    @property
    def prefixes(self) -> Dict[str, str]:
        return dict(self._prefixes)

    @property
    def vendor_roots(self) -> Tuple[str, ...]:
        return self._vendor_roots

    def prefix_for(self, path: str) -> str:
        """Return the prefix for ``path``, or an empty string when none applies."""
        key = canonicalize(path)
        for root in self._vendor_roots:
            if not key.startswith(root + "/"):
                continue
            remainder = key[len(root) + 1 :]
            for package, prefix in self._prefixes.items():
                if package and is_within(remainder, package):
                    return prefix
        return ""

    def display_name(self, path: str) -> str:
        return self.prefix_for(path) + component_name_from_path(path)

    def built_in_name(self, library: BuiltInLibrary, reference: str) -> str:
        prefix = self._prefixes.get(library.name)
        if prefix is None:
            prefix = normalize_prefixes({library.name: library.prefix})[library.name]
        return prefix + component_name_from_path(reference)

    def built_in_names(self, libraries: Iterable[BuiltInLibrary]) -> Dict[str, str]:
        """Map display name -> reference path for every built-in library component."""
        names: Dict[str, str] = {}
        for library in libraries:
            for reference in library.components:
                names[self.built_in_name(library, reference)] = reference
        return names


__all__ = [
    "PREFIX_SEPARATOR",
    "PrefixResolver",
    "component_name_from_path",
    "merge_prefix_tables",
    "normalize_prefixes",
]
