"""Packaging ignore patterns for components no page reaches."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, List, Optional, Sequence

from .logging import get_logger
from .models import PackIgnoreRule
from .paths import dirname

GLOB_RULE_TYPE = "glob"


@dataclass(frozen=True)
class IgnoreUpdate:
    """Outcome of an ignore computation."""

    changed: bool
    patterns: List[str] = field(default_factory=list)
    rules: List[PackIgnoreRule] = field(default_factory=list)


def previous_patterns(
    ignore_rules: Iterable[PackIgnoreRule], extra_rules: Iterable[PackIgnoreRule]
) -> List[str]:
    """Return the auto-managed patterns of a persisted ignore list, sorted."""
    extras = set(extra_rules)
    return sorted(rule.value for rule in ignore_rules if rule not in extras)


def compose_rules(patterns: Sequence[str], extra_rules: Sequence[PackIgnoreRule]) -> List[PackIgnoreRule]:
    """Manually curated rules first, then one glob rule per generated pattern."""
    return list(extra_rules) + [PackIgnoreRule(type=GLOB_RULE_TYPE, value=pattern) for pattern in patterns]


class IgnoreSetComputer:
    """Turns unreached components into glob patterns and tracks the last result."""

    def __init__(self, previous: Optional[Sequence[str]] = None) -> None:
        self._patterns: Optional[List[str]] = sorted(previous) if previous is not None else None
        self.logger = get_logger("ignores")

    @property
    def cached_patterns(self) -> Optional[List[str]]:
        return list(self._patterns) if self._patterns is not None else None

    def patterns_for(
        self,
        all_components: Sequence[str],
        reached: AbstractSet[str],
        pages: Iterable[str] = (),
    ) -> List[str]:
        """Return sorted glob patterns for unreached components.

        A directory that also holds one of ``pages`` is never excluded as a whole.
        """
        page_directories = {dirname(page) for page in pages}
        by_directory: Dict[str, List[str]] = defaultdict(list)
        for path in all_components:
            by_directory[dirname(path)].append(path)

        patterns = set()
        for path in all_components:
            if path in reached:
                continue
            directory = dirname(path)
            siblings = [other for other in by_directory[directory] if other != path]
            if not directory or any(sibling in reached for sibling in siblings):
                # The directory is shared with a live component: exclude this one only.
                patterns.add(f"{path}.*")
            elif directory in page_directories:
                self.logger.warning(
                    "Unused component %s shares %s with a page; excluding its files only", path, directory
                )
                patterns.add(f"{path}.*")
            else:
                # "*.*" only matches files directly inside the directory, so nested
                # component directories (live or not) are never caught by it.
                patterns.add(f"{directory}/*.*")
        return sorted(patterns)

    def check(
        self,
        all_components: Sequence[str],
        reached: AbstractSet[str],
        *,
        previous: Optional[Sequence[str]] = None,
        extra_rules: Sequence[PackIgnoreRule] = (),
        pages: Iterable[str] = (),
    ) -> IgnoreUpdate:
        """Compute patterns and report whether they differ from the last known set.

        ``previous`` seeds the comparison only until a result has been cached.
        """
        patterns = self.patterns_for(all_components, reached, pages)
        if self._patterns is None:
            self._patterns = sorted(previous or [])

        rules = compose_rules(patterns, extra_rules)
        if patterns == self._patterns:
            return IgnoreUpdate(changed=False, patterns=patterns, rules=rules)

        self.logger.debug("Pack ignores changed: %s -> %s", self._patterns, patterns)
        self._patterns = list(patterns)
        return IgnoreUpdate(changed=True, patterns=patterns, rules=rules)


__all__ = [
    "GLOB_RULE_TYPE",
    "IgnoreSetComputer",
    "IgnoreUpdate",
    "compose_rules",
    "previous_patterns",
]
