"""Bootstrap and incremental maintenance of a project's component graph."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .builtins import BUILT_IN_LIBRARIES, DEFAULT_PREFIXES, built_in_prefixes
from .config import CompGraphConfig
from .ignores import IgnoreSetComputer, IgnoreUpdate, previous_patterns
from .logging import get_logger
from .markup import get_custom_tags
from .models import BuiltInLibrary, Entity, UnresolvedReference
from .paths import canonicalize, to_declaration_path, to_markup_path
from .prefixes import PrefixResolver, merge_prefix_tables
from .project import ProjectFiles
from .reachability import Reachability, ReachabilityAnalyzer
from .registry import Registry
from .resolver import Resolution, UsingComponentsResolver


@dataclass
class AnalysisReport:
    """Snapshot of the graph for reporting."""

    pages: List[str]
    reached: List[str]
    unreached: List[str]
    unresolved: List[UnresolvedReference] = field(default_factory=list)


def _is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes"}
    return bool(value)


class Orchestrator:
    """Owns the graph context of one project root and exposes its entry points.

    All mutations go through a single re-entrant lock, so the instance can be
    shared between threads (e.g. a service and a file watcher).
    """

    def __init__(
        self,
        root: str | Path = ".",
        *,
        config: CompGraphConfig | None = None,
        project: ProjectFiles | None = None,
        prefixes: Optional[Mapping[str, str]] = None,
        libraries: Sequence[BuiltInLibrary] = BUILT_IN_LIBRARIES,
        analyzer: ReachabilityAnalyzer | None = None,
        ignore_computer: IgnoreSetComputer | None = None,
    ) -> None:
        self.project = project or ProjectFiles(root, config)
        self.config = self.project.config
        self.libraries = tuple(libraries)
        self.analyzer = analyzer or ReachabilityAnalyzer()
        self.ignore_computer = ignore_computer or IgnoreSetComputer()
        self.logger = get_logger("orchestrator")
        self._caller_prefixes = dict(prefixes or {})
        self._lock = threading.RLock()
        self._unresolved: Dict[str, List[UnresolvedReference]] = {}
        self._reset_context()

    # ------------------------------------------------------------------
    # Entry points

    def bootstrap(self) -> Registry:
        """Index every page and component of the project from scratch."""
        started = time.perf_counter()
        with self._lock:
            self._reset_context()
            markup_paths = self.project.discover_markup_files()
            self.logger.debug("Discovered %d markup files with declarations", len(markup_paths))

            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                entities = list(executor.map(self._load_entity, markup_paths))
                # Every entity is stored before any edge is resolved so that
                # forward references do not depend on discovery order.
                for entity in entities:
                    self._store(entity)
                resolutions = list(executor.map(self.resolver.resolve, entities))

            for entity, resolution in zip(entities, resolutions):
                self._apply(entity, resolution)

        self.logger.info(
            "Indexed %d pages and %d components in %.2fs",
            len(self.registry.pages()),
            len(self.registry.components()),
            time.perf_counter() - started,
        )
        return self.registry

    def add_or_update(self, markup_path: str, declaration: Mapping[str, Any]) -> Entity:
        """Insert or replace the entity for ``markup_path`` and resolve its edges."""
        with self._lock:
            entity = self._build_entity(markup_path, declaration)
            self._store(entity)
            self._apply(entity, self.resolver.resolve(entity))
            return entity

    def remove(self, markup_path: str) -> Optional[Entity]:
        """Remove the entity for ``markup_path`` from every index."""
        path = canonicalize(markup_path)
        with self._lock:
            self._unresolved.pop(path, None)
            entity = self.registry.remove(path)
            if entity is None:
                declaration = self.project.read_json(to_declaration_path(path))
                if _is_truthy(declaration.get("component")):
                    self.registry.forget_name(self.prefix_resolver.display_name(path), path)
            else:
                self.logger.debug("Removed %s", path)
            return entity

    def analyze(self) -> Reachability:
        with self._lock:
            return self.analyzer.analyze(self.registry)

    def check_update_pack_ignore(self, *, dry_run: bool = False) -> IgnoreUpdate:
        """Recompute pack ignores and persist them when they changed."""
        with self._lock:
            reachability = self.analyzer.analyze(self.registry)
            ignores, extras = self.project.load_pack_ignores()
            computer = self.ignore_computer
            if computer.cached_patterns is None:
                previous: Optional[List[str]] = previous_patterns(ignores, extras)
            else:
                previous = None
            if dry_run:
                computer = IgnoreSetComputer(computer.cached_patterns or previous)

            update = computer.check(
                self.registry.all_component_paths(),
                reachability.reached,
                previous=previous,
                extra_rules=extras,
                pages=[page.path for page in self.registry.pages()],
            )
            if update.changed and not dry_run:
                self.project.write_pack_ignores(update.rules)
                self.logger.info("Updated pack ignores (%d patterns)", len(update.patterns))
            return update

    def update_using_components_in_json(self, markup_path: str) -> Optional[Dict[str, str]]:
        """Rewrite a declaration's ``usingComponents`` from the tags its markup uses."""
        path = canonicalize(markup_path)
        declaration_path = to_declaration_path(path)
        if not self.project.exists(declaration_path):
            return None
        markup_file = to_markup_path(path, self.config.markup_ext)
        tags = get_custom_tags(self.project.read_text(markup_file))

        with self._lock:
            owner = self.registry.owner_of(path)
            using_components: Dict[str, str] = {}
            for tag in tags:
                component = self.registry.lookup_name(tag, owner)
                if component is not None:
                    using_components[tag] = "/" + component.path
                elif tag in self._built_in_names:
                    using_components[tag] = self._built_in_names[tag]

            declaration = self.project.read_json(declaration_path)
            declaration["usingComponents"] = using_components
            self.project.write_json(declaration_path, declaration)
            self.add_or_update(markup_file, declaration)
        return using_components

    def report(self) -> AnalysisReport:
        with self._lock:
            reachability = self.analyzer.analyze(self.registry)
            return AnalysisReport(
                pages=sorted(page.path for page in self.registry.pages()),
                reached=sorted(reachability.reached),
                unreached=sorted(reachability.unreached),
                unresolved=self.unresolved,
            )

    @property
    def unresolved(self) -> List[UnresolvedReference]:
        with self._lock:
            return [
                item
                for path in sorted(self._unresolved)
                for item in self._unresolved[path]
            ]

    # ------------------------------------------------------------------
    # Internal helpers

    def _reset_context(self) -> None:
        sub_packages = self.project.load_sub_packages()
        self.registry = Registry(sub_packages)
        prefix_table = merge_prefix_tables(
            built_in_prefixes(),
            DEFAULT_PREFIXES,
            self.config.prefixes,
            self._caller_prefixes,
            self.project.load_package_prefixes(),
        )
        vendor_dir = self.config.vendor_dir
        vendor_roots = [vendor_dir] + [f"{sub.root}/{vendor_dir}" for sub in self.registry.sub_packages]
        self.prefix_resolver = PrefixResolver(prefix_table, vendor_roots)
        self.resolver = UsingComponentsResolver(
            self.registry, self.prefix_resolver, self.libraries, vendor_dir
        )
        self._built_in_names = self.prefix_resolver.built_in_names(self.libraries)
        self._unresolved = {}

    def _load_entity(self, markup_path: str) -> Entity:
        declaration = self.project.read_json(to_declaration_path(canonicalize(markup_path)))
        return self._build_entity(markup_path, declaration)

    def _build_entity(self, markup_path: str, declaration: Mapping[str, Any]) -> Entity:
        path = canonicalize(markup_path)
        # File lookups use the key so a leading "/" stays inside the project root.
        is_component = _is_truthy(declaration.get("component")) or self.project.script_declares_component(
            path
        )
        name = self.prefix_resolver.display_name(path) if is_component else ""
        return Entity(path=path, is_component=is_component, name=name, declaration=dict(declaration))

    def _store(self, entity: Entity) -> None:
        self.registry.upsert(entity)

    def _apply(self, entity: Entity, resolution: Resolution) -> None:
        entity.using_components = resolution.edges
        if resolution.unresolved:
            self._unresolved[entity.path] = resolution.unresolved
        else:
            self._unresolved.pop(entity.path, None)


__all__ = ["AnalysisReport", "Orchestrator"]
