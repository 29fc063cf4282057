"""Resolution of declared ``usingComponents`` entries into graph edges."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .builtins import BUILT_IN_LIBRARIES, VENDOR_DIR
from .logging import get_logger
from .models import BuiltInLibrary, Entity, UnresolvedReference, UsingComponentRef
from .paths import (
    INDEX_NAME,
    dirname,
    format_path,
    is_absolute_reference,
    is_relative_reference,
    join_reference,
    normalize,
    to_declaration_path,
)
from .prefixes import PrefixResolver
from .registry import Registry


@dataclass
class Resolution:
    """Edges and diagnostics produced for a single entity."""

    path: str
    edges: List[UsingComponentRef] = field(default_factory=list)
    unresolved: List[UnresolvedReference] = field(default_factory=list)


class UsingComponentsResolver:
    """Maps each declared tag of an entity onto a registered component.

    Resolution only reads the registry, so entities may be resolved
    concurrently once every entity has been stored.
    """

    def __init__(
        self,
        registry: Registry,
        prefixes: PrefixResolver,
        libraries: Sequence[BuiltInLibrary] = BUILT_IN_LIBRARIES,
        vendor_dir: str = VENDOR_DIR,
    ) -> None:
        self.registry = registry
        self.prefixes = prefixes
        self.libraries = tuple(libraries)
        self.vendor_dir = format_path(vendor_dir).strip("/")
        self.logger = get_logger("resolver")

    def resolve(self, entity: Entity) -> Resolution:
        resolution = Resolution(path=entity.path)
        for tag, reference in entity.declared_using_components.items():
            edge = self.resolve_reference(entity, tag, reference)
            if edge is not None:
                resolution.edges.append(edge)
                continue
            diagnostic = UnresolvedReference(
                tag=tag,
                reference=reference,
                declaration_file=to_declaration_path(entity.path),
            )
            self.logger.warning(
                "Can't find component of %s (%s) in %s",
                reference,
                tag,
                diagnostic.declaration_file,
            )
            resolution.unresolved.append(diagnostic)
        return resolution

    def resolve_reference(self, entity: Entity, tag: str, reference: str) -> Optional[UsingComponentRef]:
        library = self.built_in_library(reference)
        if library is not None:
            return UsingComponentRef(
                tag=tag,
                is_built_in=True,
                name=self.prefixes.built_in_name(library, reference),
                path=reference,
            )

        for candidate in self.candidates(entity, reference):
            component = self._probe(candidate)
            if component is not None:
                return UsingComponentRef(
                    tag=tag,
                    is_built_in=False,
                    name=self.prefixes.display_name(component.path),
                    path=component.path,
                    target=component.path,
                )
        return None

    def candidates(self, entity: Entity, reference: str) -> List[str]:
        """Return the ordered list of paths probed for ``reference``."""
        if is_absolute_reference(reference):
            return [normalize(format_path(reference).lstrip("/"))]

        base_dir = dirname(entity.path)
        if is_relative_reference(reference):
            return [join_reference(base_dir, reference)]

        candidates = [join_reference(base_dir, reference)]
        owner = self.registry.owner_of(entity.path)
        if owner is not None:
            candidates.append(join_reference(posixpath.join(owner.root, self.vendor_dir), reference))
        candidates.append(join_reference(self.vendor_dir, reference))
        return candidates

    def built_in_library(self, reference: str) -> Optional[BuiltInLibrary]:
        for library in self.libraries:
            if reference.startswith(library.name + "/"):
                return library
        return None

    def _probe(self, candidate: str) -> Optional[Entity]:
        component = self.registry.get_component(candidate)
        if component is None:
            component = self.registry.get_component(posixpath.join(candidate, INDEX_NAME))
        return component


__all__ = ["Resolution", "UsingComponentsResolver"]
