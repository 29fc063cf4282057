"""In-memory store of pages and components, partitioned by owning package."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from .logging import get_logger
from .models import Entity, SubPackage
from .paths import format_path, is_within


class Registry:
    """Arena of entities keyed by canonical path plus per-package name maps.

    The maps are not synchronised; callers confine mutations to one owner.
    """

    def __init__(self, sub_packages: Iterable[SubPackage] = ()) -> None:
        self._entities: Dict[str, Entity] = {}
        self._sub_packages: Dict[str, SubPackage] = {}
        for sub_package in sub_packages:
            root = format_path(sub_package.root).strip("/")
            if root:
                self._sub_packages[root] = SubPackage(root=root, independent=sub_package.independent)
        self._main_names: Dict[str, str] = {}
        self._sub_names: Dict[str, Dict[str, str]] = {root: {} for root in self._sub_packages}
        self.logger = get_logger("registry")

    def __contains__(self, path: object) -> bool:
        return path in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(list(self._entities.values()))

    @property
    def sub_packages(self) -> List[SubPackage]:
        return list(self._sub_packages.values())

    def owner_of(self, path: str) -> Optional[SubPackage]:
        """Return the sub-package owning ``path``, or None for the main package."""
        best: Optional[SubPackage] = None
        for root, sub_package in self._sub_packages.items():
            if is_within(path, root) and (best is None or len(root) > len(best.root)):
                best = sub_package
        return best

    def upsert(self, entity: Entity) -> Optional[str]:
        """Store ``entity``, replacing any previous record at the same path.

        Returns the path of a different component whose name slot was
        overwritten, if any.
        """
        previous = self._entities.get(entity.path)
        if previous is not None:
            self._release_name(previous)
        self._entities[entity.path] = entity
        if not entity.is_component:
            return None

        names = self._names_for(self.owner_of(entity.path))
        displaced = names.get(entity.name)
        names[entity.name] = entity.path
        if displaced is not None and displaced != entity.path:
            self.logger.debug(
                "Component name %r now refers to %s (was %s)", entity.name, entity.path, displaced
            )
            return displaced
        return None

    def remove(self, path: str) -> Optional[Entity]:
        entity = self._entities.pop(path, None)
        if entity is not None:
            self._release_name(entity)
        return entity

    def forget_name(self, name: str, path: str) -> None:
        """Drop the name slot for ``path`` when the entity record is already gone."""
        names = self._names_for(self.owner_of(path))
        if names.get(name) == path:
            del names[name]

    def get(self, path: str) -> Optional[Entity]:
        return self._entities.get(path)

    def get_component(self, path: str) -> Optional[Entity]:
        entity = self._entities.get(path)
        if entity is not None and entity.is_component:
            return entity
        return None

    def pages(self) -> List[Entity]:
        return [entity for entity in self._entities.values() if not entity.is_component]

    def components(self) -> List[Entity]:
        return [entity for entity in self._entities.values() if entity.is_component]

    def all_component_paths(self) -> List[str]:
        return [entity.path for entity in self.components()]

    def components_of(self, root: Optional[str] = None) -> Dict[str, str]:
        """Return name -> path for the main package (``None``) or a sub-package root."""
        if root is None:
            return dict(self._main_names)
        return dict(self._sub_names.get(format_path(root).strip("/"), {}))

    def lookup_name(self, name: str, owner: Optional[SubPackage]) -> Optional[Entity]:
        """Find the component registered as ``name`` that ``owner`` may use."""
        path: Optional[str] = None
        if owner is not None:
            path = self._sub_names.get(owner.root, {}).get(name)
            if path is None and not owner.independent:
                path = self._main_names.get(name)
        else:
            path = self._main_names.get(name)
        return self._entities.get(path) if path is not None else None

    def _names_for(self, owner: Optional[SubPackage]) -> Dict[str, str]:
        if owner is None:
            return self._main_names
        return self._sub_names.setdefault(owner.root, {})

    def _release_name(self, entity: Entity) -> None:
        if entity.is_component:
            self.forget_name(entity.name, entity.path)


__all__ = ["Registry"]
