"""Core data models shared across compgraph components."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class UsingComponentRef:
    """Resolved edge from an entity to a component it declares."""

    tag: str
    is_built_in: bool
    name: str
    path: str
    target: Optional[str] = None

    @property
    def declared_path(self) -> str:
        """Path as written back into a declaration file."""
        if self.is_built_in:
            return self.path
        return "/" + self.path


@dataclass
class Entity:
    """A page or component, keyed by its canonical project-relative path."""

    path: str
    is_component: bool
    name: str = ""
    declaration: Dict[str, Any] = field(default_factory=dict)
    using_components: List[UsingComponentRef] = field(default_factory=list)

    @property
    def declared_using_components(self) -> Dict[str, str]:
        raw = self.declaration.get("usingComponents")
        if not isinstance(raw, dict):
            return {}
        return {str(tag): ref for tag, ref in raw.items() if isinstance(ref, str)}


@dataclass(frozen=True)
class UnresolvedReference:
    """Diagnostic for a declared tag that maps to no known component."""

    tag: str
    reference: str
    declaration_file: str


@dataclass(frozen=True)
class SubPackage:
    """Project subdivision with its own root directory."""

    root: str
    independent: bool = False


@dataclass(frozen=True)
class BuiltInLibrary:
    """UI library shipped with the platform rather than vendored."""

    name: str
    prefix: str
    components: Tuple[str, ...]


@dataclass(frozen=True)
class PackIgnoreRule:
    """Entry of the packaging ignore list in project.config.json."""

    type: str
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "value": self.value}
