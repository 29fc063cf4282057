"""Component dependency graph and pack-ignore maintenance for mini-program projects."""

from .models import (
    BuiltInLibrary,
    Entity,
    PackIgnoreRule,
    SubPackage,
    UnresolvedReference,
    UsingComponentRef,
)
from .orchestrator import AnalysisReport, Orchestrator

__version__ = "0.1.0"

__all__ = [
    "AnalysisReport",
    "BuiltInLibrary",
    "Entity",
    "Orchestrator",
    "PackIgnoreRule",
    "SubPackage",
    "UnresolvedReference",
    "UsingComponentRef",
    "__version__",
]
