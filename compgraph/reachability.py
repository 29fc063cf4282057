"""Liveness of components: which ones some page actually reaches."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, FrozenSet, List, Set

from .logging import get_logger
from .registry import Registry


@dataclass(frozen=True)
class Reachability:
    """Reached component paths and the remaining unreached ones."""

    reached: FrozenSet[str]
    unreached: List[str] = field(default_factory=list)

    def is_reached(self, path: str) -> bool:
        return path in self.reached


class ReachabilityAnalyzer:
    """Breadth-first walk from every page over resolved, non-built-in edges."""

    def __init__(self) -> None:
        self.logger = get_logger("reachability")

    def analyze(self, registry: Registry) -> Reachability:
        reached: Set[str] = set()
        queue: Deque[str] = deque()

        for page in registry.pages():
            for edge in page.using_components:
                if edge.target is not None and edge.target not in reached:
                    reached.add(edge.target)
                    queue.append(edge.target)

        while queue:
            component = registry.get(queue.popleft())
            if component is None:
                continue
            for edge in component.using_components:
                if edge.target is not None and edge.target not in reached:
                    reached.add(edge.target)
                    queue.append(edge.target)

        # Dangling targets left behind by a removed entity are not live components.
        live = frozenset(path for path in reached if registry.get_component(path) is not None)
        unreached = [path for path in registry.all_component_paths() if path not in live]
        self.logger.debug(
            "Reached %d components, %d unreached", len(live), len(unreached)
        )
        return Reachability(reached=live, unreached=unreached)


__all__ = ["Reachability", "ReachabilityAnalyzer"]
