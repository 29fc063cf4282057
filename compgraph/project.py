"""Project file access: markup discovery, declaration files and manifests."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .config import CompGraphConfig, load_config
from .logging import get_logger
from .models import PackIgnoreRule, SubPackage
from .paths import format_path, to_declaration_path, to_script_paths

APP_MANIFEST = "app.json"
PROJECT_CONFIG = "project.config.json"
PACKAGE_MANIFEST = "package.json"

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".vscode",
    "node_modules",
    "__pycache__",
}

_COMPONENT_SCRIPT_PATTERN = re.compile(r"\sComponent\s*\(\s*{[\s\S]*?}\s*\)")

logger = get_logger("project")


@dataclass
class ExcludeRule:
    """A discovery exclusion from the ``exclude_paths`` setting."""

    pattern: str
    directory_only: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False
        if self.has_slash:
            return fnmatchcase(rel_path, self.pattern)
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _build_exclude_rule(pattern: str) -> ExcludeRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None
    directory_only = pattern.endswith("/")
    pattern = pattern.rstrip("/").lstrip("/")
    return ExcludeRule(pattern=pattern, directory_only=directory_only, has_slash="/" in pattern)


def _is_excluded(rel_path: str, is_dir: bool, rules: Sequence[ExcludeRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def _as_rules(value: Any) -> List[PackIgnoreRule]:
    if not isinstance(value, list):
        return []
    rules: List[PackIgnoreRule] = []
    for item in value:
        if isinstance(item, dict) and isinstance(item.get("value"), str):
            rules.append(PackIgnoreRule(type=str(item.get("type", "")), value=item["value"]))
    return rules


class ProjectFiles:
    """Reads and writes the files of one mini-program project root."""

    def __init__(self, root: str | Path, config: CompGraphConfig | None = None) -> None:
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Project path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {root}")
        self.root = root_path
        self.config = config or load_config(root_path)
        self._rules = [
            rule for rule in (_build_exclude_rule(p) for p in self.config.exclude_paths) if rule is not None
        ]

    # ------------------------------------------------------------------
    # Discovery

    def discover_markup_files(self) -> List[str]:
        """Return project-relative markup paths that have a declaration file."""
        paths = [
            rel_path
            for rel_path in self._iter_files()
            if rel_path.endswith(self.config.markup_ext) and self.exists(to_declaration_path(rel_path))
        ]
        return sorted(paths)

    def _iter_files(self) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(self.root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(self.root).as_posix() if current_dir != self.root else ""

            kept = []
            for name in dirnames:
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if name in _EXCLUDED_DIRS or _is_excluded(rel_path, True, self._rules):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in filenames:
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _is_excluded(rel_path, False, self._rules):
                    continue
                yield rel_path

    # ------------------------------------------------------------------
    # File access

    def resolve(self, rel_path: str) -> Path:
        """Map a project-relative path onto the root; a leading "/" is root-relative."""
        return self.root / format_path(rel_path).lstrip("/")

    def exists(self, rel_path: str) -> bool:
        return self.resolve(rel_path).is_file()

    def read_text(self, rel_path: str) -> str:
        return self.resolve(rel_path).read_text(encoding="utf-8")

    def read_json(self, rel_path: str, default: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Read a JSON object; a missing or malformed file yields ``default``."""
        fallback: Dict[str, Any] = {} if default is None else default
        try:
            data = json.loads(self.read_text(rel_path))
        except FileNotFoundError:
            return fallback
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.debug("Ignoring malformed JSON in %s: %s", rel_path, exc)
            return fallback
        return data if isinstance(data, dict) else fallback

    def write_json(self, rel_path: str, data: Dict[str, Any], tab_width: int | None = None) -> None:
        indent = self.config.tab_width if tab_width is None else tab_width
        target = self.resolve(rel_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(data, indent=indent, ensure_ascii=False) + "\n", encoding="utf-8")

    def script_declares_component(self, markup_path: str) -> bool:
        """Return True when the entity's script registers itself via ``Component({...})``."""
        for script_path in to_script_paths(markup_path):
            if self.exists(script_path):
                return bool(_COMPONENT_SCRIPT_PATTERN.search(self.read_text(script_path)))
        return False

    # ------------------------------------------------------------------
    # Manifests

    def load_sub_packages(self) -> List[SubPackage]:
        app_json = self.read_json(APP_MANIFEST)
        raw = app_json.get("subpackages") or app_json.get("subPackages") or []
        if not isinstance(raw, list):
            return []
        sub_packages: List[SubPackage] = []
        for item in raw:
            if isinstance(item, dict) and isinstance(item.get("root"), str):
                sub_packages.append(
                    SubPackage(root=item["root"], independent=bool(item.get("independent", False)))
                )
        return sub_packages

    def load_package_prefixes(self) -> Dict[str, str]:
        package_json = self.read_json(PACKAGE_MANIFEST)
        prefixes = package_json.get("mpComponentPrefixes")
        if not isinstance(prefixes, dict):
            return {}
        return {str(name): str(prefix) if prefix else "" for name, prefix in prefixes.items()}

    def load_pack_ignores(self) -> Tuple[List[PackIgnoreRule], List[PackIgnoreRule]]:
        """Return ``(packOptions.ignore, extraIgnore)`` from the project config."""
        project_config = self.read_json(PROJECT_CONFIG)
        pack_options = project_config.get("packOptions")
        ignores = _as_rules(pack_options.get("ignore")) if isinstance(pack_options, dict) else []
        extras = _as_rules(project_config.get("extraIgnore"))
        return ignores, extras

    def write_pack_ignores(self, rules: Sequence[PackIgnoreRule], tab_width: int | None = None) -> None:
        project_config = self.read_json(PROJECT_CONFIG)
        pack_options = project_config.get("packOptions")
        if not isinstance(pack_options, dict):
            pack_options = {}
            project_config["packOptions"] = pack_options
        pack_options["ignore"] = [rule.to_dict() for rule in rules]
        self.write_json(PROJECT_CONFIG, project_config, tab_width)


__all__ = [
    "APP_MANIFEST",
    "PACKAGE_MANIFEST",
    "PROJECT_CONFIG",
    "ExcludeRule",
    "ProjectFiles",
]
