"""Tag extraction from markup files."""

from __future__ import annotations

import re
from typing import AbstractSet, List

from .builtins import PRIMITIVE_TAGS

_COMMENT_PATTERN = re.compile(r"<!--.*?-->", re.DOTALL)
_WXS_BLOCK_PATTERN = re.compile(r"<wxs\b[^>]*>.*?</wxs\s*>", re.DOTALL)
_TAG_PATTERN = re.compile(r"<([A-Za-z][\w.-]*)")


def get_all_tags(markup: str) -> List[str]:
    """Return opening tag names in order of first appearance."""
    cleaned = _COMMENT_PATTERN.sub("", markup)
    cleaned = _WXS_BLOCK_PATTERN.sub("", cleaned)
    return list(dict.fromkeys(match.group(1) for match in _TAG_PATTERN.finditer(cleaned)))


def get_custom_tags(markup: str, primitive_tags: AbstractSet[str] = PRIMITIVE_TAGS) -> List[str]:
    """Return the tags that are not primitive platform elements."""
    return [tag for tag in get_all_tags(markup) if tag not in primitive_tags]


__all__ = ["get_all_tags", "get_custom_tags"]
