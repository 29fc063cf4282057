"""Static tables describing what the platform provides out of the box."""

from __future__ import annotations

from typing import Dict, FrozenSet, Tuple

from .models import BuiltInLibrary

VENDOR_DIR = "miniprogram_npm"

_WEUI_COMPONENTS = (
    "actionsheet",
    "badge",
    "cell",
    "cells",
    "checkbox",
    "checkbox-group",
    "dialog",
    "form",
    "form-page",
    "gallery",
    "grids",
    "half-screen-dialog",
    "icon",
    "loading",
    "msg",
    "navigation-bar",
    "searchbar",
    "slideview",
    "sticky",
    "tabbar",
    "tabs",
    "toptips",
    "uploader",
)

BUILT_IN_LIBRARIES: Tuple[BuiltInLibrary, ...] = (
    BuiltInLibrary(
        name="weui-miniprogram",
        prefix="mp",
        components=tuple(f"weui-miniprogram/{name}/{name}" for name in _WEUI_COMPONENTS),
    ),
)

# Prefixes applied to well-known vendored packages unless overridden.
DEFAULT_PREFIXES: Dict[str, str] = {
    "@vant/weapp": "van",
    "tdesign-miniprogram": "t",
}

PRIMITIVE_TAGS: FrozenSet[str] = frozenset(
    {
        "ad",
        "ad-custom",
        "audio",
        "block",
        "button",
        "camera",
        "canvas",
        "channel-live",
        "channel-video",
        "checkbox",
        "checkbox-group",
        "cover-image",
        "cover-view",
        "editor",
        "form",
        "functional-page-navigator",
        "grid-view",
        "icon",
        "image",
        "import",
        "include",
        "input",
        "keyboard-accessory",
        "label",
        "list-view",
        "live-player",
        "live-pusher",
        "map",
        "match-media",
        "movable-area",
        "movable-view",
        "navigation-bar",
        "navigator",
        "official-account",
        "open-data",
        "page-container",
        "page-meta",
        "picker",
        "picker-view",
        "picker-view-column",
        "progress",
        "radio",
        "radio-group",
        "rich-text",
        "root-portal",
        "scroll-view",
        "share-element",
        "slider",
        "slot",
        "sticky-header",
        "sticky-section",
        "store-product",
        "swiper",
        "swiper-item",
        "switch",
        "template",
        "text",
        "textarea",
        "video",
        "view",
        "voip-room",
        "web-view",
        "wxs",
    }
)


def built_in_prefixes() -> Dict[str, str]:
    """Return the library-name -> prefix table of the built-in UI libraries."""
    return {library.name: library.prefix for library in BUILT_IN_LIBRARIES}


__all__ = [
    "BUILT_IN_LIBRARIES",
    "DEFAULT_PREFIXES",
    "PRIMITIVE_TAGS",
    "VENDOR_DIR",
    "built_in_prefixes",
]
