"""Tests for compgraph.prefixes."""

from __future__ import annotations

from compgraph.builtins import BUILT_IN_LIBRARIES
from compgraph.prefixes import (
    PrefixResolver,
    component_name_from_path,
    merge_prefix_tables,
    normalize_prefixes,
)


def test_component_name_uses_directory_for_index_and_same_named_files() -> None:
    assert component_name_from_path("components/card/index") == "card"
    assert component_name_from_path("components/card/card") == "card"
    assert component_name_from_path("components/card/header") == "header"
    assert component_name_from_path("components/card/index.wxml") == "card"
    assert component_name_from_path("index") == "index"


def test_vendored_component_gets_single_separator() -> None:
    for prefix in ("van", "van-"):
        resolver = PrefixResolver({"@vant/weapp": prefix})
        assert resolver.display_name("miniprogram_npm/@vant/weapp/button/index") == "van-button"


def test_local_component_is_not_prefixed() -> None:
    resolver = PrefixResolver({"@vant/weapp": "van"})
    assert resolver.display_name("components/button/index") == "button"
    assert resolver.prefix_for("components/button/index") == ""


def test_package_match_requires_segment_boundary() -> None:
    resolver = PrefixResolver({"@vant/weapp": "van"})
    assert resolver.display_name("miniprogram_npm/@vant/weapp-extra/button/index") == "button"


def test_first_configured_package_wins() -> None:
    path = "miniprogram_npm/lib/sub/chip/index"
    assert PrefixResolver({"lib": "a", "lib/sub": "b"}).display_name(path) == "a-chip"
    assert PrefixResolver({"lib/sub": "b", "lib": "a"}).display_name(path) == "b-chip"


def test_sub_package_vendor_root() -> None:
    resolver = PrefixResolver(
        {"@vant/weapp": "van"}, ["miniprogram_npm", "packageA/miniprogram_npm"]
    )
    assert resolver.display_name("packageA/miniprogram_npm/@vant/weapp/cell/index") == "van-cell"


def test_merge_prefix_tables_later_tables_win_and_normalise() -> None:
    merged = merge_prefix_tables({"a": "x"}, None, {"a": "y-"}, {"b": ""})
    assert merged == {"a": "y-", "b": ""}
    assert normalize_prefixes({"c": "z"}) == {"c": "z-"}


def test_built_in_names_use_library_prefix() -> None:
    resolver = PrefixResolver({})
    names = resolver.built_in_names(BUILT_IN_LIBRARIES)
    assert names["mp-dialog"] == "weui-miniprogram/dialog/dialog"

    overridden = PrefixResolver({"weui-miniprogram": "wx"}).built_in_names(BUILT_IN_LIBRARIES)
    assert overridden["wx-dialog"] == "weui-miniprogram/dialog/dialog"
