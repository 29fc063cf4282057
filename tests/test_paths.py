"""Tests for compgraph.paths."""

from __future__ import annotations

from compgraph import paths


def test_canonicalize_strips_extension_and_normalises_separators() -> None:
    assert paths.canonicalize("pages\\home\\index.wxml") == "pages/home/index"
    assert paths.canonicalize("./components/card/card.wxml") == "components/card/card"
    assert paths.canonicalize("/pages/about.wxml") == "pages/about"


def test_strip_extension_only_touches_last_segment() -> None:
    assert paths.strip_extension("components/v1.x/card") == "components/v1.x/card"
    assert paths.strip_extension("components/card/index.json") == "components/card/index"


def test_sibling_file_paths() -> None:
    assert paths.to_declaration_path("pages/home/index.wxml") == "pages/home/index.json"
    assert paths.to_markup_path("pages/home/index") == "pages/home/index.wxml"
    assert paths.to_markup_path("pages/home/index.json", ".axml") == "pages/home/index.axml"
    assert paths.to_script_paths("pages/a.wxml") == ("pages/a.js", "pages/a.ts")


def test_join_reference_resolves_dot_segments() -> None:
    assert paths.join_reference("pages/home", "../../components/card") == "components/card"
    assert paths.join_reference("pages/home", "./item") == "pages/home/item"
    assert paths.join_reference("", "./card") == "card"
    assert paths.join_reference("miniprogram_npm", "@vant/weapp/button") == "miniprogram_npm/@vant/weapp/button"


def test_reference_kinds() -> None:
    assert paths.is_absolute_reference("/components/card")
    assert paths.is_absolute_reference("\\components\\card")
    assert not paths.is_absolute_reference("components/card")
    assert paths.is_relative_reference("./card")
    assert paths.is_relative_reference("../card")
    assert not paths.is_relative_reference("@vant/weapp/button")


def test_is_within_respects_segment_boundaries() -> None:
    assert paths.is_within("packageA/pages/x", "packageA")
    assert paths.is_within("packageA", "packageA/")
    assert not paths.is_within("packageAB/pages/x", "packageA")
