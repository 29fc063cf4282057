"""Tests for compgraph.orchestrator."""

from __future__ import annotations

from compgraph.orchestrator import Orchestrator
from tests._fixtures.project_builder import ProjectBuilder


def _edges(orchestrator: Orchestrator, path: str) -> list[tuple[str, str | None]]:
    entity = orchestrator.registry.get(path)
    assert entity is not None
    return [(edge.tag, edge.target) for edge in entity.using_components]


def test_page_reaches_relative_component(project_builder: ProjectBuilder) -> None:
    project_builder.page("pages/home/index", {"my-card": "../../components/card/card"})
    project_builder.component("components/card/card")

    orchestrator = project_builder.orchestrator()

    assert _edges(orchestrator, "pages/home/index") == [("my-card", "components/card/card")]
    assert orchestrator.analyze().is_reached("components/card/card")

    update = orchestrator.check_update_pack_ignore()
    assert update.patterns == []
    assert not update.changed
    assert not (project_builder.path() / "project.config.json").exists()


def test_forward_references_resolve_regardless_of_discovery_order(project_builder: ProjectBuilder) -> None:
    project_builder.page("a_pages/home/index", {"chip": "/z_widgets/chip/index"})
    project_builder.component("z_widgets/chip/index", {"badge": "../badge/index"})
    project_builder.component("z_widgets/badge/index")

    orchestrator = project_builder.orchestrator()

    assert _edges(orchestrator, "a_pages/home/index") == [("chip", "z_widgets/chip/index")]
    assert orchestrator.analyze().reached == {"z_widgets/chip/index", "z_widgets/badge/index"}


def test_unused_sibling_is_excluded_by_file_pattern(project_builder: ProjectBuilder) -> None:
    project_builder.write_json(
        "project.config.json",
        {
            "packOptions": {"ignore": [{"type": "folder", "value": "docs"}]},
            "extraIgnore": [{"type": "folder", "value": "docs"}],
        },
    )
    project_builder.page("pages/home/index", {"a": "/components/shared/a"})
    project_builder.component("components/shared/a")
    project_builder.component("components/shared/b")
    project_builder.component("components/unused/index")

    orchestrator = project_builder.orchestrator()
    update = orchestrator.check_update_pack_ignore()

    assert update.changed
    assert update.patterns == ["components/shared/b.*", "components/unused/*.*"]
    payload = project_builder.read_json("project.config.json")
    assert payload["packOptions"]["ignore"] == [
        {"type": "folder", "value": "docs"},
        {"type": "glob", "value": "components/shared/b.*"},
        {"type": "glob", "value": "components/unused/*.*"},
    ]

    assert not orchestrator.check_update_pack_ignore().changed


def test_unused_component_beside_a_page_keeps_the_page_packed(project_builder: ProjectBuilder) -> None:
    project_builder.page("pages/home/index")
    project_builder.component("pages/home/widget")

    update = project_builder.orchestrator().check_update_pack_ignore()

    assert update.patterns == ["pages/home/widget.*"]


def test_persisted_ignores_that_match_are_left_alone(project_builder: ProjectBuilder) -> None:
    project_builder.write_json(
        "project.config.json",
        {"packOptions": {"ignore": [{"type": "glob", "value": "components/unused/*.*"}]}},
    )
    project_builder.page("pages/home/index")
    project_builder.component("components/unused/index")
    before = (project_builder.path() / "project.config.json").read_text(encoding="utf-8")

    update = project_builder.orchestrator().check_update_pack_ignore()

    assert not update.changed
    assert (project_builder.path() / "project.config.json").read_text(encoding="utf-8") == before


def test_dry_run_does_not_write_or_update_cache(project_builder: ProjectBuilder) -> None:
    project_builder.page("pages/home/index")
    project_builder.component("components/unused/index")
    orchestrator = project_builder.orchestrator()

    preview = orchestrator.check_update_pack_ignore(dry_run=True)

    assert preview.changed
    assert preview.patterns == ["components/unused/*.*"]
    assert not (project_builder.path() / "project.config.json").exists()
    assert orchestrator.check_update_pack_ignore().changed


def test_add_or_update_is_idempotent(project_builder: ProjectBuilder) -> None:
    project_builder.page("pages/home/index")
    project_builder.component("components/card/index")
    orchestrator = project_builder.orchestrator()
    declaration = {"usingComponents": {"card": "/components/card/index"}}

    orchestrator.add_or_update("pages/home/index.wxml", declaration)
    first_edges = _edges(orchestrator, "pages/home/index")
    first_names = orchestrator.registry.components_of()
    orchestrator.add_or_update("pages/home/index.wxml", declaration)

    assert _edges(orchestrator, "pages/home/index") == first_edges == [("card", "components/card/index")]
    assert orchestrator.registry.components_of() == first_names
    assert len(orchestrator.registry) == 2


def test_remove_drops_entity_and_name_slot(project_builder: ProjectBuilder) -> None:
    project_builder.page("pages/home/index", {"card": "/components/card/index"})
    project_builder.component("components/card/index")
    orchestrator = project_builder.orchestrator()

    removed = orchestrator.remove("components/card/index.wxml")

    assert removed is not None
    assert orchestrator.registry.get("components/card/index") is None
    assert orchestrator.registry.components_of() == {}
    assert orchestrator.analyze().reached == frozenset()
    assert orchestrator.remove("components/card/index.wxml") is None
    assert orchestrator.remove("components/ghost/index.wxml") is None


def test_remove_clears_name_slot_of_entity_missing_from_memory(project_builder: ProjectBuilder) -> None:
    project_builder.component("components/card/index")
    orchestrator = project_builder.orchestrator()
    # The entity left memory while its name slot stayed behind.
    del orchestrator.registry._entities["components/card/index"]
    assert orchestrator.registry.components_of() == {"card": "components/card/index"}

    assert orchestrator.remove("components/card/index.wxml") is None
    assert orchestrator.registry.components_of() == {}


def test_component_detected_from_script(project_builder: ProjectBuilder) -> None:
    project_builder.page("components/legacy/index")
    project_builder.write({"components/legacy/index.js": "import x from 'y'\nComponent({\n  methods: {}\n})\n"})

    orchestrator = project_builder.orchestrator()

    entity = orchestrator.registry.get("components/legacy/index")
    assert entity is not None
    assert entity.is_component
    assert entity.name == "legacy"


def test_sub_package_components_are_owned_by_their_package(project_builder: ProjectBuilder) -> None:
    project_builder.write_json("app.json", {"subpackages": [{"root": "packageA", "independent": True}]})
    project_builder.component("packageA/components/foo/index")
    project_builder.component("components/bar/index")

    orchestrator = project_builder.orchestrator()

    assert orchestrator.registry.components_of("packageA") == {"foo": "packageA/components/foo/index"}
    assert orchestrator.registry.components_of() == {"bar": "components/bar/index"}


def test_vendored_components_get_prefixes(project_builder: ProjectBuilder) -> None:
    project_builder.component("miniprogram_npm/@vant/weapp/button/index")
    project_builder.component("miniprogram_npm/acme-ui/chip/index")

    default = project_builder.orchestrator(prefixes={"acme-ui": "acme"})
    assert default.registry.components_of() == {
        "van-button": "miniprogram_npm/@vant/weapp/button/index",
        "acme-chip": "miniprogram_npm/acme-ui/chip/index",
    }

    project_builder.write_json("package.json", {"mpComponentPrefixes": {"@vant/weapp": "vv"}})
    overridden = project_builder.orchestrator(prefixes={"@vant/weapp": "caller"})
    assert "vv-button" in overridden.registry.components_of()


def test_unresolved_references_are_collected_and_cleared(project_builder: ProjectBuilder) -> None:
    project_builder.page("pages/home/index", {"ghost": "../ghost/index"})
    orchestrator = project_builder.orchestrator()

    unresolved = orchestrator.unresolved
    assert len(unresolved) == 1
    assert unresolved[0].tag == "ghost"
    assert unresolved[0].declaration_file == "pages/home/index.json"

    orchestrator.add_or_update("pages/home/index.wxml", {"usingComponents": {}})
    assert orchestrator.unresolved == []


def test_update_using_components_in_json_rebuilds_from_markup(project_builder: ProjectBuilder) -> None:
    project_builder.page(
        "pages/home/index",
        {"stale": "/components/stale/index"},
        markup="<view>\n  <card-item/>\n  <mp-dialog/>\n  <unknown-tag/>\n</view>\n",
    )
    project_builder.component("components/card-item/index")
    orchestrator = project_builder.orchestrator()

    using = orchestrator.update_using_components_in_json("pages/home/index.wxml")

    expected = {
        "card-item": "/components/card-item/index",
        "mp-dialog": "weui-miniprogram/dialog/dialog",
    }
    assert using == expected
    assert project_builder.read_json("pages/home/index.json")["usingComponents"] == expected
    assert orchestrator.analyze().is_reached("components/card-item/index")
    assert orchestrator.update_using_components_in_json("pages/none/index.wxml") is None


def test_independent_sub_package_cannot_use_main_components(project_builder: ProjectBuilder) -> None:
    project_builder.write_json("app.json", {"subPackages": [{"root": "solo", "independent": True}]})
    project_builder.page("solo/pages/p/index", markup="<card/>\n<chip/>\n")
    project_builder.component("components/card/index")
    project_builder.component("solo/components/chip/index")
    orchestrator = project_builder.orchestrator()

    using = orchestrator.update_using_components_in_json("solo/pages/p/index.wxml")

    assert using == {"chip": "/solo/components/chip/index"}


def test_bootstrap_is_repeatable(project_builder: ProjectBuilder) -> None:
    project_builder.page("pages/home/index", {"a": "/components/a/index", "b": "/components/b/index"})
    project_builder.component("components/a/index", {"b": "../b/index"})
    project_builder.component("components/b/index", {"a": "../a/index"})
    orchestrator = project_builder.orchestrator()
    first = {entity.path: entity.using_components for entity in orchestrator.registry}

    orchestrator.bootstrap()
    second = {entity.path: entity.using_components for entity in orchestrator.registry}

    assert first == second
    assert orchestrator.report().unreached == []


def test_root_relative_markup_paths_read_project_files(project_builder: ProjectBuilder) -> None:
    project_builder.page("pages/home/index", markup="<legacy/>\n")
    project_builder.page("components/legacy/index")
    project_builder.write({"components/legacy/index.js": "\nComponent({\n  methods: {}\n})\n"})
    orchestrator = project_builder.orchestrator()

    entity = orchestrator.add_or_update("/components/legacy/index.wxml", {"usingComponents": {}})

    assert entity.path == "components/legacy/index"
    assert entity.is_component
    assert orchestrator.registry.components_of() == {"legacy": "components/legacy/index"}

    using = orchestrator.update_using_components_in_json("/pages/home/index.wxml")

    assert using == {"legacy": "/components/legacy/index"}
    assert project_builder.read_json("pages/home/index.json")["usingComponents"] == using
    assert orchestrator.analyze().is_reached("components/legacy/index")
