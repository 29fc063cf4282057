"""Tests for the FastAPI service mode."""

from __future__ import annotations

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

from compgraph.service import create_app
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def client(project_builder: ProjectBuilder) -> TestClient:
    project_builder.page("pages/home/index", {"card": "/components/card/index"})
    project_builder.component("components/card/index")
    project_builder.component("components/unused/index")
    return TestClient(create_app(project_builder.orchestrator()))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_get_entity(client: TestClient) -> None:
    response = client.get("/entities/pages/home/index.wxml")
    assert response.status_code == 200
    data = response.json()
    assert data["path"] == "pages/home/index"
    assert data["is_component"] is False
    assert data["using_components"] == [
        {"tag": "card", "is_built_in": False, "name": "card", "path": "/components/card/index"}
    ]

    assert client.get("/entities/pages/none/index").status_code == 404


def test_put_and_delete_entity(client: TestClient) -> None:
    response = client.put(
        "/entities",
        json={
            "markup_path": "pages/home/index.wxml",
            "declaration": {"usingComponents": {"unused": "/components/unused/index"}},
        },
    )
    assert response.status_code == 200
    assert [edge["name"] for edge in response.json()["using_components"]] == ["unused"]

    report = client.get("/report").json()
    assert report["reached"] == ["components/unused/index"]
    assert report["unreached"] == ["components/card/index"]

    deleted = client.delete("/entities/components/unused/index.wxml")
    assert deleted.json() == {"removed": True}
    assert client.get("/report").json()["reached"] == []


def test_ignores_dry_run(client: TestClient) -> None:
    response = client.post("/ignores", json={"dry_run": True})
    assert response.status_code == 200
    assert response.json() == {"changed": True, "patterns": ["components/unused/*.*"]}


def test_bootstrap_endpoint(client: TestClient) -> None:
    response = client.post("/bootstrap")
    assert response.json() == {"pages": 1, "components": 2}
