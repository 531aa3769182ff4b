"""Tests for API endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

from layerscope.main import app
from tests.conftest import LANDING_PAGE_JSON


client = TestClient(app)


def test_health():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "image-box" in data["widget_types"]
    assert len(data["widget_types"]) == 8
    assert data["env"] == "development"


def test_convert_infer():
    response = client.post("/api/convert", json={"layers": LANDING_PAGE_JSON, "canvas_width": 1200})
    assert response.status_code == 200
    data = response.json()
    root = data["root"]
    assert root["name"] == "Root Container"
    assert root["layout"]["direction"] == "column"

    hero, row = root["children"]
    assert hero["id"] == "hero"
    assert hero["widget_type"] == "heading"
    assert hero["text_style"]["font_size"] == 32
    assert row["name"] == "Card Row"
    assert row["layout"]["direction"] == "row"
    assert row["pattern"]["count"] == 2
    assert [c["widget_type"] for c in row["children"]] == ["image-box", "image-box"]
    assert row["children"][0]["composite_data"]["title"] == "First"

    assert data["node_count"] == 9
    assert data["processing_time_ms"] >= 0


def test_convert_preserve():
    response = client.post("/api/convert", json={"layers": LANDING_PAGE_JSON, "mode": "preserve"})
    assert response.status_code == 200
    root = response.json()["root"]
    assert [c["id"] for c in root["children"]] == ["hero", "cards"]
    cards = root["children"][1]
    assert cards["widget_type"] == "container"
    assert cards["layout"]["direction"] == "row"
    assert [c["id"] for c in cards["children"]] == ["card-a", "card-b"]
    assert [c["widget_type"] for c in cards["children"]] == ["image-box", "image-box"]
    assert cards["children"][1]["composite_data"]["title"] == "Second"


def test_convert_threshold_override():
    response = client.post(
        "/api/convert",
        json={"layers": LANDING_PAGE_JSON, "proximity_threshold": 100},
    )
    assert response.status_code == 200
    assert response.json()["root"]["widget_type"] == "image-box"


def test_convert_scored_strategy():
    response = client.post(
        "/api/convert",
        json={"layers": LANDING_PAGE_JSON, "layout_strategy": "scored"},
    )
    assert response.status_code == 200
    root = response.json()["root"]
    assert root["layout"]["direction"] == "column"
    assert root["children"][1]["layout"]["direction"] == "row"


def test_convert_empty():
    response = client.post("/api/convert", json={"layers": []})
    assert response.status_code == 200
    data = response.json()
    assert data["node_count"] == 1
    assert data["root"]["confidence"] == 0.0
    assert data["root"]["children"] == []


def test_text_without_style():
    layers = [{"kind": "text", "id": "t", "bounds": {"top": 0, "left": 0, "right": 100, "bottom": 20}}]
    response = client.post("/api/convert", json={"layers": layers})
    assert response.status_code == 200
    root = response.json()["root"]
    assert root["widget_type"] == "text-editor"
    assert root["text_style"]["font_size"] == 16
    assert root["text_style"]["color"] == "#000000"


def test_inverted_bounds_rejected():
    layers = [{"kind": "image", "id": "bad", "bounds": {"top": 50, "left": 0, "right": 10, "bottom": 0}}]
    response = client.post("/api/convert", json={"layers": layers})
    assert response.status_code == 422
    assert "Inverted bounds" in response.json()["detail"]


def test_non_finite_bounds_rejected():
    body = '{"layers": [{"kind": "image", "id": "bad", "bounds": {"top": NaN, "left": 0, "right": 10, "bottom": 10}}]}'
    response = client.post("/api/convert", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 422
    assert "Non-finite bounds" in response.json()["detail"]


def test_non_finite_threshold_rejected():
    body = '{"layers": [], "proximity_threshold": NaN}'
    response = client.post("/api/convert", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 422
    error = response.json()["detail"][0]
    assert error["loc"] == ["body", "proximity_threshold"]
    assert "input" not in error


def test_non_finite_font_size_rejected():
    body = (
        '{"layers": [{"kind": "text", "id": "t", "bounds": {"top": 0, "left": 0, "right": 10, "bottom": 10},'
        ' "text_style": {"font_size": Infinity}}]}'
    )
    response = client.post("/api/convert", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 422


def test_layout_non_finite_bounds_rejected():
    body = '{"children": [{"top": 0, "left": 0, "right": Infinity, "bottom": 10}]}'
    response = client.post("/api/layout", content=body, headers={"Content-Type": "application/json"})
    assert response.status_code == 422
    assert "Non-finite bounds" in response.json()["detail"]


def test_unknown_kind_rejected():
    layers = [{"kind": "video", "id": "v", "bounds": {"top": 0, "left": 0, "right": 10, "bottom": 10}}]
    response = client.post("/api/convert", json={"layers": layers})
    assert response.status_code == 422


def test_depth_error_is_422():
    layer = {"kind": "image", "id": "leaf", "bounds": {"top": 0, "left": 0, "right": 10, "bottom": 10}}
    for i in range(40):
        layer = {"kind": "group", "id": f"g{i}", "children": [layer]}
    response = client.post("/api/convert", json={"layers": [layer], "mode": "preserve"})
    assert response.status_code == 422
    assert "max_depth" in response.json()["detail"]


def test_layout_endpoint():
    children = [
        {"top": 0, "left": 0, "right": 10, "bottom": 10},
        {"top": 0, "left": 20, "right": 30, "bottom": 10},
        {"top": 0, "left": 42, "right": 52, "bottom": 10},
        {"top": 0, "left": 63, "right": 73, "bottom": 10},
        {"top": 0, "left": 163, "right": 173, "bottom": 10},
    ]
    response = client.post("/api/layout", json={"children": children})
    assert response.status_code == 200
    data = response.json()
    assert data["direction"] == "row"
    assert data["gap"] == 11.5
    assert data["justify_content"] == "space-between"


def test_layout_forced_direction():
    children = [
        {"top": 0, "left": 0, "right": 10, "bottom": 10},
        {"top": 0, "left": 20, "right": 30, "bottom": 10},
    ]
    response = client.post("/api/layout", json={"children": children, "direction": "column"})
    assert response.status_code == 200
    assert response.json()["direction"] == "column"
