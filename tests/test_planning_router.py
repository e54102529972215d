"""
tests/test_planning_router.py

HTTP contract tests for the catalog and planning routers.

The request-scoped DB dependency is overridden with an in-memory SQLite
session, so no PostgreSQL server is needed and the app lifespan never runs.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.main import app
from db.session import get_db
from planning.storage import SQLAlchemyPlanningStore
from tests.conftest import JAN_RECORD_ID, P1, P3, R1


@pytest.fixture()
def client(seeded_db: Session) -> Iterator[TestClient]:
    def _override_get_db() -> Iterator[Session]:
        yield seeded_db

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _grid_params(**overrides) -> dict:
    params = {"region_id": str(R1), "year": 2026, "start_month": 1, "end_month": 3}
    params.update(overrides)
    return params


def _commit_body(*edits: dict, **overrides) -> dict:
    body = {
        "region_id": str(R1),
        "year": 2026,
        "start_month": 1,
        "end_month": 3,
        "edits": list(edits),
    }
    body.update(overrides)
    return body


# ---------------------------------------------------------------------------
# Health / catalog
# ---------------------------------------------------------------------------


class TestCatalogEndpoints:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_products(self, client: TestClient) -> None:
        response = client.get("/catalog/products")
        assert response.status_code == 200
        assert [p["code"] for p in response.json()] == ["YUAMF.001", "YUAMF.002", "YUMCB.001"]

    def test_products_by_category_case_insensitive(self, client: TestClient) -> None:
        response = client.get("/catalog/products", params={"category": "mcb"})
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [str(P3)]

    def test_unknown_category(self, client: TestClient) -> None:
        assert client.get("/catalog/products", params={"category": "TRUCK"}).status_code == 422

    def test_active_regions(self, client: TestClient) -> None:
        response = client.get("/catalog/regions", params={"active_only": True})
        assert [r["code"] for r in response.json()] == ["JTM"]


# ---------------------------------------------------------------------------
# Grid
# ---------------------------------------------------------------------------


class TestGridEndpoint:
    def test_grid_shape(self, client: TestClient) -> None:
        response = client.get("/planning/grid", params=_grid_params())
        assert response.status_code == 200
        payload = response.json()

        assert payload["region_code"] == "JTM"
        assert [c["key"] for c in payload["columns"]] == ["2026-01", "2026-02", "2026-03"]
        assert [c["label"] for c in payload["columns"]] == ["Jan 2026", "Feb 2026", "Mar 2026"]
        assert len(payload["rows"]) == 3

        p1 = next(row for row in payload["rows"] if row["product_id"] == str(P1))
        jan = p1["months"]["2026-01"]
        assert jan["record_id"] == str(JAN_RECORD_ID)
        assert (jan["opening_stock"], jan["order_qty"], jan["estimated_sale_qty"], jan["closing_stock"]) == (
            100,
            50,
            60,
            90,
        )
        assert p1["months"]["2026-02"]["record_id"] is None

    def test_category_filter(self, client: TestClient) -> None:
        response = client.get("/planning/grid", params=_grid_params(category="MCB"))
        assert [row["product_id"] for row in response.json()["rows"]] == [str(P3)]

    def test_invalid_range(self, client: TestClient) -> None:
        response = client.get("/planning/grid", params=_grid_params(start_month=5, end_month=2))
        assert response.status_code == 422

    def test_unknown_region(self, client: TestClient) -> None:
        response = client.get("/planning/grid", params=_grid_params(region_id=str(uuid.uuid4())))
        assert response.status_code == 404

    def test_missing_region(self, client: TestClient) -> None:
        assert client.get("/planning/grid", params={"year": 2026}).status_code == 422


# ---------------------------------------------------------------------------
# Commit
# ---------------------------------------------------------------------------


class TestCommitEndpoint:
    def test_commit_creates_and_returns_grid(self, client: TestClient) -> None:
        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-02", "field": "opening_stock", "value": 40}
        )
        response = client.post("/planning/grid/commit", json=body)
        assert response.status_code == 200
        payload = response.json()

        assert (payload["written"], payload["created"], payload["updated"]) == (1, 1, 0)
        p1 = next(row for row in payload["grid"]["rows"] if row["product_id"] == str(P1))
        feb = p1["months"]["2026-02"]
        assert feb["record_id"] is not None
        assert (feb["opening_stock"], feb["closing_stock"], feb["modified"]) == (40, 40, False)

    def test_same_commit_twice_updates(self, client: TestClient) -> None:
        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-02", "field": "order_qty", "value": "12"},
            {"product_id": str(P1), "month_key": "2026-01", "field": "turnover_ratio", "value": "1.5"},
        )
        client.post("/planning/grid/commit", json=body)
        response = client.post("/planning/grid/commit", json=body)
        assert response.status_code == 200
        assert (response.json()["created"], response.json()["updated"]) == (0, 2)

    def test_invalid_value_rejected(self, client: TestClient) -> None:
        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-02", "field": "order_qty", "value": -4}
        )
        assert client.post("/planning/grid/commit", json=body).status_code == 422

    def test_boolean_value_rejected(self, client: TestClient) -> None:
        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-02", "field": "opening_stock", "value": True}
        )
        assert client.post("/planning/grid/commit", json=body).status_code == 422

    def test_negative_ratio_rejected(self, client: TestClient) -> None:
        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-01", "field": "turnover_ratio", "value": "-0.5"}
        )
        assert client.post("/planning/grid/commit", json=body).status_code == 422

    def test_out_of_range_month_key_rejected(self, client: TestClient) -> None:
        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-13", "field": "order_qty", "value": 4}
        )
        assert client.post("/planning/grid/commit", json=body).status_code == 422

    def test_category_case_matches_grid_endpoint(self, client: TestClient) -> None:
        assert client.get("/planning/grid", params=_grid_params(category="amb")).status_code == 200

        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-02", "field": "order_qty", "value": 4},
            category="amb",
        )
        response = client.post("/planning/grid/commit", json=body)
        assert response.status_code == 200
        assert response.json()["grid"]["category"] == "AMB"

    def test_non_editable_field_rejected(self, client: TestClient) -> None:
        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-02", "field": "closing_stock", "value": 4}
        )
        assert client.post("/planning/grid/commit", json=body).status_code == 422

    def test_unknown_cell(self, client: TestClient) -> None:
        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-07", "field": "order_qty", "value": 4}
        )
        assert client.post("/planning/grid/commit", json=body).status_code == 404

    def test_empty_edit_list_rejected(self, client: TestClient) -> None:
        assert client.post("/planning/grid/commit", json=_commit_body()).status_code == 422

    def test_store_failure_maps_to_503(self, client: TestClient, monkeypatch) -> None:
        from planning.errors import PlanningStoreError

        def boom(self, records):
            raise PlanningStoreError("database unavailable")

        monkeypatch.setattr(SQLAlchemyPlanningStore, "upsert_planning_records", boom)
        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-02", "field": "order_qty", "value": 4}
        )
        assert client.post("/planning/grid/commit", json=body).status_code == 503

    def test_bad_edit_writes_nothing(self, client: TestClient) -> None:
        body = _commit_body(
            {"product_id": str(P1), "month_key": "2026-02", "field": "order_qty", "value": 4},
            {"product_id": str(P1), "month_key": "2026-03", "field": "order_qty", "value": "x"},
        )
        assert client.post("/planning/grid/commit", json=body).status_code == 422

        grid = client.get("/planning/grid", params=_grid_params()).json()
        p1 = next(row for row in grid["rows"] if row["product_id"] == str(P1))
        assert p1["months"]["2026-02"]["record_id"] is None
