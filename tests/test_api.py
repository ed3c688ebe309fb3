"""Tests for the artifact retrieval API."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.services import ArtifactRetrievalService, DataRetrievalError
from src.processor.object_store import InMemoryObjectStore


FUNDAMENTALS = {
    "company_name": "テスト株式会社",
    "period_start": "2023-04-01",
    "period_end": "2024-03-31",
    "sales": 100,
    "operating_revenue": 0,
    "has_operating_revenue": False,
    "operating_cost": 0,
    "has_operating_cost": False,
    "operating_profit": 10,
    "liabilities": 50,
    "net_assets": 70,
}


@pytest.fixture
def store():
    store = InMemoryObjectStore()
    prefix = "E00001/BS/E00001-S100TEST-BS-from-2023-04-01-to-2024-03-31"
    store.put(f"{prefix}.json", b'{"net_assets": {"previous": 1, "current": 2}}', "application/json")
    store.put(f"{prefix}.html", "<table>純資産合計</table>".encode("utf-8"), "text/html")
    store.put(
        "E00001/PL/E00001-S100TEST-PL-from-2023-04-01-to-2024-03-31.json", b"{}", "application/json"
    )
    store.put(
        "E00001/Fundamentals/E00001-fundamentals-from-2023-04-01-to-2024-03-31.json",
        json.dumps(FUNDAMENTALS, ensure_ascii=False).encode("utf-8"),
        "application/json",
    )
    store.put("E00002/BS/E00002-S100OTHER-BS-from-x-to-y.json", b"{}", "application/json")
    return store


@pytest.fixture
def client(store):
    return TestClient(create_app(store))


def test_reports_filters_by_statement_type_and_extension(client):
    response = client.get(
        "/reports", params={"filerCode": "E00001", "statementType": "BS", "extension": "html"}
    )

    assert response.status_code == 200
    assert response.json() == [
        {
            "file_name": "E00001/BS/E00001-S100TEST-BS-from-2023-04-01-to-2024-03-31.html",
            "data": "<table>純資産合計</table>",
        }
    ]


def test_reports_default_to_json(client):
    response = client.get("/reports", params={"filerCode": "E00001", "statementType": "bs"})

    body = response.json()
    assert len(body) == 1
    assert json.loads(body[0]["data"]) == {"net_assets": {"previous": 1, "current": 2}}


def test_reports_rejects_unknown_statement_type(client):
    response = client.get("/reports", params={"filerCode": "E00001", "statementType": "SS"})

    assert response.status_code == 400


def test_reports_requires_filer_code(client):
    response = client.get("/reports", params={"statementType": "BS"})

    assert response.status_code == 422


def test_fundamentals(client):
    response = client.get("/fundamentals", params={"filerCode": "E00001"})

    assert response.status_code == 200
    assert response.json() == [FUNDAMENTALS]


def test_fundamentals_for_unknown_filer_is_empty(client):
    response = client.get("/fundamentals", params={"filerCode": "E99999"})

    assert response.json() == []


def test_service_rejects_path_like_filer_code(store):
    service = ArtifactRetrievalService(store)

    with pytest.raises(DataRetrievalError):
        service.get_reports("../E00001", "BS", "json")


def test_service_reports_corrupt_fundamentals(store):
    store.put("E00003/Fundamentals/E00003-fundamentals-from-a-to-b.json", b"{", "application/json")

    with pytest.raises(DataRetrievalError):
        ArtifactRetrievalService(store).get_fundamentals("E00003")
