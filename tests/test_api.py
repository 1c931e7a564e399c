"""
tests/test_api.py

HTTP contract tests for the sync and call reporting routers.
Services are swapped through FastAPI dependency overrides; no network.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from remote_panel.connectors.base import ConnectorRequestError
from remote_panel.connectors.sheet_fetcher import SheetFetcher
from remote_panel.domain.sheet_source import SheetDocumentDescriptor, SourceConfig
from remote_panel.main import create_app
from remote_panel.registry import SheetRegistry
from remote_panel.services.call_reporting_service import (
    CallReportingService,
    get_call_reporting_service,
)
from remote_panel.services.sheet_sync_service import SheetSyncService, get_sheet_sync_service

TODAY = date(2025, 8, 20)
NOW = datetime(2025, 8, 20, 12, 0, tzinfo=timezone.utc)

DOCUMENTS: dict[str, Any] = {
    "doc-achs": [
        ["Sponsor", "Ejecutivo", "Fecha Llamada", "Estado"],
        ["ACHS", "Ana", "19/08/2025", "Contactado"],
        ["ACHS", "Ana", "20/08/2025", "Sin gestión"],
    ],
    "doc-indisa": ConnectorRequestError("HTTP 503", status_code=503),
}


class StaticReader:
    @property
    def enabled(self) -> bool:
        return True

    def get_range(self, document_id: str, range_spec: str) -> list[list[Any]]:
        result = DOCUMENTS[document_id]
        if isinstance(result, Exception):
            raise result
        return result

    def get_metadata(self, document_id: str) -> SheetDocumentDescriptor:
        return SheetDocumentDescriptor(document_id=document_id, title="Remoto 8")


@pytest.fixture()
def client() -> TestClient:
    sync_service = SheetSyncService(
        registry=SheetRegistry(
            [
                SourceConfig("ACHS_Remoto_8", "doc-achs", "ACHS", "Remoto 8"),
                SourceConfig("Indisa_Remoto_11", "doc-indisa", "INDISA", "Remoto 11"),
            ]
        ),
        fetcher=SheetFetcher(client=StaticReader()),
        clock=lambda: NOW,
        today_provider=lambda: TODAY,
    )
    reporting_service = CallReportingService(
        sync_service=sync_service,
        stale_after=timedelta(minutes=30),
        clock=lambda: NOW,
        today_provider=lambda: TODAY,
    )
    app = create_app()
    app.dependency_overrides[get_sheet_sync_service] = lambda: sync_service
    app.dependency_overrides[get_call_reporting_service] = lambda: reporting_service
    return TestClient(app)


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["registered_sources"] == 2
    assert isinstance(response.json()["scheduler_enabled"], bool)


def test_sync_all_reports_partial_failure(client: TestClient) -> None:
    response = client.post("/sync")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["sheets_processed"] == 2
    assert body["sheets_with_errors"] == 1
    assert body["call_records_updated"] == 2
    assert body["errors"] == [
        {
            "source_name": "Indisa_Remoto_11",
            "error_kind": "connection_error",
            "message": body["errors"][0]["message"],
        }
    ]


def test_sync_sponsor(client: TestClient) -> None:
    response = client.post("/sync/sponsors/ACHS")

    assert response.status_code == 200
    assert response.json()["sheets_processed"] == 1
    assert response.json()["success"] is True


def test_sync_unknown_sponsor_is_404(client: TestClient) -> None:
    response = client.post("/sync/sponsors/NOBODY")

    assert response.status_code == 404


def test_status_and_statistics(client: TestClient) -> None:
    client.post("/sync")

    statuses = client.get("/sync/status").json()
    stats = client.get("/sync/statistics").json()

    assert [(item["source_name"], item["status"]) for item in statuses] == [
        ("ACHS_Remoto_8", "success"),
        ("Indisa_Remoto_11", "failed"),
    ]
    assert stats["total_sources"] == 2
    assert stats["successful_sources"] == 1
    assert stats["failed_sources"] == 1
    assert stats["records_synced_today"] == 1


def test_connection_probe(client: TestClient) -> None:
    body = client.get("/sync/connection").json()

    assert body["is_connected"] is True
    assert body["message"] == "Connection successful. Test sheet: Remoto 8"


def test_calls_in_range(client: TestClient) -> None:
    response = client.get("/calls", params={"start": "2025-08-01", "end": "2025-08-31"})

    assert response.status_code == 200
    body = response.json()
    assert [item["call_date"] for item in body] == ["2025-08-19", "2025-08-20"]
    assert body[1]["status"] == "not_managed"


def test_calls_rejects_inverted_range(client: TestClient) -> None:
    response = client.get("/calls", params={"start": "2025-08-31", "end": "2025-08-01"})

    assert response.status_code == 400


def test_sponsor_summary_and_detail(client: TestClient) -> None:
    params = {"start": "2025-08-01", "end": "2025-08-31"}

    summary = client.get("/calls/summary-by-sponsor", params=params).json()
    detail = client.get("/calls/sponsors/achs", params=params).json()

    assert summary[0]["sponsor_name"] == "ACHS"
    assert summary[0]["total_calls"] == 2
    assert summary[0]["total_goal"] == 120
    assert summary[0]["goal_percentage"] == 1.67
    assert detail["executive_count"] == 1
    assert detail["calls_by_date"] == {"2025-08-19": 1, "2025-08-20": 1}
    assert detail["total_goal"] == 120
    assert detail["executive_details"][0]["daily_goal"] == 60
    assert detail["executive_details"][0]["performance_level"] == "critical"
    assert detail["executive_details"][0]["status_breakdown"] == {
        "contacted": 1,
        "not_managed": 1,
    }


def test_executive_records(client: TestClient) -> None:
    response = client.get(
        "/calls/executives/Ana",
        params={"start": "2025-08-20", "end": "2025-08-20"},
    )

    assert response.status_code == 200
    assert len(response.json()) == 1


def test_consistency_report(client: TestClient) -> None:
    client.post("/sync")

    body = client.get("/calls/consistency").json()

    assert body["is_valid"] is True
    assert body["total_records_validated"] == 2
