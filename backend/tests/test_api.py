import json
from typing import Any, Dict, List

import pytest
from fastapi.testclient import TestClient

from app import main as main_module
from splits_core import MissingInputError, UpstreamUnavailable, records_from_payload


class _StubSource:
    def __init__(self, rows: List[Dict[str, Any]] | None = None, error: Exception | None = None) -> None:
        self.rows = rows or []
        self.error = error

    def fetch_raw_records(self):
        if self.error is not None:
            raise self.error
        return records_from_payload(self.rows)


@pytest.fixture
def client() -> TestClient:
    return TestClient(main_module.app)


def _use_source(monkeypatch: pytest.MonkeyPatch, stub: _StubSource) -> None:
    monkeypatch.setattr(main_module, "source", lambda: stub)


def test_health_endpoints(client: TestClient) -> None:
    assert client.get("/_health").text == "ok"
    assert client.get("/health").json() == {"status": "ok"}


def test_root_serves_mobile_page_for_mobile_agents(client: TestClient) -> None:
    desktop = client.get("/", headers={"User-Agent": "Mozilla/5.0 (X11; Linux x86_64)"})
    mobile = client.get("/", headers={"User-Agent": "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0)"})

    assert desktop.status_code == 200
    assert mobile.status_code == 200
    assert "viewport" not in desktop.text
    assert "viewport" in mobile.text


def test_results_returns_both_views(monkeypatch: pytest.MonkeyPatch, client: TestClient, provider_rows) -> None:
    _use_source(monkeypatch, _StubSource(provider_rows))

    response = client.get("/api/results")

    assert response.status_code == 200
    payload = response.json()
    assert len(payload["timing"]) == 5
    assert payload["results"][0] == {"WaveHeader": "Wave 1"}
    first = payload["results"][1]
    assert first["Name"] == "Alice"
    assert first["1000mRank"] == "(2)"
    assert first["ResultDiff"] == " "
    assert payload["timing"][0]["1000m"] == "10:03:30.0"


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (MissingInputError("No split data found in provider page"), 404),
        (UpstreamUnavailable("Failed to fetch provider page"), 502),
        (KeyError("surprise"), 500),
    ],
)
def test_results_error_mapping(monkeypatch: pytest.MonkeyPatch, client: TestClient, error, status) -> None:
    _use_source(monkeypatch, _StubSource(error=error))

    response = client.get("/api/results")

    assert response.status_code == status


def test_results_with_no_records_is_not_found(monkeypatch: pytest.MonkeyPatch, client: TestClient) -> None:
    _use_source(monkeypatch, _StubSource([]))

    assert client.get("/api/results").status_code == 404


def test_transform_accepts_provider_rows(client: TestClient, provider_rows) -> None:
    response = client.post("/api/transform", json={"records": provider_rows, "paceDistance": 100})

    assert response.status_code == 200
    rows = [row for row in response.json()["results"] if "WaveHeader" not in row]
    assert rows[0]["Pace"] == "21.5"
    assert rows[0]["PaceUnit"] == "/100m"


def test_transform_without_records_is_not_found(client: TestClient) -> None:
    assert client.post("/api/transform", json={"records": []}).status_code == 404


def test_public_files_are_served_from_the_site_root(client: TestClient) -> None:
    index = client.get("/index.html")
    mobile = client.get("/mobile.html")

    assert index.status_code == 200
    assert "<table id=\"results\">" in index.text
    assert mobile.status_code == 200
    assert client.get("/health").json() == {"status": "ok"}


def test_transform_with_infinite_result_seconds_still_succeeds(client: TestClient, provider_rows) -> None:
    rows = json.dumps(provider_rows[:2])
    body = '{"records": ' + rows.replace('"ResultSecs": 440', '"ResultSecs": Infinity') + "}"

    response = client.post("/api/transform", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 200
    bea = [row for row in response.json()["results"] if row.get("Name") == "Bea"][0]
    assert bea["Result"] == "0.0"
    assert bea["ResultRank"] == "(2)"
