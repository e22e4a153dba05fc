from __future__ import annotations

import pytest

from app import create_app
from core.errors import ProviderError


@pytest.fixture()
def client(settings, fake_fetcher):
    return create_app(settings, fetcher=fake_fetcher).test_client()


def test_default_sheet_is_summary(client):
    body = client.get("/api/dashboard").get_json()

    assert body["sheet"] == "Summary 2026"
    assert body["header"] == ["ID", "Name", "Total Scan"]
    assert body["rows"] == [["1", "Alice", "20"], ["2", "Bob", "0"]]
    assert body["stats"]["scan_total"] == 20
    assert body["stats"]["permission_total"] is None
    assert body["stats_display"]["permission_total"] == "-"
    assert body["info"] == "2 rows • page 1 / 1"


def test_filter_keyword(client):
    body = client.get("/api/dashboard", query_string={"sheet": "Summary 2026", "q": "bob"}).get_json()

    assert body["rows"] == [["2", "Bob", "0"]]
    assert body["stats"]["row_count"] == 1
    assert body["query"] == {"q": "bob", "sort": None}


def test_page_is_clamped(client):
    body = client.get(
        "/api/dashboard",
        query_string={"sheet": "Summary 2026", "page": "5", "page_size": "1"},
    ).get_json()

    assert body["page"]["page_index"] == 2
    assert body["page"]["total_pages"] == 2
    assert body["rows"] == [["2", "Bob", "0"]]


def test_sorted_attendance_sheet(client):
    body = client.get("/api/dashboard", query_string={"sheet": "January", "sort": "asc"}).get_json()

    assert [row[1] for row in body["rows"]] == ["Anh Sok BRORSER", "Bopha", "chan dara"]
    assert body["stats"]["late_absent_count"] == 1
    assert body["stats"]["remark_p_count"] == 2
    assert body["month"] == "ខែមករា ឆ្នាំ ២០២៦"
    assert body["query"]["sort"] == "asc"


def test_compact_rows(settings, fetcher_factory):
    fetcher = fetcher_factory({"S": [["Name", "Comment"], ["Dara", "x" * 40]]})
    client = create_app(settings, fetcher=fetcher).test_client()

    body = client.get("/api/dashboard?sheet=S&compact=1").get_json()

    assert body["rows"][0][1] == "x" * 20 + "..."


def test_invalid_query(client):
    response = client.get("/api/dashboard?sort=sideways")
    assert response.status_code == 400
    assert "sort" in response.get_json()["error"]


def test_empty_sheet_is_404(settings, fetcher_factory):
    fetcher = fetcher_factory({"Blank": [["ID", "Name"], ["TOTAL", ""]]})
    client = create_app(settings, fetcher=fetcher).test_client()

    response = client.get("/api/dashboard?sheet=Blank")

    assert response.status_code == 404
    assert response.get_json()["kind"] == "empty"


def test_no_sheets_is_404(settings, fetcher_factory):
    client = create_app(settings, fetcher=fetcher_factory({})).test_client()
    assert client.get("/api/dashboard").status_code == 404


def test_provider_failure(settings, fetcher_factory):
    fetcher = fetcher_factory({"Jan": []}, errors={"Jan": ProviderError(502, "Request failed")})
    client = create_app(settings, fetcher=fetcher).test_client()

    response = client.get("/api/dashboard?sheet=Jan")

    assert response.status_code == 502
    assert response.get_json()["error"] == "Upstream error"


def test_summary_route(client):
    body = client.get("/api/dashboard/summary").get_json()

    assert body["sheet"] == "Summary 2026"
    assert body["rows"] == [["1", "Alice", "20"], ["2", "Bob", "0"]]


def test_summary_route_without_summary_sheet(settings, fetcher_factory):
    client = create_app(settings, fetcher=fetcher_factory({"January": [["ID"], ["1"]]})).test_client()
    assert client.get("/api/dashboard/summary").status_code == 404


def test_print_view(client):
    response = client.get("/api/dashboard/print", query_string={"sheet": "January", "q": "bopha"})

    assert response.status_code == 200
    assert response.mimetype == "text/html"
    html = response.get_data(as_text=True)
    assert "របាយការណ៍ - January" in html
    assert "Bopha" in html
    assert "chan dara" not in html
