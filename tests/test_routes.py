from datetime import date
from xml.etree import ElementTree

import pytest
from fastapi.testclient import TestClient

from contrib_chart.api.routes.chart import get_today
from contrib_chart.main import create_app
from contrib_chart.rendering.errors import EncodingError
from contrib_chart.rendering.models import ActivityRecord
from contrib_chart.rendering.models import ContributionData
from contrib_chart.services.contributions_service import GitHubAPIError
from contrib_chart.services.contributions_service import UserNotFoundError
from contrib_chart.settings import Settings
from contrib_chart.settings import get_settings


TODAY = date(2024, 12, 31)
SVG_NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def fetch_calls(monkeypatch) -> list[dict[str, object]]:
    calls: list[dict[str, object]] = []

    def fake_get_contribution_data(username, settings, *, today, year=None):
        calls.append({"username": username, "today": today, "year": year})
        return ContributionData(
            total=25, days=[ActivityRecord(date="2024-01-01", count=25)]
        )

    monkeypatch.setattr(
        "contrib_chart.api.routes.chart.get_contribution_data",
        fake_get_contribution_data,
    )
    return calls


@pytest.fixture
def client() -> TestClient:
    app = create_app(Settings(rate_limit_per_minute=1000))
    app.dependency_overrides[get_today] = lambda: TODAY
    app.dependency_overrides[get_settings] = lambda: Settings(
        github_token=None, default_theme="github"
    )

    with TestClient(app) as test_client:
        yield test_client


def _failing_fetch(error: Exception):
    def fake_get_contribution_data(username, settings, *, today, year=None):
        raise error

    return fake_get_contribution_data


def test_health_live_returns_ok(client: TestClient) -> None:
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_chart_returns_svg_with_cache_headers(
    client: TestClient, fetch_calls: list[dict[str, object]]
) -> None:
    response = client.get("/api/chart/octocat")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.headers["cache-control"] == (
        "public, max-age=14400, s-maxage=14400, stale-while-revalidate=86400"
    )
    root = ElementTree.fromstring(response.text)
    busy = [
        rect for rect in root.iter(f"{SVG_NS}rect") if rect.get("data-date") == "2024-01-01"
    ]
    assert busy[0].get("fill") == "#216e39"
    assert fetch_calls == [{"username": "octocat", "today": TODAY, "year": None}]


def test_chart_query_options_reach_renderer(
    client: TestClient, fetch_calls: list[dict[str, object]]
) -> None:
    response = client.get(
        "/api/chart/octocat",
        params={
            "theme": "nord",
            "mode": "dark",
            "bg": "false",
            "months": "true",
            "days": "true",
            "username": "false",
            "size": "50",
        },
    )

    svg = response.text
    root = ElementTree.fromstring(svg)
    assert response.status_code == 200
    assert '<rect width="' not in svg
    assert 'class="month"' in svg
    assert 'class="day-label"' in svg
    assert 'class="username"' not in svg
    cells = [rect for rect in root.iter(f"{SVG_NS}rect") if rect.get("data-date")]
    assert cells[0].get("width") == "20"


def test_chart_grid_only_preset_has_no_text(
    client: TestClient, fetch_calls: list[dict[str, object]]
) -> None:
    response = client.get(
        "/api/chart/octocat", params={"preset": "minimal", "months": "true"}
    )

    assert response.status_code == 200
    assert "<text" not in response.text


def test_chart_unknown_theme_falls_back_to_default(
    client: TestClient, fetch_calls: list[dict[str, object]]
) -> None:
    response = client.get("/api/chart/octocat", params={"theme": "mystery"})

    assert response.status_code == 200
    assert 'fill="#216e39"' in response.text


def test_chart_custom_color(
    client: TestClient, fetch_calls: list[dict[str, object]]
) -> None:
    response = client.get("/api/chart/octocat", params={"color": "000000"})

    assert response.status_code == 200
    assert 'fill="#000000"' in response.text


def test_chart_invalid_color_rejected_before_fetch(
    client: TestClient, fetch_calls: list[dict[str, object]]
) -> None:
    response = client.get("/api/chart/octocat", params={"color": "not-hex"})

    assert response.status_code == 400
    assert fetch_calls == []


def test_chart_invalid_mode_rejected(client: TestClient) -> None:
    response = client.get("/api/chart/octocat", params={"mode": "sepia"})

    assert response.status_code == 422


def test_chart_past_year_anchors_to_december_31(
    client: TestClient, fetch_calls: list[dict[str, object]]
) -> None:
    response = client.get("/api/chart/octocat", params={"year": "2023"})

    root = ElementTree.fromstring(response.text)
    dates = [rect.get("data-date") for rect in root.iter(f"{SVG_NS}rect") if rect.get("data-date")]
    assert response.status_code == 200
    assert fetch_calls[0]["year"] == 2023
    assert dates[0] == "2022-12-25"
    assert dates[-1] == "2024-01-06"


def test_chart_png_format(client: TestClient, fetch_calls, monkeypatch) -> None:
    monkeypatch.setattr(
        "contrib_chart.rendering.pipeline.encode_png", lambda svg: b"\x89PNG fake"
    )

    response = client.get("/api/chart/octocat", params={"format": "png"})

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == b"\x89PNG fake"


def test_chart_encoding_failure_returns_500(
    client: TestClient, fetch_calls, monkeypatch
) -> None:
    def failing_encode_png(svg: str) -> bytes:
        raise EncodingError("broken")

    monkeypatch.setattr("contrib_chart.rendering.pipeline.encode_png", failing_encode_png)

    response = client.get("/api/chart/octocat", params={"format": "png"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to generate chart"}


@pytest.mark.parametrize(
    ("path", "error", "status_code", "detail"),
    [
        ("/api/chart/ghost", UserNotFoundError("ghost"), 404, "User not found"),
        ("/api/data/ghost", UserNotFoundError("ghost"), 404, "User not found"),
        ("/api/chart/octocat", GitHubAPIError(), 502, "GitHub API request failed"),
        ("/api/data/octocat", GitHubAPIError(), 502, "GitHub API request failed"),
    ],
)
def test_acquisition_errors_are_mapped(
    client: TestClient, monkeypatch, path, error, status_code, detail
) -> None:
    monkeypatch.setattr(
        "contrib_chart.api.routes.chart.get_contribution_data", _failing_fetch(error)
    )

    response = client.get(path)

    assert response.status_code == status_code
    assert response.json() == {"detail": detail}


def test_blank_username_rejected(client: TestClient) -> None:
    response = client.get("/api/data/%20")

    assert response.status_code == 400
    assert response.json() == {"detail": "username cannot be empty"}


def test_data_returns_contributions_with_cache_headers(
    client: TestClient, fetch_calls: list[dict[str, object]]
) -> None:
    response = client.get("/api/data/octocat", params={"year": "2024"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == (
        "public, max-age=3600, s-maxage=3600, stale-while-revalidate=86400"
    )
    assert response.json() == {
        "total": 25,
        "days": [{"date": "2024-01-01", "count": 25, "level": 4}],
    }
    assert fetch_calls[0]["year"] == 2024
