"""Tests for the analyze orchestrator."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from tests.test_sources.conftest import make_html, make_result
from rpss.analyze import AnalysisError, analyze_scoresheet, analyze_url, fetch_url

URL = "https://scoring.dance/events/123/results/456.html"


@pytest.fixture
def html():
    return make_html({
        "@type": "Event",
        "name": "Swing Resolution 2026",
        "result": [
            make_result(1, "Marie", 101, "Suzanne", 201, {"Ada": 1, "Ben": 1, "Cy": 2}),
            make_result(2, "Tom", 102, "Lea", 202, {"Ada": 2, "Ben": 3, "Cy": 1}),
            make_result(3, "Hugo", 103, "Nina", 203, {"Ada": 3, "Ben": 2, "Cy": 3}),
        ],
    })


class TestAnalyzeScoresheet:
    def test_ranks_page(self, html):
        result = analyze_scoresheet(URL, html)
        assert result.session.result.complete
        assert [r.calculated_place for r in result.session.rows] == [1, 2, 3]

    def test_to_dict(self, html):
        data = analyze_scoresheet(URL, html).to_dict()
        assert data["competition_name"] == "Swing Resolution 2026"
        assert data["num_competitors"] == 3
        assert data["num_judges"] == 3
        assert data["event"]["judges"] == "Ada, Ben, Cy"
        assert [p["couple_id"] for p in data["result"]["placements"]] == [
            "101/201", "102/202", "103/203",
        ]

    def test_unrecognised_page(self):
        with pytest.raises(AnalysisError, match="couldn't find results data"):
            analyze_scoresheet("upload.html", b"<html><body>Hello</body></html>")

    def test_prelims_error_becomes_analysis_error(self):
        html = make_html({"@type": "DanceEvent", "result": [{"dancer": {}}]})
        with pytest.raises(AnalysisError, match="finals scoresheets") as exc_info:
            analyze_scoresheet(URL, html)
        assert "prelims scoresheet" in str(exc_info.value)

    def test_invalid_ordinals(self):
        html = make_html({
            "@type": "Event",
            "result": [
                make_result(1, "A", 1, "B", 1, {"Ada": 1}),
                make_result(2, "C", 2, "D", 2, {"Ada": 1}),
            ],
        })
        with pytest.raises(AnalysisError, match="Judge Ada"):
            analyze_scoresheet(URL, html)

    def test_iteration_ceiling_from_settings(self, html):
        with patch("rpss.analyze.settings") as settings:
            settings.MAX_ITERATIONS = 1
            result = analyze_scoresheet(URL, html)
        assert not result.session.result.complete


class TestFetchUrl:
    def test_rejects_other_domain(self):
        with pytest.raises(AnalysisError, match="URL must be from scoring.dance"):
            fetch_url("https://example.com/results.html")

    def test_returns_content(self):
        client = MagicMock()
        client.__enter__.return_value.get.return_value.content = b"page"
        with patch("rpss.analyze.httpx.Client", return_value=client):
            assert fetch_url(URL) == (URL, b"page")

    def test_http_error(self):
        request = httpx.Request("GET", URL)
        response = httpx.Response(404, request=request)
        client = MagicMock()
        client.__enter__.return_value.get.return_value = response
        with patch("rpss.analyze.httpx.Client", return_value=client):
            with pytest.raises(AnalysisError, match="HTTP error fetching URL: 404"):
                fetch_url(URL)

    def test_connection_error(self):
        client = MagicMock()
        client.__enter__.return_value.get.side_effect = httpx.ConnectError("refused")
        with patch("rpss.analyze.httpx.Client", return_value=client):
            with pytest.raises(AnalysisError, match="Unable to connect"):
                fetch_url(URL)

    def test_analyze_url(self, html):
        with patch("rpss.analyze.fetch_url", return_value=(URL, html)):
            result = analyze_url(URL)
        assert result.scoresheet.num_competitors == 3
