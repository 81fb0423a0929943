from unittest.mock import patch

import pytest
from conftest import FIXTURES, load_fixture
from fastapi.concurrency import run_in_threadpool
from fastapi.testclient import TestClient

from openapi_scorer.parser.errors import ConnectionParserError
from openapi_scorer.server import create_app


@pytest.fixture
def client(tmp_path):
    return TestClient(create_app(tmp_path / "reports"))


def upload(client, name, content, fmt="all"):
    return client.post("/api/upload", files={"spec": (name, content, "application/x-yaml")}, data={"format": fmt})


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "OK"}


class TestUpload:
    def test_upload_petstore(self, client):
        response = upload(client, "petstore.yaml", (FIXTURES / "petstore.yaml").read_bytes())
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["apiTitle"] == "Swagger Petstore"
        assert body["score"]["overallScore"] == 100
        assert body["score"]["summary"]["criticalIssues"] == 0
        assert len(body["score"]["criterionResults"]) == 7
        assert sorted(r["format"] for r in body["reports"]) == ["html", "json", "md"]

    def test_reports_are_served(self, client):
        body = upload(client, "petstore.yaml", (FIXTURES / "petstore.yaml").read_bytes(), fmt="json").json()
        report = body["reports"][0]
        assert report["url"] == f"/reports/{report['filename']}"
        served = client.get(report["url"])
        assert served.status_code == 200
        assert served.json()["summary"]["grade"] == "A"

    def test_scoring_runs_off_the_event_loop(self, client):
        with patch("openapi_scorer.server.run_in_threadpool", wraps=run_in_threadpool) as pool:
            response = upload(client, "petstore.yaml", (FIXTURES / "petstore.yaml").read_bytes(), fmt="json")
        assert response.status_code == 200
        pool.assert_awaited_once()
        assert pool.await_args.args[2:] == ("petstore.yaml", "json")

    def test_repeated_uploads_get_their_own_reports(self, client):
        content = (FIXTURES / "petstore.yaml").read_bytes()
        first = upload(client, "petstore.yaml", content, fmt="json").json()["reports"][0]
        second = upload(client, "petstore.yaml", content, fmt="json").json()["reports"][0]
        assert first["filename"] != second["filename"]
        assert client.get(first["url"]).status_code == 200
        assert client.get(second["url"]).status_code == 200

    def test_rejects_other_extensions(self, client):
        response = upload(client, "notes.txt", b"hello")
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Only YAML and JSON files are allowed"}

    def test_invalid_document(self, client):
        response = upload(client, "broken.yaml", b"openapi: [3.0\ninfo: {")
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert 'Syntax Error in file "broken.yaml"' in body["error"]

    def test_unsupported_format(self, client):
        response = upload(client, "petstore.yaml", (FIXTURES / "petstore.yaml").read_bytes(), fmt="pdf")
        assert response.status_code == 400
        assert "Unsupported report format" in response.json()["error"]

    def test_missing_file(self, client):
        response = client.post("/api/upload", data={"format": "json"})
        assert response.status_code == 400
        assert response.json()["error"] == "No file uploaded"


class TestScoreUrl:
    @patch("openapi_scorer.server.load_document")
    def test_score_url(self, mock_load, client):
        mock_load.return_value = load_fixture("poor.yaml")
        response = client.post("/api/score-url", json={"url": "https://example.com/openapi.yaml", "format": "markdown"})
        assert response.status_code == 200
        body = response.json()
        assert body["apiTitle"] == "Poor API"
        assert body["score"]["grade"] == "F"
        assert [r["format"] for r in body["reports"]] == ["md"]
        mock_load.assert_called_once_with("https://example.com/openapi.yaml")

    def test_url_required(self, client):
        response = client.post("/api/score-url", json={})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "URL is required"}

    @patch("openapi_scorer.server.load_document")
    def test_unreachable_url(self, mock_load, client):
        mock_load.side_effect = ConnectionParserError("URL", "https://example.com/x", "URL not found:")
        response = client.post("/api/score-url", json={"url": "https://example.com/x"})
        assert response.status_code == 400
        assert response.json()["error"] == 'URL not found: "https://example.com/x"'
