"""Tests for API endpoints."""
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from studybase.api.routes.entries import get_entry_store
from studybase.api.routes.upload import get_segmenter, get_upload_service
from studybase.main import app
from studybase.prompts import SAMPLE_MATERIAL
from studybase.services.segmenter import Segmenter, segment_text

PARAGRAPH = (
    "Photosynthesis converts light energy into chemical energy stored in glucose. "
    "It takes place in the chloroplasts of plant cells."
)


@pytest.fixture
def client():
    """Create test client (lifespan not run, services stay uninitialized)."""
    return TestClient(app)


@pytest.fixture
def wired_client(client, upload_service, entry_store):
    """Test client with the upload service and store overridden."""
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    app.dependency_overrides[get_entry_store] = lambda: entry_store
    app.dependency_overrides[get_segmenter] = lambda: upload_service.segmenter
    yield client
    app.dependency_overrides.clear()


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    def test_health_check(self, client):
        """Test health check endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "Studybase"}


class TestMetricsEndpoint:
    """Tests for metrics endpoint."""

    def test_metrics_endpoint(self, wired_client):
        """Upload and classification counters are exported."""
        wired_client.post("/api/sample-upload")

        response = wired_client.get("/metrics")
        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]
        assert "studybase_uploads_total" in response.text
        assert "studybase_classifications_total" in response.text


class TestServicesUnavailable:
    """Endpoints report 503 before services are initialized."""

    def test_upload_unavailable(self, client):
        files = {"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")}
        assert client.post("/api/upload", files=files).status_code == 503

    def test_sample_upload_unavailable(self, client):
        assert client.post("/api/sample-upload").status_code == 503

    def test_entries_unavailable(self, client):
        assert client.get("/api/entries").status_code == 503

    def test_segment_preview_unavailable(self, client):
        assert client.get("/api/segment-preview").status_code == 503

    def test_quiz_unavailable(self, client):
        assert client.get("/api/quiz", params={"types": "concept"}).status_code == 503


class TestUploadEndpoint:
    """Tests for upload endpoints."""

    def test_upload_invalid_file_type(self, wired_client):
        """Non-PDF files are rejected."""
        files = {"file": ("test.txt", b"test content", "text/plain")}
        response = wired_client.post("/api/upload", files=files)
        assert response.status_code == 400

    def test_upload_pdf(self, wired_client):
        """A PDF upload returns the ingestion summary."""
        files = {"file": ("biology.pdf", b"%PDF-1.4 test", "application/pdf")}
        with patch(
            "studybase.services.entry_upload_service.extract_text_from_pdf",
            return_value=PARAGRAPH,
        ):
            response = wired_client.post("/api/upload", files=files, headers={"X-User-Id": "user-1"})

        assert response.status_code == 200
        data = response.json()
        assert data["doc_name"] == "biology.pdf"
        assert data["total_chunks"] == 1
        assert data["processed_entries"] == 1
        assert data["parse_errors"] == 0
        assert data["by_type"] == {"concept": 1}

    def test_upload_without_chunks(self, wired_client):
        """A document with no usable text is a client error."""
        files = {"file": ("noise.pdf", b"%PDF-1.4", "application/pdf")}
        with patch(
            "studybase.services.entry_upload_service.extract_text_from_pdf",
            return_value="Page 1",
        ):
            response = wired_client.post("/api/upload", files=files)

        assert response.status_code == 400

    def test_sample_upload_skip_ai(self, wired_client, mock_classification_service):
        """Skipping classification stores placeholder entries."""
        response = wired_client.post("/api/sample-upload", params={"skip_ai": "true"})

        assert response.status_code == 200
        data = response.json()
        expected = len(segment_text(SAMPLE_MATERIAL))
        assert data["total_chunks"] == expected
        assert data["by_type"] == {"unknown": expected}
        assert "skipped" in data["message"]
        mock_classification_service.complete.assert_not_called()

    def test_segment_preview(self, wired_client):
        """The preview reports the sample chunk count."""
        response = wired_client.get("/api/segment-preview")

        assert response.status_code == 200
        assert response.json()["sample_chunks"] == len(segment_text(SAMPLE_MATERIAL))

    def test_segment_preview_uses_configured_segmenter(self, wired_client):
        """The preview follows the configured thresholds, not the defaults."""
        app.dependency_overrides[get_segmenter] = lambda: Segmenter(min_chunk_chars=len(SAMPLE_MATERIAL) + 1)

        response = wired_client.get("/api/segment-preview")

        assert response.status_code == 200
        assert response.json()["sample_chunks"] == 0


class TestEntriesEndpoint:
    """Tests for entry listing and deletion."""

    def test_list_entries(self, wired_client):
        """Entries are listed per user."""
        wired_client.post("/api/sample-upload", headers={"X-User-Id": "user-1"})

        mine = wired_client.get("/api/entries", headers={"X-User-Id": "user-1"}).json()["entries"]
        others = wired_client.get("/api/entries").json()["entries"]

        assert len(mine) == len(segment_text(SAMPLE_MATERIAL))
        assert all(e["type"] == "concept" for e in mine)
        assert all("user_id" not in e for e in mine)
        assert others == []

    def test_list_entries_filters(self, wired_client):
        """Type and search filters are applied."""
        wired_client.post("/api/sample-upload", params={"skip_ai": "true"})

        assert wired_client.get("/api/entries", params={"type": "concept"}).json()["entries"] == []
        found = wired_client.get("/api/entries", params={"search": "test entry 1"}).json()["entries"]
        assert found
        assert all(e["title"].startswith("Test Entry 1") for e in found)

    def test_delete_entry(self, wired_client):
        """Deleting removes the entry, deleting again is a 404."""
        wired_client.post("/api/sample-upload")
        entry_id = wired_client.get("/api/entries").json()["entries"][0]["id"]

        response = wired_client.delete(f"/api/entries/{entry_id}")
        assert response.status_code == 200
        assert response.json() == {"success": True}

        assert wired_client.delete(f"/api/entries/{entry_id}").status_code == 404

    def test_delete_other_users_entry(self, wired_client):
        """Entries of another user are not found."""
        wired_client.post("/api/sample-upload", headers={"X-User-Id": "user-1"})
        entry_id = wired_client.get("/api/entries", headers={"X-User-Id": "user-1"}).json()["entries"][0]["id"]

        response = wired_client.delete(f"/api/entries/{entry_id}", headers={"X-User-Id": "user-2"})
        assert response.status_code == 404


class TestQuizEndpoint:
    """Tests for quiz entry selection."""

    def test_quiz_entries(self, wired_client):
        """Entries of the requested types are returned with counts."""
        wired_client.post("/api/sample-upload", headers={"X-User-Id": "user-1"})
        total = len(segment_text(SAMPLE_MATERIAL))

        response = wired_client.get(
            "/api/quiz",
            params={"types": "concept,quote", "count": 2},
            headers={"X-User-Id": "user-1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert len(data["entries"]) == min(2, total)
        assert all(e["type"] == "concept" for e in data["entries"])
        assert set(data["entries"][0]) == {"id", "type", "title", "content", "metadata"}
        assert data["total_available"] == total
        assert data["counts_by_type"] == {"concept": total}

    def test_quiz_counts_cover_other_types(self, wired_client):
        """Counts by type include types that were not requested."""
        wired_client.post("/api/sample-upload", params={"skip_ai": "true"})

        data = wired_client.get("/api/quiz", params={"types": "quote"}).json()

        assert data["entries"] == []
        assert data["total_available"] == 0
        assert data["counts_by_type"] == {"unknown": len(segment_text(SAMPLE_MATERIAL))}

    def test_quiz_requires_types(self, wired_client):
        """A request without entry types is rejected."""
        assert wired_client.get("/api/quiz").status_code == 400
        assert wired_client.get("/api/quiz", params={"types": " , "}).status_code == 400

    def test_quiz_rejects_negative_count(self, wired_client):
        """The count must not be negative."""
        response = wired_client.get("/api/quiz", params={"types": "concept", "count": -1})
        assert response.status_code == 422


class TestLifespan:
    """Tests for service wiring at startup."""

    def test_settings_reach_segment_preview(self, monkeypatch):
        """Segmentation thresholds from the environment drive the preview."""
        import studybase.main as main

        for name in ("settings", "segmenter", "entry_store", "classification_service", "upload_service"):
            monkeypatch.setattr(main, name, None)
        monkeypatch.setenv("MIN_CHUNK_CHARS", str(len(SAMPLE_MATERIAL) + 1))
        monkeypatch.setenv("LLM_API_KEY", "")
        monkeypatch.setenv("OPENAI_API_KEY", "")

        with TestClient(app) as client:
            preview = client.get("/api/segment-preview")
            sample = client.post("/api/sample-upload")

        assert preview.status_code == 200
        assert preview.json()["sample_chunks"] == 0
        assert sample.status_code == 503
