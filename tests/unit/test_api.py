"""Unit tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from inline_diff_review.api.app import DIFF_REJECTED, FILE_SAVED, create_app
from inline_diff_review.config.models import ReviewConfiguration
from inline_diff_review.review.review_manager import ReviewManager
from inline_diff_review.storage.document_store import FileDocumentStore

OLD = "Hello world. Goodbye world."
NEW = "Hello universe. Goodbye universe."


@pytest.fixture
def client(tmp_path):
    (tmp_path / "notes.txt").write_text(OLD, encoding="utf-8")
    manager = ReviewManager(FileDocumentStore(tmp_path))
    return TestClient(create_app(review_manager=manager, config=ReviewConfiguration()))


def open_review(client, **overrides):
    body = {"path": "notes.txt", "target_content": NEW, "min_gap_size": 5}
    body.update(overrides)
    response = client.post("/api/reviews", json=body)
    assert response.status_code == 201
    return response.json()


class TestOpenReview:
    """Tests for opening reviews over HTTP."""

    def test_reads_original_from_store(self, client):
        """Test that the original content defaults to the stored document."""
        session = open_review(client)

        assert session["document_path"] == "notes.txt"
        assert session["total_count"] == 2
        assert session["is_done"] is False
        assert [c["old_text"] for c in session["chunks"]] == ["world", "world"]
        assert session["chunks"][0]["status"] == "pending"

    def test_new_document_reviewed_against_empty(self, client):
        """Test that a missing document is treated as empty."""
        session = open_review(client, path="new.txt", target_content="brand new")

        assert session["total_count"] == 1
        assert session["chunks"][0]["kind"] == "insert"

    def test_empty_path_is_bad_request(self, client):
        """Test that malformed input is reported as a client error."""
        response = client.post("/api/reviews", json={"path": "", "target_content": NEW})

        assert response.status_code == 400

    def test_unknown_session_not_found(self, client):
        """Test that unknown session ids return 404."""
        assert client.get("/api/reviews/does-not-exist").status_code == 404


class TestDecisions:
    """Tests for decision endpoints."""

    def test_accept_single_chunk(self, client):
        """Test accepting one chunk."""
        session = open_review(client)
        chunk_id = session["chunks"][0]["id"]

        response = client.post(f"/api/reviews/{session['id']}/chunks/{chunk_id}/accept")

        body = response.json()
        assert response.status_code == 200
        assert body["changed"] is True
        assert body["statistics"]["accepted"] == 1
        assert body["pending_count"] == 1

    def test_repeated_decision_reports_no_change(self, client):
        """Test that deciding a decided chunk changes nothing."""
        session = open_review(client)
        chunk_id = session["chunks"][0]["id"]
        client.post(f"/api/reviews/{session['id']}/chunks/{chunk_id}/reject")

        response = client.post(f"/api/reviews/{session['id']}/chunks/{chunk_id}/accept")

        assert response.json()["changed"] is False
        assert response.json()["chunks"][0]["status"] == "rejected"

    def test_get_chunk(self, client):
        """Test fetching a chunk by id."""
        session = open_review(client)
        chunk_id = session["chunks"][1]["id"]

        response = client.get(f"/api/reviews/{session['id']}/chunks/{chunk_id}")

        assert response.status_code == 200
        assert response.json()["new_text"] == "universe"

    def test_get_unknown_chunk(self, client):
        """Test that unknown chunk ids return 404."""
        session = open_review(client)

        response = client.get(f"/api/reviews/{session['id']}/chunks/chunk_99")

        assert response.status_code == 404

    def test_bulk_decisions(self, client):
        """Test accept-all after a single rejection."""
        session = open_review(client)
        client.post(f"/api/reviews/{session['id']}/chunks/{session['chunks'][0]['id']}/reject")

        body = client.post(f"/api/reviews/{session['id']}/accept-all").json()

        assert body["is_done"] is True
        assert [c["status"] for c in body["chunks"]] == ["rejected", "accepted"]


class TestCommit:
    """Tests for the commit endpoint."""

    def test_commit_writes_file(self, client, tmp_path):
        """Test that committing writes the reviewed content."""
        session = open_review(client)
        client.post(f"/api/reviews/{session['id']}/chunks/{session['chunks'][0]['id']}/accept")
        client.post(f"/api/reviews/{session['id']}/reject-all")

        response = client.post(f"/api/reviews/{session['id']}/commit")

        body = response.json()
        assert response.status_code == 200
        assert body["decision"] == FILE_SAVED
        assert body["outcome"] == "written"
        assert body["content"] == "Hello universe. Goodbye world."
        assert (tmp_path / "notes.txt").read_text(encoding="utf-8") == "Hello universe. Goodbye world."
        assert client.get(f"/api/reviews/{session['id']}").status_code == 404

    def test_commit_all_rejected(self, client, tmp_path):
        """Test that rejecting everything leaves the file untouched."""
        session = open_review(client)
        client.post(f"/api/reviews/{session['id']}/reject-all")

        body = client.post(f"/api/reviews/{session['id']}/commit").json()

        assert body["decision"] == DIFF_REJECTED
        assert (tmp_path / "notes.txt").read_text(encoding="utf-8") == OLD

    def test_commit_with_pending_conflicts(self, client):
        """Test that committing with pending chunks is refused."""
        session = open_review(client)

        response = client.post(f"/api/reviews/{session['id']}/commit")

        assert response.status_code == 409
        assert client.get(f"/api/reviews/{session['id']}").status_code == 200

    def test_commit_after_external_change_conflicts(self, client, tmp_path):
        """Test that a document changed during review is not overwritten."""
        session = open_review(client)
        client.post(f"/api/reviews/{session['id']}/accept-all")
        (tmp_path / "notes.txt").write_text("Rewritten elsewhere.", encoding="utf-8")

        response = client.post(f"/api/reviews/{session['id']}/commit")

        assert response.status_code == 409
        assert response.json()["detail"]["outcome"] == "integrity_error"
        assert (tmp_path / "notes.txt").read_text(encoding="utf-8") == "Rewritten elsewhere."

    def test_discard(self, client, tmp_path):
        """Test discarding a review."""
        session = open_review(client)

        response = client.delete(f"/api/reviews/{session['id']}")

        assert response.json()["decision"] == DIFF_REJECTED
        assert client.get(f"/api/reviews/{session['id']}").status_code == 404
        assert (tmp_path / "notes.txt").read_text(encoding="utf-8") == OLD


class TestClosedSessions:
    """Tests for decisions racing against a closed session."""

    @pytest.mark.parametrize("action", ["chunks/chunk_1/accept", "chunks/chunk_1/reject", "accept-all", "reject-all"])
    def test_decision_on_closed_session_not_found(self, client, monkeypatch, action):
        """Test that a session closed after lookup yields 404 rather than a server error."""
        session = open_review(client)
        manager = client.app.state.review_manager
        stale = manager.get_session_by_id(session["id"])
        manager.discard(stale)
        monkeypatch.setattr(manager, "get_session_by_id", lambda session_id: stale)

        response = client.post(f"/api/reviews/{session['id']}/{action}")

        assert response.status_code == 404
        assert response.json()["detail"]["error_type"] == "SessionClosedError"

    def test_discard_all(self, client, tmp_path):
        """Test discarding every open review at once."""
        first = open_review(client)
        second = open_review(client, path="other.txt", target_content="other")

        response = client.delete("/api/reviews")

        assert response.status_code == 200
        assert response.json() == {"discarded": 2, "decision": DIFF_REJECTED}
        assert client.get(f"/api/reviews/{first['id']}").status_code == 404
        assert client.get(f"/api/reviews/{second['id']}").status_code == 404
        assert (tmp_path / "notes.txt").read_text(encoding="utf-8") == OLD
        assert not (tmp_path / "other.txt").exists()
