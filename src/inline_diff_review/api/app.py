"""Minimal FastAPI application for the inline diff review engine.

This module exposes the review workflow over HTTP so that a remote agent
can propose edits and a host UI can drive the reviewer's decisions.

Usage (from project root, after installing fastapi and uvicorn):

    uvicorn inline_diff_review.api.app:create_app --factory --reload

Then POST a proposed edit to /api/reviews and follow the returned
session id.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config.config_manager import ConfigurationManager
from ..config.models import ConfigurationError, ReviewConfiguration
from ..exceptions import (
    InputError,
    PendingChunksError,
    SessionClosedError,
    UnknownChunkError,
    WriteError,
)
from ..models.enums import CommitOutcome
from ..models.session import FinalResult, ReviewSession
from ..review import chunk_store
from ..review.review_manager import ReviewManager
from ..storage.document_store import create_document_store

logger = logging.getLogger(__name__)

# Decision strings reported back to the proposing agent.
FILE_SAVED = "FILE_SAVED"
DIFF_REJECTED = "DIFF_REJECTED"


class OpenReviewRequest(BaseModel):
    """Proposed edit submitted by an agent."""

    path: str
    target_content: str
    original_content: Optional[str] = None
    min_gap_size: Optional[int] = None


def _session_payload(session: ReviewSession) -> dict:
    payload = session.to_dict()
    payload["statistics"] = chunk_store.review_statistics(session.chunks)
    payload["is_done"] = chunk_store.is_fully_processed(session.chunks)
    return payload


def _result_payload(session: ReviewSession, result: FinalResult) -> dict:
    return {
        "session_id": session.id,
        "document_path": session.document_path,
        "outcome": result.outcome.value,
        "decision": FILE_SAVED if result.outcome == CommitOutcome.WRITTEN else DIFF_REJECTED,
        "accepted_count": result.accepted_count,
        "content": result.content,
    }


def _load_configuration() -> ReviewConfiguration:
    """Load configuration from INLINE_DIFF_REVIEW_* environment variables."""
    manager = ConfigurationManager()
    try:
        manager.load_from_env()
    except ConfigurationError as exc:
        errors = exc.validation_result.errors if exc.validation_result else []
        logger.error(f"Invalid environment configuration, using defaults: {errors}")
    return manager.configuration


def create_app(
    review_manager: Optional[ReviewManager] = None,
    config: Optional[ReviewConfiguration] = None,
) -> FastAPI:
    """
    Build the HTTP application around a review manager.

    Args:
        review_manager: Manager to expose. If None, one is built from
                        ``config`` and its configured document store.
        config: Review configuration. If None, loaded from the environment.

    Returns:
        Configured FastAPI application.
    """
    config = config or _load_configuration()
    logging.basicConfig(level=config.log_level)
    if review_manager is None:
        review_manager = ReviewManager.from_configuration(config, create_document_store(config))

    app = FastAPI(title="Inline Diff Review API", version="0.1.0")
    app.state.review_manager = review_manager

    def load_session(session_id: str) -> ReviewSession:
        session = review_manager.get_session_by_id(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Review session {session_id} not found")
        return session

    def apply(session: ReviewSession, decision: Callable[[ReviewSession], ReviewSession]) -> JSONResponse:
        try:
            updated = decision(session)
        except SessionClosedError as exc:
            raise HTTPException(status_code=404, detail=exc.to_dict()) from exc
        payload = _session_payload(updated)
        payload["changed"] = updated is not session
        return JSONResponse(status_code=200, content=payload)

    @app.post("/api/reviews")
    async def open_review(request: OpenReviewRequest) -> JSONResponse:
        """Open a review session for a proposed edit.

        When ``original_content`` is omitted it is read from the document
        store; a document that does not exist yet is reviewed against
        empty content.
        """
        store = review_manager.document_store
        try:
            original = request.original_content
            if original is None:
                original = store.read(request.path) if store.exists(request.path) else ""
            session = review_manager.open_review(
                request.path,
                original,
                request.target_content,
                min_gap_size=request.min_gap_size,
            )
        except InputError as exc:
            raise HTTPException(status_code=400, detail=exc.to_dict()) from exc

        return JSONResponse(status_code=201, content=_session_payload(session))

    @app.get("/api/reviews/{session_id}")
    async def get_review(session_id: str) -> JSONResponse:
        """Retrieve a live review session with its chunks and progress."""
        return JSONResponse(status_code=200, content=_session_payload(load_session(session_id)))

    @app.get("/api/reviews/{session_id}/chunks/{chunk_id}")
    async def get_chunk(session_id: str, chunk_id: str) -> JSONResponse:
        """Retrieve a single chunk of a review session."""
        session = load_session(session_id)
        try:
            chunk = chunk_store.get_chunk(session.chunks, chunk_id)
        except UnknownChunkError as exc:
            raise HTTPException(status_code=404, detail=exc.to_dict()) from exc
        return JSONResponse(status_code=200, content=chunk.to_dict())

    @app.post("/api/reviews/{session_id}/chunks/{chunk_id}/accept")
    async def accept_chunk(session_id: str, chunk_id: str) -> JSONResponse:
        """Accept a pending chunk."""
        session = load_session(session_id)
        return apply(session, lambda s: review_manager.decide(s, chunk_id, True))

    @app.post("/api/reviews/{session_id}/chunks/{chunk_id}/reject")
    async def reject_chunk(session_id: str, chunk_id: str) -> JSONResponse:
        """Reject a pending chunk."""
        session = load_session(session_id)
        return apply(session, lambda s: review_manager.decide(s, chunk_id, False))

    @app.post("/api/reviews/{session_id}/accept-all")
    async def accept_all(session_id: str) -> JSONResponse:
        """Accept every pending chunk."""
        session = load_session(session_id)
        return apply(session, lambda s: review_manager.decide_all(s, True))

    @app.post("/api/reviews/{session_id}/reject-all")
    async def reject_all(session_id: str) -> JSONResponse:
        """Reject every pending chunk."""
        session = load_session(session_id)
        return apply(session, lambda s: review_manager.decide_all(s, False))

    @app.post("/api/reviews/{session_id}/commit")
    async def commit_review(session_id: str) -> JSONResponse:
        """Write the reviewed document.

        Returns 409 while chunks are pending, or when the stored document
        changed underneath the review; the session stays open in both cases.
        """
        session = load_session(session_id)
        try:
            result = review_manager.commit(session)
        except PendingChunksError as exc:
            raise HTTPException(status_code=409, detail=exc.to_dict()) from exc
        except SessionClosedError as exc:
            raise HTTPException(status_code=404, detail=exc.to_dict()) from exc
        except WriteError as exc:
            raise HTTPException(status_code=500, detail=exc.to_dict()) from exc

        if result.outcome == CommitOutcome.INTEGRITY_ERROR:
            raise HTTPException(
                status_code=409,
                detail={"outcome": result.outcome.value, "error": result.error},
            )
        return JSONResponse(status_code=200, content=_result_payload(session, result))

    @app.delete("/api/reviews")
    async def discard_all_reviews() -> JSONResponse:
        """Discard every open review without writing."""
        count = review_manager.discard_all()
        return JSONResponse(
            status_code=200,
            content={"discarded": count, "decision": DIFF_REJECTED},
        )

    @app.delete("/api/reviews/{session_id}")
    async def discard_review(session_id: str) -> JSONResponse:
        """Discard a review session without writing."""
        session = load_session(session_id)
        review_manager.discard(session)
        return JSONResponse(
            status_code=200,
            content={"session_id": session.id, "decision": DIFF_REJECTED},
        )

    return app
