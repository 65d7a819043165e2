"""Survey workflow endpoints.

Each endpoint writes one primary record, optionally updates the
participant's session row and optionally forwards the event to the
configured webhook.

* primary write failure   → 500 with the storage message
* secondary update failure → logged, request still succeeds
* webhook failure          → logged by the notifier, never surfaced

Webhook delivery runs as a background task after the response body has
been sent.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any

from backends.database import DatabaseClient, PersistenceError
from backends.webhook import WebhookNotifier
from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import JSONResponse

from gateway.config import ConfigurationError
from gateway.transport import BadRequest, endpoint, error_response, read_json

log = logging.getLogger(__name__)

SESSION_PREFIX = "RISE"
_BASE36 = string.digits + string.ascii_lowercase

# Tables
SESSIONS = "participant_sessions"
CONVERSATION_LINKS = "conversation_links"
CONVERSATIONS = "ai_conversations"
FORM_SUBMISSIONS = "form_submissions"


# ── Helpers ──────────────────────────────────────────────────────────


def new_session_id(now_ms: int | None = None) -> str:
    """``RISE_<epoch ms>_<8 base-36 chars>``.

    Unique with overwhelming probability only; the table's key
    constraint is the real guarantor.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_BASE36) for _ in range(8))
    return f"{SESSION_PREFIX}_{now_ms}_{suffix}"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def _body(request: Request) -> dict[str, Any]:
    raw = await read_json(request)
    if not isinstance(raw, dict):
        raise BadRequest("request must be a JSON object")
    return raw


def _database(request: Request) -> DatabaseClient:
    db = request.app.state.database
    if db is None:
        raise ConfigurationError("Persistence service not configured")
    return db


def _forward(request: Request, payload: dict[str, Any]) -> BackgroundTask | None:
    """Schedule best-effort delivery of *payload*, if a webhook is set."""
    notifier: WebhookNotifier | None = request.app.state.webhook
    if notifier is None:
        return None
    return BackgroundTask(notifier.deliver, payload)


async def _update_session(db: DatabaseClient, session_id: str, values: dict[str, Any]) -> None:
    try:
        await db.update(SESSIONS, values, eq={"session_id": session_id})
    except PersistenceError as exc:
        log.warning("could not update session %s: %s", session_id, exc.message)


# ── Endpoints ────────────────────────────────────────────────────────


@endpoint(("POST",), cors=True)
async def create_session(request: Request) -> JSONResponse:
    try:
        db = _database(request)
        session_id = new_session_id()
        await db.insert(SESSIONS, {"session_id": session_id, "consent_status": "pending"})
    except (PersistenceError, ConfigurationError) as exc:
        log.error("create-session failed: %s", exc)
        return error_response(500, str(exc))
    except Exception:
        log.exception("create-session failed")
        return error_response(500, "Internal server error")

    log.info("session %s created", session_id)
    return JSONResponse({"sessionId": session_id, "success": True})


@endpoint(("POST",), cors=True)
async def log_conversation(request: Request) -> JSONResponse:
    body = await _body(request)
    try:
        data = await _database(request).insert(
            CONVERSATIONS,
            {
                "session_id": body.get("session_id"),
                "conversation_data": body.get("conversation_data"),
                "interaction_timestamp": body.get("timestamp") or utc_now_iso(),
                "tikanga_compliance_check": False,
            },
        )
    except (PersistenceError, ConfigurationError) as exc:
        log.error("log-conversation failed: %s", exc)
        return error_response(500, str(exc))
    except Exception:
        log.exception("log-conversation failed")
        return error_response(500, "Internal server error")

    return JSONResponse({"success": True, "data": data})


@endpoint(("POST",), cors=True, preflight=True)
async def link_conversation(request: Request) -> JSONResponse:
    body = await _body(request)
    session_id = body.get("sessionId")
    conversation_id = body.get("conversationId")
    timestamp = body.get("timestamp") or utc_now_iso()
    log.info("linking conversation %s to session %s", conversation_id, session_id)

    try:
        db = _database(request)
        try:
            data = await db.insert(
                CONVERSATION_LINKS,
                {"session_id": session_id, "conversation_id": conversation_id, "linked_at": timestamp},
            )
        except PersistenceError as exc:
            log.error("conversation link insert failed: %s", exc.message)
            return error_response(500, "Database error", details=exc.message)

        await _update_session(
            db,
            session_id,
            {
                "conversation_started": True,
                "conversation_id": conversation_id,
                "conversation_started_at": timestamp,
            },
        )
    except ConfigurationError as exc:
        return error_response(500, str(exc))
    except Exception:
        log.exception("link-conversation failed")
        return error_response(500, "Linking failed")

    return JSONResponse(
        {
            "success": True,
            "linked": True,
            "sessionId": session_id,
            "conversationId": conversation_id,
            "data": data[0] if data else None,
        },
        background=_forward(
            request,
            {
                "type": "conversation_link",
                "sessionId": session_id,
                "conversationId": conversation_id,
                "timestamp": timestamp,
            },
        ),
    )


@endpoint(("POST",), cors=True, preflight=True)
async def submit_form(request: Request) -> JSONResponse:
    body = await _body(request)
    session_id = body.get("sessionId")
    form_data = body.get("formData")
    source = body.get("source")
    timestamp = body.get("timestamp") or utc_now_iso()
    log.info(
        "form submission for %s (source=%s, has_form_data=%s)",
        session_id,
        source,
        bool(form_data),
    )

    try:
        db = _database(request)
        try:
            await db.insert(
                FORM_SUBMISSIONS,
                {
                    "session_id": session_id,
                    "form_data": form_data,
                    "submission_source": source,
                    "submitted_at": timestamp,
                },
            )
        except PersistenceError as exc:
            log.error("form submission insert failed: %s", exc.message)
            return error_response(500, "Database error", details=exc.message)

        await _update_session(db, session_id, {"form_completed": True, "form_completed_at": timestamp})
    except ConfigurationError as exc:
        return error_response(500, str(exc))
    except Exception:
        log.exception("submit-form failed")
        return error_response(500, "Form submission failed")

    return JSONResponse(
        {
            "success": True,
            "sessionId": session_id,
            "message": "Form submitted successfully",
            "timestamp": utc_now_iso(),
        },
        background=_forward(
            request,
            {
                "type": "form_submission",
                "sessionId": session_id,
                "formData": form_data,
                "source": source,
                "timestamp": timestamp,
            },
        ),
    )


@endpoint(("POST",), cors=True, preflight=True)
async def survey_completed(request: Request) -> JSONResponse:
    body = await _body(request)
    session_id = body.get("sessionId")
    completion_type = body.get("completionType")
    log.info("survey completed: %s (%s)", session_id, completion_type)

    return JSONResponse(
        {"success": True, "sessionId": session_id, "completionType": completion_type},
        background=_forward(
            request,
            {
                "type": "survey_completed",
                "sessionId": session_id,
                "completionType": completion_type,
                "timestamp": body.get("timestamp") or utc_now_iso(),
            },
        ),
    )
