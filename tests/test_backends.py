"""Tests for the database client and webhook notifier.

Both talk to ``httpx.MockTransport`` handlers; no network is used.
"""

import logging

import httpx
import pytest
from backends.database import DatabaseClient, PersistenceError
from backends.webhook import WebhookNotifier
from conftest import WebhookRecorder


@pytest.fixture
async def db(fake_db):
    client = DatabaseClient("http://db.test/", "anon-key", transport=httpx.MockTransport(fake_db))
    yield client
    await client.close()


# ── Database ─────────────────────────────────────────────────────────


@pytest.mark.anyio
async def test_insert_posts_row(db, fake_db):
    rows = await db.insert("participant_sessions", {"session_id": "RISE_1_a", "consent_status": "pending"})
    assert rows == [{"id": 1, "session_id": "RISE_1_a", "consent_status": "pending"}]

    (req,) = fake_db.requests
    assert req["method"] == "POST"
    assert req["table"] == "participant_sessions"
    assert req["headers"]["apikey"] == "anon-key"
    assert req["headers"]["authorization"] == "Bearer anon-key"
    assert req["headers"]["prefer"] == "return=representation"


@pytest.mark.anyio
async def test_update_filters_by_equality(db, fake_db):
    await db.update("participant_sessions", {"form_completed": True}, eq={"session_id": "RISE_1_a"})
    (req,) = fake_db.requests
    assert req["method"] == "PATCH"
    assert req["params"] == {"session_id": "eq.RISE_1_a"}
    assert req["json"] == {"form_completed": True}


@pytest.mark.anyio
async def test_update_without_filter_refused(db, fake_db):
    with pytest.raises(ValueError):
        await db.update("participant_sessions", {"form_completed": True}, eq={})
    assert fake_db.requests == []


@pytest.mark.anyio
async def test_error_body_message_surfaces(db, fake_db):
    fake_db.fail("POST", "form_submissions", status=409, message="duplicate key value")
    with pytest.raises(PersistenceError) as exc_info:
        await db.insert("form_submissions", {"session_id": "x"})
    assert exc_info.value.message == "duplicate key value"
    assert exc_info.value.status_code == 409


@pytest.mark.anyio
async def test_transport_error_becomes_persistence_error():
    def unreachable(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with DatabaseClient("http://db.test", "k", transport=httpx.MockTransport(unreachable)) as db:
        with pytest.raises(PersistenceError, match="ConnectError"):
            await db.insert("ai_conversations", {})


@pytest.mark.anyio
async def test_empty_response_reads_as_no_rows():
    async with DatabaseClient(
        "http://db.test", "k", transport=httpx.MockTransport(lambda r: httpx.Response(204))
    ) as db:
        assert await db.update("participant_sessions", {"a": 1}, eq={"session_id": "s"}) == []


@pytest.mark.anyio
async def test_non_json_success_body_becomes_persistence_error():
    async with DatabaseClient(
        "http://db.test", "k", transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>ok</html>"))
    ) as db:
        with pytest.raises(PersistenceError) as exc_info:
            await db.update("participant_sessions", {"a": 1}, eq={"session_id": "s"})
    assert exc_info.value.message == "invalid response body"
    assert exc_info.value.status_code == 200


# ── Webhook ──────────────────────────────────────────────────────────


@pytest.mark.anyio
async def test_deliver_posts_json():
    hook = WebhookRecorder()
    async with WebhookNotifier("http://hooks.test/rise", transport=httpx.MockTransport(hook)) as notifier:
        assert await notifier.deliver({"type": "survey_completed", "sessionId": "s1"}) is True
    assert hook.payloads == [{"type": "survey_completed", "sessionId": "s1"}]


@pytest.mark.anyio
async def test_deliver_swallows_rejection(caplog):
    hook = WebhookRecorder(status=503)
    async with WebhookNotifier("http://hooks.test/rise", transport=httpx.MockTransport(hook)) as notifier:
        with caplog.at_level(logging.WARNING, logger="backends.webhook"):
            assert await notifier.deliver({"type": "form_submission"}) is False
    assert "HTTP 503" in caplog.text


@pytest.mark.anyio
async def test_deliver_swallows_transport_error(caplog):
    hook = WebhookRecorder(error=httpx.ConnectTimeout("timed out"))
    async with WebhookNotifier("http://hooks.test/rise", transport=httpx.MockTransport(hook)) as notifier:
        with caplog.at_level(logging.WARNING, logger="backends.webhook"):
            assert await notifier.deliver({"type": "conversation_link"}) is False
    assert "conversation_link failed" in caplog.text
