"""Gateway — Starlette ASGI application.

Hosts the survey workflow endpoints and the tool servers under
``/api``.  Each tool server is a frozen ``Registry`` behind one of the
two transport adapters.

Run directly::

    python -m gateway.server --port 8100
"""

from __future__ import annotations

import argparse
import contextlib
import logging
import os
from pathlib import Path
from typing import AsyncIterator

from backends.database import DatabaseClient
from backends.webhook import WebhookNotifier
from dotenv import load_dotenv
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from gateway import survey
from gateway.config import Settings
from gateway.registry import Registry
from gateway.toolsets import (
    ai_safety,
    community_feedback,
    cultural_competence,
    cultural_compliance,
    data_sovereignty,
    participant_consent,
)
from gateway.transport import ANY_METHOD, discovery_endpoint, tool_call_endpoint

log = logging.getLogger(__name__)

# path → registry, per transport family
TOOL_CALL_SERVERS: dict[str, Registry] = {
    "/api/ai-safety": ai_safety.registry,
}
DISCOVERY_SERVERS: dict[str, Registry] = {
    "/api/mcp": cultural_compliance.registry,
    "/api/community-feedback": community_feedback.registry,
    "/api/cultural-competence": cultural_competence.registry,
    "/api/data-sovereignty": data_sovereignty.registry,
    "/api/participant-consent": participant_consent.registry,
}
AUDIT_TRAILS = ai_safety.TRAILS + participant_consent.TRAILS


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


def _routes() -> list[Route]:
    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/api/create-session", survey.create_session, methods=ANY_METHOD),
        Route("/api/log-conversation", survey.log_conversation, methods=ANY_METHOD),
        Route("/api/link-conversation", survey.link_conversation, methods=ANY_METHOD),
        Route("/api/submit-form", survey.submit_form, methods=ANY_METHOD),
        Route("/api/survey-completed", survey.survey_completed, methods=ANY_METHOD),
    ]
    for path, registry in TOOL_CALL_SERVERS.items():
        routes.append(Route(path, tool_call_endpoint(registry.freeze()), methods=ANY_METHOD))
    for path, registry in DISCOVERY_SERVERS.items():
        routes.append(Route(path, discovery_endpoint(registry.freeze()), methods=ANY_METHOD))
    return routes


# ── App factory ──────────────────────────────────────────────────────


def create_app(
    settings: Settings | None = None,
    *,
    database: DatabaseClient | None = None,
    webhook: WebhookNotifier | None = None,
) -> Starlette:
    """Assemble the app.

    Clients not passed in are built from *settings*; a missing database
    configuration leaves ``state.database`` as None and the database
    endpoints answer 500.
    """
    settings = settings or Settings.from_env()

    if database is None and settings.database_configured:
        database = DatabaseClient(settings.supabase_url, settings.supabase_key, settings.http_timeout)
    if webhook is None and settings.webhook_url:
        webhook = WebhookNotifier(settings.webhook_url, settings.http_timeout)
    if database is None:
        log.warning("SUPABASE_URL/SUPABASE_ANON_KEY not set; database endpoints disabled")

    for trail in AUDIT_TRAILS:
        trail.configure(settings.audit_max_entries, settings.audit_window_seconds)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        yield
        for client in (app.state.database, app.state.webhook):
            if client is not None:
                await client.close()

    app = Starlette(debug=False, routes=_routes(), lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.webhook = webhook
    return app


# ── Runnable entrypoint ──────────────────────────────────────────────


def main() -> None:
    import uvicorn

    load_dotenv(os.path.join(Path.cwd(), ".env"))
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(description="RISE survey gateway")
    parser.add_argument("--host", type=str, default="127.0.0.1", help="Interface to bind")
    parser.add_argument("--port", type=int, default=8100, help="Port to listen on")
    parser.add_argument("--log-level", type=str, default=settings.log_level, help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(settings),
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
