"""HTTP trigger (FastAPI).

`GET|POST /api/ITGExpiryAutotaskIntegration` receives the alert from IT Glue.
Parameters come from the query string; on POST a JSON object body can supply
any parameter missing from the query.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from core.config import AppSettings
from core.logging_setup import configure_logging
from core.services.alert_pipeline import Collaborators, handle_request

logger = logging.getLogger(__name__)

TRIGGER_PATH = "/api/ITGExpiryAutotaskIntegration"
ALERT_PARAMS = ("testType", "organizationName", "resourceName", "resourceTimeToExpiry", "resourceUrl")


async def collect_params(request: Request) -> dict[str, Any]:
    params: dict[str, Any] = {key: request.query_params[key] for key in ALERT_PARAMS if key in request.query_params}
    if request.method != "POST":
        return params

    raw = await request.body()
    if not raw:
        return params
    try:
        body = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring non-JSON request body.")
        return params
    if isinstance(body, dict):
        for key in ALERT_PARAMS:
            if key not in params and body.get(key) is not None:
                params[key] = body[key]
    return params


def create_app(
    settings: AppSettings | None = None,
    collaborators_factory: Callable[[AppSettings], Collaborators] | None = None,
) -> FastAPI:
    settings = settings or AppSettings()
    configure_logging(settings.log_level)

    if collaborators_factory is None:
        from adapters.collaborators import build_collaborators  # noqa: PLC0415

        collaborators_factory = build_collaborators

    app = FastAPI(title="itg-expiry-bridge", version="0.1.0")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.api_route(TRIGGER_PATH, methods=["GET", "POST"], response_class=PlainTextResponse)
    async def expiry_trigger(request: Request) -> PlainTextResponse:
        logger.info("Request Url: %s, Method: %s", request.url, request.method)
        params = await collect_params(request)
        result = await handle_request(
            params,
            settings=settings,
            collaborators=collaborators_factory(settings),
        )
        logger.info("Alert outcome: %s (ticket %s)", result.outcome.value, result.ticket_id)
        return PlainTextResponse(result.body, status_code=result.status_code)

    return app
