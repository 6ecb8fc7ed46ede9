"""aiohttp server exposing the update endpoint.

Routes:
- ``POST <route_path>`` (``/api/update`` by default): run an update and
  stream newline-delimited JSON progress events.
- ``GET /health``: liveness probe.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
from contextlib import aclosing

from aiohttp import web

from self_updater import __version__
from self_updater.commands import CommandRunner
from self_updater.config import Settings, get_settings
from self_updater.logging import get_logger, setup_logging
from self_updater.models import UpdateRequest
from self_updater.orchestrator import UpdateOrchestrator

log = get_logger("self_updater.server")

ORCHESTRATOR_KEY = web.AppKey("orchestrator", UpdateOrchestrator)

STREAM_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def create_app(
    orchestrator: UpdateOrchestrator | None = None,
    settings: Settings | None = None,
) -> web.Application:
    """Create the aiohttp application.

    Args:
        orchestrator: Pipeline to run; built from ``settings`` when omitted.
        settings: Defaults to the cached environment settings.
    """
    settings = settings or get_settings()
    if orchestrator is None:
        runner = CommandRunner(cwd=settings.project_dir, timeout=settings.command_timeout_seconds)
        orchestrator = UpdateOrchestrator(runner, settings)

    app = web.Application()
    app[ORCHESTRATOR_KEY] = orchestrator
    app.router.add_get("/health", handle_health)
    app.router.add_route("*", settings.route_path, handle_update)
    return app


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "version": __version__})


async def handle_update(request: web.Request) -> web.StreamResponse:
    """Validate the request, then stream the update pipeline's events."""
    if request.method != "POST":
        return web.json_response({"error": "Method not allowed"}, status=405)

    try:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return web.json_response(
                {"error": "Invalid request body: expected JSON"}, status=400
            )

        try:
            update_request = UpdateRequest.from_dict(body)
        except ValueError as exc:
            return web.json_response({"error": str(exc)}, status=400)

        orchestrator = request.app[ORCHESTRATOR_KEY]
        response = web.StreamResponse(status=200, headers=STREAM_HEADERS)
        await response.prepare(request)
    except Exception as exc:
        log.exception("update_preparation_failed")
        return web.json_response(
            {
                "success": False,
                "error": str(exc) or "Unknown error occurred while preparing update",
            },
            status=500,
        )

    try:
        async with aclosing(orchestrator.run(update_request)) as events:
            async for event in events:
                await response.write(event.to_line())
    except ConnectionResetError:
        log.warning("update_client_disconnected", branch=update_request.branch)
    finally:
        with contextlib.suppress(ConnectionResetError):
            await response.write_eof()

    return response


async def run_server() -> None:
    """Run the server until cancelled."""
    setup_logging()
    settings = get_settings()
    app = create_app(settings=settings)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, settings.host, settings.port)
    await site.start()
    log.info(
        "self_updater_started",
        host=settings.host,
        port=settings.port,
        route=settings.route_path,
        project_dir=settings.project_dir,
    )

    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
