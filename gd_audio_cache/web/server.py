"""
The HTTP surface serving cached audio to clients, built on aiohttp.web.
"""

import asyncio
import logging

from aiohttp import web

from gd_audio_cache import __version__
from gd_audio_cache.core.refresh import RefreshOrchestrator
from gd_audio_cache.core.scheduler import RefreshScheduler
from gd_audio_cache.exceptions import FilesystemError, RefreshInProgressError
from gd_audio_cache.media.downloader import close_connection_pool
from gd_audio_cache.models.audio import AudioKind
from gd_audio_cache.models.config import ProxyConfig

log = logging.getLogger(__name__)

NOT_FOUND_URL = "https://http.cat/404"

CONFIG_KEY = web.AppKey("config", ProxyConfig)
ORCHESTRATOR_KEY = web.AppKey("orchestrator", RefreshOrchestrator)
SCHEDULER_KEY = web.AppKey("scheduler", RefreshScheduler)

INVALID = {"invalid": True}


def parse_asset_params(request: web.Request) -> tuple[AudioKind, int] | None:
    """Validates the ``type``/``id`` path segments; returns None if malformed."""
    segment = request.match_info["id"]
    # int() alone would also take "1_0", " 1" and non-ASCII digits.
    if not (segment.isascii() and segment.isdigit()):
        return None
    try:
        # int() also refuses digit strings past sys.get_int_max_str_digits().
        return AudioKind(request.match_info["type"]), int(segment)
    except ValueError:
        return None


async def index(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    return web.json_response(
        {"version": f"v{__version__}", "refreshInterval": config.refresh_interval}
    )


async def poll(request: web.Request) -> web.Response:
    log.info(f"polling {request.match_info['type']} {request.match_info['id']}")
    params = parse_asset_params(request)
    if params is None:
        return web.json_response(INVALID)

    kind, asset_id = params
    try:
        exists = request.app[ORCHESTRATOR_KEY].store.exists(kind, asset_id)
    except FilesystemError as e:
        log.debug(f"Could not check {kind.value} {asset_id}: {e}")
        return web.json_response(INVALID)
    return web.json_response({"invalid": False, "exists": exists})


async def download(request: web.Request) -> web.Response:
    log.info(f"downloading {request.match_info['type']} {request.match_info['id']}")
    params = parse_asset_params(request)
    if params is None:
        return web.json_response(INVALID)

    kind, asset_id = params
    store = request.app[ORCHESTRATOR_KEY].store
    try:
        if not store.exists(kind, asset_id):
            return web.json_response(INVALID)
        data = await store.read_bytes(kind, asset_id)
    except FilesystemError as e:
        # The file can vanish between the check and the read while a refresh clears.
        log.debug(f"Could not serve {kind.value} {asset_id}: {e}")
        return web.json_response(INVALID)

    return web.Response(body=data, content_type=kind.content_type)


async def refresh(request: web.Request) -> web.Response:
    log.info("refreshing...")
    try:
        await request.app[ORCHESTRATOR_KEY].run()
    except RefreshInProgressError:
        return web.json_response({"success": False, "inProgress": True})
    return web.json_response({"success": True})


async def not_found(request: web.Request) -> web.Response:
    raise web.HTTPFound(NOT_FOUND_URL)


def _log_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Keeps the server alive on unhandled task errors, logging them instead."""
    exc = context.get("exception")
    log.warning(
        f"Unhandled exception: {context.get('message')}",
        exc_info=exc,
    )


async def _start_background(app: web.Application) -> None:
    asyncio.get_running_loop().set_exception_handler(_log_loop_exception)
    config = app[CONFIG_KEY]

    if config.refresh_on_startup:
        app[SCHEDULER_KEY].run_soon()
    app[SCHEDULER_KEY].start()
    log.info(
        f"Server started at {config.ip}:{config.port}, "
        f"set to update {config.refresh_interval}"
    )


async def _stop_background(app: web.Application) -> None:
    await app[SCHEDULER_KEY].stop()
    await app[ORCHESTRATOR_KEY].close()
    await close_connection_pool()


def create_app(
    config: ProxyConfig,
    orchestrator: RefreshOrchestrator | None = None,
    background: bool = True,
) -> web.Application:
    """
    Builds the web application.

    Args:
        config: The validated configuration.
        orchestrator: The refresh orchestrator; built from ``config`` if omitted.
        background: Whether to run the startup refresh and the scheduler.
    """
    app = web.Application()
    app[CONFIG_KEY] = config
    app[ORCHESTRATOR_KEY] = orchestrator or RefreshOrchestrator.from_config(config)
    app[SCHEDULER_KEY] = RefreshScheduler(
        app[ORCHESTRATOR_KEY], config.refresh_interval
    )

    app.router.add_get("/", index)
    app.router.add_get("/poll/{type}/{id}", poll)
    app.router.add_get("/download/{type}/{id}", download)
    app.router.add_get("/refresh", refresh)
    # Everything else, favicon included, goes to the 404 cat.
    app.router.add_route("*", "/{tail:.*}", not_found)

    if background:
        app.on_startup.append(_start_background)
        app.on_cleanup.append(_stop_background)
    return app


def run_server(config: ProxyConfig) -> None:
    """Runs the server until interrupted."""
    web.run_app(
        create_app(config),
        host=config.ip,
        port=config.port,
        print=None,
        access_log=None,
    )
