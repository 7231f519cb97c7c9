"""HTTP server wiring for the debugging proxy."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

import aiohttp
from aiohttp import web

from .config import Config
from .handlers import SUPPORTED_METHODS, ProxyHandler

log = logging.getLogger(__name__)

KEEP_ALIVE_TIMEOUT = 75.0
ROUTE = "/{url_path:.*}"


def create_app(config: Config) -> web.Application:
    """Build the proxy application; raises ConfigError for an unusable config."""
    config.validate()
    app = web.Application()
    active: list[ProxyHandler] = []

    async def client_context(_app: web.Application) -> AsyncIterator[None]:
        connector = aiohttp.TCPConnector(ssl=False)
        async with aiohttp.ClientSession(
            connector=connector,
            auto_decompress=False,
            timeout=aiohttp.ClientTimeout(total=None),
        ) as session:
            active.append(ProxyHandler(config, session))
            try:
                yield
            finally:
                active.clear()

    async def dispatch(request: web.Request) -> web.StreamResponse:
        return await active[0].handle(request)

    app.cleanup_ctx.append(client_context)
    for method in SUPPORTED_METHODS:
        app.router.add_route(method, ROUTE, dispatch)
    return app


async def run(config: Config) -> None:
    """Serve the proxy until cancelled."""
    app = create_app(config)
    runner = web.AppRunner(app, keepalive_timeout=KEEP_ALIVE_TIMEOUT)
    await runner.setup()
    try:
        site = web.TCPSite(runner, config.server.host, config.server.port)
        await site.start()
        log.info("Listening on %s:%s", config.server.host, config.server.port)
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()