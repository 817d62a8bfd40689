"""Static server for cross-origin isolated test pages.

WASM worker threads share memory through ``SharedArrayBuffer``, which
browsers only expose to cross-origin isolated documents. Serving the built
page through this server adds the required headers.
"""

import logging
import mimetypes
from collections.abc import AsyncGenerator, Awaitable, Callable, Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TypeAlias

from aiohttp import web
from yarl import URL

log = logging.getLogger(__name__)

ISOLATION_HEADERS: Mapping[str, str] = {
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Embedder-Policy": "require-corp",
    "Cross-Origin-Resource-Policy": "same-origin",
}

mimetypes.add_type("application/wasm", ".wasm")
mimetypes.add_type("text/javascript", ".mjs")

Handler: TypeAlias = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def cross_origin_isolation(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Add cross-origin isolation headers to every response."""
    response = await handler(request)
    response.headers.update(ISOLATION_HEADERS)
    return response


def create_app(root: Path) -> web.Application:
    """Create an application serving ``root`` with isolation headers.

    Raises:
        FileNotFoundError: If root is not a directory

    """
    root = root.resolve()
    if not root.is_dir():
        raise FileNotFoundError(f"Page directory not found: {root}")

    async def index(request: web.Request) -> web.StreamResponse:
        index_file = root / "index.html"
        if not index_file.is_file():
            raise web.HTTPNotFound(text="index.html not found")
        return web.FileResponse(index_file)

    app = web.Application(middlewares=[cross_origin_isolation])
    app.router.add_get("/", index)
    app.router.add_static("/", root, show_index=False)
    return app


@asynccontextmanager
async def serve_directory(
    root: Path, host: str = "127.0.0.1", port: int = 0
) -> AsyncGenerator[URL, None]:
    """Serve a directory for the duration of the context.

    Args:
        root: Directory holding the built test page
        host: Interface to bind
        port: Port to bind; 0 picks a free port

    Yields:
        Base URL of the served page

    """
    runner = web.AppRunner(create_app(root))
    await runner.setup()
    try:
        site = web.TCPSite(runner, host, port)
        await site.start()
        bound_host, bound_port = runner.addresses[0][:2]
        url = URL.build(scheme="http", host=bound_host, port=bound_port, path="/")
        log.info("Serving %s at %s", root, url)
        yield url
    finally:
        await runner.cleanup()
