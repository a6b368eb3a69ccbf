"""
Blog API — FastAPI Application Factory and Server Lifecycle
=============================================================

What:  Builds the FastAPI app, registers error handlers, and starts/stops
       the HTTP server together with its database.
How:   `create_app(database)` returns a configured FastAPI instance.
       `run_server()` connects the database, binds the listener and starts
       uvicorn, returning a `ServerHandle`; `close_server(handle)` undoes it.
Who:   `main()` (the `blogapi` console script) for production; the test
       suite calls `create_app()` and `run_server()` directly.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → CORS           │
    │                                                     │
    │  Routes:      /blogs CRUD        GET /health        │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ MalformedId→410 │ Lookup→404      │
    │  Storage→500    │ unmatched route→404               │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   connect database → bind socket → serve
               (database is disposed again if the listener fails)
    Shutdown:  dispose database → stop server and close listener
"""

import asyncio
import logging
import socket
import sys
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blogapi import __version__
from blogapi.config import settings
from blogapi.database import Database
from blogapi.exceptions import (
    MalformedIdError,
    RecordLookupError,
    StorageError,
    ValidationError,
)
from blogapi.middleware.logging import RequestLoggingMiddleware
from blogapi.middleware.request_id import RequestIDMiddleware, request_id_var
from blogapi.routes import blogs, health
from blogapi.services.blog_service import BlogService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure process-wide logging.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once by `main()` before anything else runs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Log startup and shutdown of the ASGI app.

    The database is owned by `run_server`/`close_server`, not by the
    lifespan, so it is already connected when this runs.
    """
    logger.info("Blog API %s starting up", __version__)
    yield
    logger.info("Blog API shutting down")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and bodies.

    Handler hierarchy:
        RequiredFieldError      → 400 text/plain
        ValidationError         → 400 {"message"}
        MalformedIdError        → 410 {"message"}
        RecordLookupError       → 404 {"message"}
        StorageError            → 500 {"message"} or bare JSON string
        HTTPException 404/405   → 404 {"message": "Not Found"}
        Any other exception is answered 500 by RequestIDMiddleware, inside
        the request-id scope so the response still carries X-Request-ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        """Client sent an incomplete or inconsistent body."""
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        if exc.plain_text:
            return PlainTextResponse(exc.message, status_code=400)
        return JSONResponse(status_code=400, content={"message": exc.message})

    @app.exception_handler(MalformedIdError)
    async def handle_malformed_id(request: Request, exc: MalformedIdError):
        return JSONResponse(status_code=410, content={"message": exc.message})

    @app.exception_handler(RecordLookupError)
    async def handle_lookup_error(request: Request, exc: RecordLookupError):
        rid = request_id_var.get("")
        logger.warning("[%s] Lookup failed: %s | Context: %s", rid, exc.detail, exc.context)
        return JSONResponse(status_code=404, content={"message": exc.message})

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        """Storage failed — fixed message to the client, details logged server-side."""
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        content = {"message": exc.message} if exc.wrap_message else exc.message
        return JSONResponse(status_code=500, content=content)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        """Unknown paths and unsupported methods both answer 404 Not Found."""
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"message": "Not Found"})
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Database, request_timeout: Optional[float] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database:        Connected (or soon to be connected) Database the
                         request sessions come from.
        request_timeout: Seconds allowed per storage call; defaults to
                         settings.request_timeout.
    """
    app = FastAPI(
        title="Blog API",
        description="Create, read, update and delete blog posts.",
        version=__version__,
        # Only /blogs and /health are served; everything else answers 404
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.database = database
    app.state.blog_service = BlogService(
        timeout=request_timeout if request_timeout is not None else settings.request_timeout
    )
    app.state.started_at = time.time()

    # Last added runs first: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(blogs.router)
    app.include_router(health.router)

    return app


# ══════════════════════════════════════════════════════════════════════════
# Server Lifecycle
# ══════════════════════════════════════════════════════════════════════════

@dataclass
class ServerHandle:
    """Everything `close_server` needs to shut a running server down."""
    app: FastAPI
    database: Database
    server: uvicorn.Server
    task: "asyncio.Task[None]"
    host: str
    port: int

    @property
    def base_url(self) -> str:
        host = "127.0.0.1" if self.host in ("0.0.0.0", "") else self.host
        return f"http://{host}:{self.port}"


def _bind_socket(host: str, port: int) -> socket.socket:
    """Bind the listening socket up front so a bind failure raises OSError here."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


async def run_server(
    database_url: str,
    port: Optional[int] = None,
    host: Optional[str] = None,
) -> ServerHandle:
    """
    Connect to the database, then start serving HTTP.

    Returns once both the database and the listener are ready. If the
    listener cannot be started, the database is disposed before the error
    propagates.

    Args:
        database_url: Async SQLAlchemy URL of the blog store.
        port:         Listening port; settings.port when None, 0 for any free port.
        host:         Interface to bind; settings.host when None.
    """
    host = settings.host if host is None else host
    port = settings.port if port is None else port

    database = Database(database_url)
    await database.connect()

    try:
        sock = _bind_socket(host, port)
        bound_port = sock.getsockname()[1]

        app = create_app(database)
        config = uvicorn.Config(app, host=host, port=bound_port, lifespan="on", log_config=None)
        server = uvicorn.Server(config)
        task = asyncio.create_task(server.serve(sockets=[sock]))

        while not server.started:
            if task.done():
                # Propagates the startup exception, if there was one
                task.result()
                raise RuntimeError(f"Server on {host}:{bound_port} exited during startup")
            await asyncio.sleep(0.01)
    except BaseException:
        await database.dispose()
        raise

    logger.info("Your app is listening on port %d", bound_port)
    return ServerHandle(
        app=app,
        database=database,
        server=server,
        task=task,
        host=host,
        port=bound_port,
    )


async def close_server(handle: ServerHandle) -> None:
    """Dispose the database, then stop the server and close its listener."""
    await handle.database.dispose()
    logger.info("Closing server")
    handle.server.should_exit = True
    await handle.task


async def serve_forever() -> None:
    """Run until uvicorn is told to exit (SIGINT/SIGTERM)."""
    handle = await run_server(settings.database_url, settings.port)
    try:
        await handle.task
    finally:
        await handle.database.dispose()


def main() -> None:
    """Process entry point: `blogapi` or `python -m blogapi`."""
    setup_logging()
    try:
        asyncio.run(serve_forever())
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.error("Fatal startup error: %s", str(e), exc_info=True)
        sys.exit(1)
