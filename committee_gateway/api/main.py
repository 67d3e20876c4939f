"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from committee_gateway.api.errors import register_exception_handlers
from committee_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from committee_gateway.api.v1 import (
    assemblies,
    board,
    dashboard,
    documents,
    institution,
    members,
    state,
    treasury,
    users,
)
from committee_gateway.infrastructure.observability.logging import setup_logging
from committee_gateway.infrastructure.storage.base import StateStore
from committee_gateway.infrastructure.storage.factory import build_state_store
from committee_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app(store: StateStore | None = None) -> FastAPI:
    """Create and configure FastAPI application"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store.init()
        yield

    app = FastAPI(
        title="Committee Gateway",
        description="Administration backend for a community housing committee",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.store = store or build_state_store(settings)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(state.router, prefix="/api", tags=["state"])
    app.include_router(members.router, prefix="/api", tags=["members"])
    app.include_router(treasury.router, prefix="/api", tags=["treasury"])
    app.include_router(board.router, prefix="/api", tags=["board"])
    app.include_router(assemblies.router, prefix="/api", tags=["assemblies"])
    app.include_router(documents.router, prefix="/api", tags=["secretariat"])
    app.include_router(users.router, prefix="/api", tags=["support"])
    app.include_router(institution.router, prefix="/api", tags=["settings"])
    app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])

    # Unknown API routes answer JSON instead of falling through
    @app.api_route("/api/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
    def api_not_found(request: Request, path: str):
        return JSONResponse(status_code=404, content={"error": f"API route not found: {request.url.path}"})

    return app


app = create_app()
