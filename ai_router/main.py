from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ai_router import __version__
from ai_router.api.endpoints import router as api_router
from ai_router.api.services.error_handling import ErrorResponseBuilder
from ai_router.core.config import RouterConfig, RouterSettings
from ai_router.core.exceptions import RouterError
from ai_router.core.logging import configure_root_logging
from ai_router.engine import RoutingEngine, build_engine


def create_app(engine: RoutingEngine | None = None) -> FastAPI:
    """Create the HTTP app around a routing engine.

    When no engine is given one is built from the environment at startup.
    The engine's HTTP clients are closed on shutdown either way.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "engine", None) is None:
            app.state.engine = build_engine()
        try:
            yield
        finally:
            await app.state.engine.aclose()

    app = FastAPI(title="AI Router", version=__version__, lifespan=lifespan)
    app.state.engine = engine
    app.include_router(api_router)

    @app.exception_handler(RouterError)
    async def router_error_handler(request: Request, exc: RouterError) -> JSONResponse:
        return ErrorResponseBuilder.routing_failure(exc)

    @app.get("/")
    async def root() -> dict[str, object]:
        return {
            "message": f"AI Router v{__version__}",
            "status": "running",
            "endpoints": sorted(
                {route.path for route in app.routes if route.path.startswith("/v1")}
            ),
        }

    return app


def main(settings: RouterConfig | None = None) -> None:
    settings = settings or RouterSettings.load()
    configure_root_logging(settings.log_level)

    engine = build_engine(settings)
    log_level = settings.effective_log_level.lower()

    print(f"🚀 AI Router v{__version__}")
    print(f"   Server: {settings.host}:{settings.port}")
    print(f"   Request Timeout : {settings.request_timeout:g}s")
    print(f"   Max Fallbacks   : {settings.max_fallback_attempts}")
    print("")

    uvicorn.run(
        create_app(engine),
        host=settings.host,
        port=settings.port,
        log_level=log_level,
        access_log=log_level == "debug",
    )


if __name__ == "__main__":
    main()
