import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tripplanner.api import routes_auth, routes_generate, routes_health, routes_trips
from tripplanner.core.config import settings
from tripplanner.core.errors import TripPlannerError
from tripplanner.core.logging import configure_logging
from tripplanner.storage.clients import get_document_store, get_identity_provider

logger = logging.getLogger("tripplanner.main")


async def handle_trip_planner_error(request: Request, exc: TripPlannerError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    missing = any(err.get("type") == "missing" for err in exc.errors())
    message = "Missing required fields." if missing else "Invalid request body."
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse({"error": message}, status_code=400)


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title=settings.app_name, version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TripPlannerError, handle_trip_planner_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(routes_generate.router, prefix="/api", tags=["generation"])
    app.include_router(routes_auth.router, prefix="/api", tags=["auth"])
    app.include_router(routes_trips.router, prefix="/api/trips", tags=["trips"])

    # Handles may be None when unconfigured; dependencies report that per request.
    app.state.document_store = get_document_store()
    app.state.identity = get_identity_provider()
    app.state.completion_backend = None
    app.state.settings = settings
    if app.state.document_store is None:
        logger.warning("Document store not configured; trip routes will return 503")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
