from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from netcircle.api.endpoints import get_endpoints_router
from netcircle.api.sessions import SessionRegistry
from netcircle.api.views import get_views_router
from netcircle.config import settings
from netcircle.stores.base import SnapshotStore


async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(*, store: SnapshotStore) -> FastAPI:
    """Create FastAPI app."""
    app = FastAPI()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, unexpected_error)

    sessions = SessionRegistry(store)
    app.state.sessions = sessions
    app.include_router(router=get_endpoints_router(sessions=sessions))
    app.include_router(router=get_views_router(sessions))

    return app
