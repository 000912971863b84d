import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pressuretrace import __version__
from pressuretrace.api.router import api_router
from pressuretrace.core.config import settings
from pressuretrace.core.errors import PersistError
from pressuretrace.core.logging_config import configure_logging
from pressuretrace.database.session import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db()
    logger.info("%s %s started, API under %s", settings.app_name, __version__, settings.api_prefix)
    yield
    logger.info("%s shutting down", settings.app_name)


async def persist_error_handler(request: Request, exc: PersistError) -> JSONResponse:
    # save_frame has already rolled back the session.
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(PersistError, persist_error_handler)

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
