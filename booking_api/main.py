import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.exceptions import HTTPException as StarletteHTTPException

from booking_api.core.config import Settings
from booking_api.core.errors import BookingError
from booking_api.core.logging_config import setup_logging
from booking_api.database import build_engine, create_db_and_tables
from booking_api.routers import appointments, auth, invoices, services, users


logger = logging.getLogger(__name__)


# =========================
# ERROR RESPONSES
# =========================

async def handle_booking_error(request: Request, exc: BookingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=headers)


async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def handle_decode_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Malformed request.", "details": jsonable_encoder(exc.errors())},
    )


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.log_level)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.settings = settings
    app.state.engine = engine or build_engine(settings)

    app.include_router(users.router)
    app.include_router(auth.router)
    app.include_router(services.router)
    app.include_router(appointments.router)
    app.include_router(invoices.router)

    app.add_exception_handler(BookingError, handle_booking_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_decode_error)

    @app.on_event("startup")
    def on_startup():
        create_db_and_tables(app.state.engine)

    @app.get("/")
    def root():
        return {"message": f"{settings.project_name} is running"}

    return app


app = create_app()
