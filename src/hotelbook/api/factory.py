"""FastAPI application factory."""

from fastapi import FastAPI, Request, Response

from hotelbook.observability.correlation import (
    CORRELATION_ID_HEADER,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)

from .routers import public
from .routes import bookings, hotels


def create_app() -> FastAPI:
    """Create the FastAPI app with correlation-ID middleware and all routes."""
    app = FastAPI(
        title="Hotelbook",
        docs_url=None,
        redoc_url=None,
    )

    @app.middleware("http")
    async def correlation_id_middleware(request: Request, call_next) -> Response:
        cid = request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        token = set_correlation_id(cid)
        try:
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = cid
            return response
        finally:
            reset_correlation_id(token)

    app.include_router(public.router)
    app.include_router(hotels.router)
    app.include_router(bookings.router)

    return app
