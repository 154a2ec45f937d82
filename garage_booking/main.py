"""
Application assembly for the garage booking backend.

``create_app`` wires logging, CORS, error handlers and routers together and
prepares the database schema on startup.  The module-level ``app`` is what
uvicorn serves::

    uvicorn garage_booking.main:app --reload
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from garage_booking.api import bookings
from garage_booking.core.config import settings
from garage_booking.core.errors import BookingError
from garage_booking.core.logger import logger, setup_logging
from garage_booking.services.db_service import Database

setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)


def create_app(database: Optional[Database] = None) -> FastAPI:
    database = database or Database(settings.DATABASE_PATH, timeout=settings.DB_TIMEOUT_SECONDS)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("🚀 Starting garage booking backend")
        app.state.database.init_schema()
        yield
        # Shutdown
        logger.info("🛑 Shutting down backend")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="0.1.0",
        lifespan=lifespan
    )
    app.state.database = database

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        headers = exc.headers
        message = exc.detail
        if exc.status_code == 405 and headers and "Allow" in headers:
            message = f"Method Not Allowed: Only {headers['Allow']} method is allowed"
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=headers,
        )

    # Global Exception Handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"🔥 UNHANDLED ERROR: {exc}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal Server Error"}
        )

    app.include_router(bookings.router, prefix=settings.API_PREFIX, tags=["Bookings"])

    @app.get("/")
    async def health_check():
        return {'status': 'active', 'time': datetime.now().isoformat()}

    @app.get("/health")
    async def health_check_std():
        return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("garage_booking.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
