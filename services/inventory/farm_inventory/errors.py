"""
Error responses for the Farm Inventory service.

Every failure reaching a client is a JSON body with an "error" field. Stack
traces only ever go to the server log.
"""
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

AVAILABLE_ROUTES = [
    "GET /",
    "GET /health",
    "GET /api/items",
    "POST /api/items",
    "GET /api/items/low-stock",
    "GET /api/items/:id",
    "PUT /api/items/:id",
    "DELETE /api/items/:id",
]


class DatabaseUnavailable(Exception):
    """Raised by the availability gate when MongoDB is not connected."""


def database_unavailable_handler(request: Request, exc: DatabaseUnavailable) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "Database unavailable",
            "message": "MongoDB is not currently connected. Database features are unavailable in fallback mode.",
            "database": "disconnected",
        },
    )


def route_not_found(request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Not Found",
            "message": f"Route {request.method} {request.url.path} not found",
            "availableRoutes": AVAILABLE_ROUTES,
        },
    )


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Raised by the router itself when no route matched the path or method
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED or (
        exc.status_code == status.HTTP_404_NOT_FOUND and "endpoint" not in request.scope
    ):
        return route_not_found(request)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0])
        problems.append(f"{field}: {err['msg']}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": "; ".join(problems)})


def store_exception_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Database operation failed"},
    )


def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Error occurred on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "status": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DatabaseUnavailable, database_unavailable_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PyMongoError, store_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
