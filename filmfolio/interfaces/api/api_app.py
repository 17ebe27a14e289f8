"""
FastAPI application setup and configuration.

Architecture:
- Public read-only routes under /api
- Admin routes under /api/admin (session auth, except login/logout)
- Domain errors (FilmfolioError) map to {"error": {"code", "message"}}
  with a status code chosen by error code; messages never carry paths
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filmfolio.__version__ import __version__
from filmfolio.app import Application, application
from filmfolio.helpers.exceptions import FilmfolioError
from filmfolio.helpers.logging_helper import sanitize_exception_message
from filmfolio.interfaces.api.web import router as web_router

STATUS_BY_CODE = {
    "not_found": 404,
    "validation_error": 400,
    "unauthenticated": 401,
    "invalid_credentials": 401,
    "conflict": 409,
    "io_error": 500,
}


def error_payload(code: str, message: str) -> dict[str, dict[str, str]]:
    return {"error": {"code": code, "message": message}}


def create_api_app(application: Application, manage_lifecycle: bool = False) -> FastAPI:
    """
    Build the FastAPI app around an Application container.

    Args:
        application: DI container the routes resolve services from
        manage_lifecycle: Start/stop the Application with the ASGI lifespan
            (start.py starts it itself, tests usually let this do it)
    """

    @asynccontextmanager
    async def lifespan(_app_instance: FastAPI):
        if manage_lifecycle:
            application.start()
        logging.info("[API] FastAPI starting")
        try:
            yield
        finally:
            logging.info("[API] FastAPI shutting down...")
            application.stop()

    api = FastAPI(title="filmfolio admin", version=__version__, lifespan=lifespan)
    api.state.application = application

    @api.exception_handler(FilmfolioError)
    async def domain_error_handler(_request: Request, exc: FilmfolioError):
        status = STATUS_BY_CODE.get(exc.code, 500)
        if status >= 500:
            logging.error(f"[API] {exc.code}: {exc.message}")
        return JSONResponse(status_code=status, content=error_payload(exc.code, exc.message))

    @api.exception_handler(RequestValidationError)
    async def request_validation_handler(_request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{location}: {first.get('msg', 'invalid request')}" if location else "invalid request"
        return JSONResponse(status_code=400, content=error_payload("validation_error", message))

    @api.exception_handler(StarletteHTTPException)
    async def http_error_handler(_request: Request, exc: StarletteHTTPException):
        code = {401: "unauthenticated", 404: "not_found", 405: "method_not_allowed"}.get(exc.status_code, "error")
        return JSONResponse(status_code=exc.status_code, content=error_payload(code, str(exc.detail)))

    @api.exception_handler(Exception)
    async def exception_handler(_request: Request, exc: Exception):
        message = sanitize_exception_message(exc, "internal server error")
        return JSONResponse(status_code=500, content=error_payload("internal_error", message))

    @api.get("/api/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    api.include_router(web_router)
    return api


api_app = create_api_app(application)
