import logging
import uuid
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from . import config
from .api import router
from .domain import INVALID_AMOUNT, MESSAGES, LedgerError
from .logger_config import request_id_var, setup_logging
from .store import init_store

# ---- logging ----
setup_logging()
log = logging.getLogger("app")

# ---- status -> code mapping ----
STATUS_TO_CODE = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    415: "UNSUPPORTED_MEDIA_TYPE",
    422: "UNPROCESSABLE_ENTITY",
    500: "INTERNAL_SERVER_ERROR",
}
LEDGER_CODES = set(MESSAGES) | {INVALID_AMOUNT}

def code_for(status: int) -> str:
    return STATUS_TO_CODE.get(status, f"HTTP_{status}")

def error_response(status: int, message: str, code: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"ok": False, "error": code or code_for(status), "message": message},
    )

# ---- middleware ----
class EnforceJSONMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.method in {"POST", "PUT", "PATCH"}:
            ct = request.headers.get("content-type", "").split(";")[0].strip().lower()
            if ct != "application/json":
                log.warning("Unsupported media type: %s %s", request.method, request.url.path)
                return error_response(415, "Content-Type must be application/json")
        return await call_next(request)

class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            request_id_var.reset(token)

# ---- lifespan ----
@asynccontextmanager
async def lifespan(app: FastAPI):
    init_store()
    log.info("Casino ledger started")
    try:
        yield
    finally:
        log.info("Casino ledger stopped")

def create_app() -> FastAPI:
    app = FastAPI(title="Casino Ledger", lifespan=lifespan)

    # middleware (last added runs first)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(EnforceJSONMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # exception handlers
    @app.exception_handler(LedgerError)
    async def ledger_handler(request: Request, exc: LedgerError):
        log.warning("%s %s -> %s (%s)", request.method, request.url.path, exc.code, exc.message)
        return error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if not errors:
            return error_response(422, "Invalid request.")
        err = errors[0]
        if err.get("type") in LEDGER_CODES:
            log.warning("400 %s: %s %s", err["type"], request.method, request.url.path)
            return error_response(400, err.get("msg", ""), err["type"])
        loc = ".".join(str(x) for x in err.get("loc", []))
        detail = err.get("msg", "")
        msg = f"{loc}: {detail}" if loc else (detail or "Invalid request.")
        log.warning("422 validation: %s %s -> %s", request.method, request.url.path, msg)
        return error_response(422, msg)

    @app.exception_handler(OSError)
    async def storage_handler(request: Request, exc: OSError):
        log.error("%s %s -> 500 ledger write failed: %s", request.method, request.url.path, exc)
        return error_response(500, "Failed to save ledger.")

    @app.exception_handler(StarletteHTTPException)
    async def http_exc_handler(request: Request, exc: StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else code_for(exc.status_code).replace("_", " ").title()
        log.warning("%s %s -> %s (%s)", request.method, request.url.path, exc.status_code, detail)
        return error_response(exc.status_code, str(detail))

    # routers
    app.include_router(router)

    static_dir = config.static_dir()
    if os.path.isdir(static_dir):
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="public")
        log.info("Serving static files from %s", static_dir)
    return app

app = create_app()
