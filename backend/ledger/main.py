"""FastAPI application entry point.

This module wires the transaction router into the app, configures CORS
and the API docs, and maps ledger errors onto JSON error responses. The
ASGI application object is ``ledger.main:app``.
"""

import os
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.openapi.utils import get_openapi
from ledger.routes import transactions
from ledger.errors import NotFoundError, ValidationError

# Basic logging configuration.  The log level can be controlled with an
# environment variable so deployments can adjust verbosity without code
# changes.
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, LOG_LEVEL))
logger = logging.getLogger(__name__)

# Path prefix added by a reverse proxy in front of the API, e.g. "/api".
API_PREFIX = os.getenv("API_PREFIX", "").rstrip("/")
CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

app = FastAPI(title="Transactions API", version="1.0.0", docs_url=None)


def custom_openapi():
    """Generate an OpenAPI schema that is aware of the proxy prefix."""

    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description="Create, list, update and delete ledger transactions.",
        routes=app.routes,
    )
    if API_PREFIX:
        openapi_schema["servers"] = [{"url": API_PREFIX}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# CORS setup
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(transactions.router)


@app.get("/docs", include_in_schema=False)
async def custom_swagger_ui_html():
    """Serve the interactive docs with the correct API prefix."""

    # Behind a proxy the schema lives under the prefix, not at /openapi.json.
    return get_swagger_ui_html(
        openapi_url=f"{API_PREFIX}/openapi.json", title="Transactions API Docs"
    )


@app.get("/")
async def read_root():
    return {"message": "Welcome to the Transactions API"}


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON or a body that is not a JSON object."""
    return JSONResponse(
        status_code=400, content={"error": "Request body must be a JSON object"}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all exception handler that logs the stack trace once."""
    logger.exception("Unhandled error during request %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "An unexpected error occurred"},
    )
