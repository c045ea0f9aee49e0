"""
HTTP API
Every endpoint answers with the envelope {success, data?, error?, aiResponse?}.
"""

from dotenv import load_dotenv
load_dotenv()

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import settings
from .errors import FlowgenError
from .routers import ai, catalog, conversations, workflows

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================================
# App Configuration
# ============================================================================

app = FastAPI(
    title="flowgen",
    version=__version__,
    description="Natural-language to n8n workflow generator",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(workflows.router, prefix="/api", tags=["workflows"])
app.include_router(conversations.router, prefix="/api", tags=["conversations"])
app.include_router(catalog.router, prefix="/api", tags=["catalog"])
app.include_router(ai.router, prefix="/api", tags=["ia"])


@app.get("/api/healthz", tags=["health"])
def healthz():
    return {"success": True, "data": {"status": "ok", "provider": settings.ia_provider}}


# ============================================================================
# Error envelope
# ============================================================================

def _envelope(status_code: int, message: str, ai_response: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "error": message}
    if ai_response:
        content["aiResponse"] = ai_response
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(FlowgenError)
async def flowgen_error_handler(request: Request, exc: FlowgenError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    # only GenerationFailure carries a raw model reply
    return _envelope(exc.status_code, exc.message, getattr(exc, "raw_response", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return _envelope(400, "Invalid request")
    first = errors[0]
    message = str(first.get("msg", "Invalid request"))
    if message.startswith("Value error, "):
        return _envelope(400, message[len("Value error, "):])
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return _envelope(400, f"{field}: {message}" if field else message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _envelope(exc.status_code, str(exc.detail))
