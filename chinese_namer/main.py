import os
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .generator import NameGenerator
from .llm_service import ModelClient
from .logging_setup import setup_logging
from .models import ErrorResponse, GenerateNamePayload, GenerateNameResponse, HealthResponse
from .rate_limit import RateLimitExceeded, RateLimitStatus, enforce_rate_limit
from .validator import NameValidationError, validate_name

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Chinese name generator service started")
    logger.info(f"Address: http://localhost:{settings.port}")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"AI model: {settings.llm_model}")
    if not settings.siliconflow_api_key:
        logger.warning("SILICONFLOW_API_KEY is not set; every request will be served fallback names")
    yield
    logger.info("Chinese name generator service shutting down")


app = FastAPI(
    title="Chinese Name Generator",
    description="""
    ## Chinese Name Suggestion Service

    Suggests three culturally appropriate Chinese names, with pinyin and
    bilingual meanings, for a Latin-alphabet personal name.
    """,
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Serve static files for frontend
static_dir = os.path.join(os.path.dirname(__file__), "static")
if not os.path.exists(static_dir):
    os.makedirs(static_dir)

app.mount("/static", StaticFiles(directory=static_dir), name="static")


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _error(status_code: int, message: str, error: str, headers: Dict[str, str] = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


@lru_cache()
def get_name_generator() -> NameGenerator:
    return NameGenerator(ModelClient(get_settings()))


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return _error(429, str(exc), "RATE_LIMIT_EXCEEDED", headers=exc.status.headers())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"[API] Rejected malformed request body on {request.url.path}")
    return _error(400, NameValidationError.message, "INVALID_INPUT")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _error(404, "The requested resource does not exist", "NOT_FOUND")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail), "error": "HTTP_ERROR"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"[API] Server error on {request.url.path}: {exc}")
    return _error(500, "Internal server error", "INTERNAL_SERVER_ERROR")


@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def read_root():
    """Serve the main frontend application."""
    static_file_path = os.path.join(static_dir, "index.html")
    if os.path.exists(static_file_path):
        return FileResponse(static_file_path)
    else:
        return HTMLResponse("<h1>Frontend not found</h1><p>Place index.html in the static directory.</p>", status_code=404)


@app.post(
    "/generate-name",
    response_model=GenerateNameResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["Primary API"],
    summary="Suggest three Chinese names",
)
@app.post("/api/generate-name", include_in_schema=False)
async def generate_name(
    payload: GenerateNamePayload,
    rate_limit: RateLimitStatus = Depends(enforce_rate_limit),
    generator: NameGenerator = Depends(get_name_generator),
):
    """
    Validate the name, ask the model for three suggestions and return them.
    Model failures never surface here: they are answered with fallback names.
    """
    try:
        candidate = validate_name(payload.englishName)
    except NameValidationError as e:
        logger.info(f"[API] Invalid name {payload.englishName!r}: {e.message}")
        return _error(400, e.message, "INVALID_INPUT", headers=rate_limit.headers())

    try:
        outcome = await generator.generate(candidate)
    except Exception as e:
        # Log the full error on the server; the client only gets a generic message.
        logger.exception(f"[API] Name generation failed for '{candidate}': {e}")
        return _error(500, "An error occurred while generating Chinese names", "GENERATION_ERROR")

    return GenerateNameResponse(
        message="Chinese names generated successfully",
        names=outcome.names,
        englishName=candidate,
        timestamp=_timestamp(),
    )


@app.get("/health", response_model=HealthResponse, tags=["System"], summary="Health Check")
@app.get("/api/health", response_model=HealthResponse, include_in_schema=False)
async def health_check():
    """Simple health check endpoint"""
    return HealthResponse(message="Service is running", timestamp=_timestamp(), version=settings.app_version)


@app.get("/docs-info", tags=["System"], summary="API Information")
async def docs_info():
    """Get information about available endpoints and their usage"""
    return {
        "primary_endpoint": "/generate-name",
        "description": "POST {\"englishName\": \"...\"} to /generate-name for three Chinese name suggestions",
        "documentation": "/docs",
        "frontend": "/",
        "health": "/health",
    }


def run() -> None:
    import uvicorn

    setup_logging(settings.log_file)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
