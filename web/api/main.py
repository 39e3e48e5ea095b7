"""FastAPI talent scout API - JSON endpoints, uploaded media and the built web UI."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

import config
from talent.errors import AppError, ValidationError
from talent.models import init_db
from talent.models.base import async_session_factory
from talent.seed import DEMO_PASSWORD, seed_demo_data
from talent.storage import SQLStorage
from web.auth import hash_password

from web.api.analytics_routes import router as analytics_router
from web.api.application_routes import router as application_router
from web.api.auth_routes import router as auth_router
from web.api.interest_routes import router as interest_router
from web.api.message_routes import router as message_router
from web.api.profile_routes import router as profile_router
from web.api.trial_routes import router as trial_router
from web.api.video_routes import VIDEO_SUBDIR, router as video_router

logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger("talent.api")

_LOC_PREFIXES = {"body", "query", "path", "header", "cookie"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    if config.SEED_DEMO_DATA:
        async with async_session_factory() as session:
            await seed_demo_data(SQLStorage(session), hash_password(DEMO_PASSWORD))
    yield


app = FastAPI(title="Talent Scout API", lifespan=lifespan)


# --- Error envelopes: always {"message": ...} ---


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    content = {"message": exc.message}
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _error_path(loc) -> str:
    parts = list(loc)
    if parts and parts[0] in _LOC_PREFIXES:
        parts = parts[1:]
    return ".".join(str(p) for p in parts) or str(loc[0] if loc else "")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"path": _error_path(e.get("loc", ())), "message": e.get("msg", "").removeprefix("Value error, ")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Validation failed", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# SPA fallback: serve index.html for non-API 404s so client-side routes work
_frontend_dist = Path(__file__).resolve().parent.parent.parent / "frontend" / "dist"


class SPAFallbackMiddleware(BaseHTTPMiddleware):
    """Serve index.html for 404s outside /api and /uploads (enables /dashboard, /messages, etc.)."""

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        path = request.url.path
        if response.status_code == 404 and not path.startswith(("/api", "/uploads")):
            index_path = _frontend_dist / "index.html"
            if index_path.exists():
                return FileResponse(str(index_path), media_type="text/html")
        return response


if _frontend_dist.exists():
    app.add_middleware(SPAFallbackMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(video_router)
app.include_router(trial_router)
app.include_router(application_router)
app.include_router(message_router)
app.include_router(interest_router)
app.include_router(analytics_router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


# Uploaded media, e.g. /uploads/videos/<name>
(Path(config.UPLOAD_DIR) / VIDEO_SUBDIR).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(config.UPLOAD_DIR)), name="uploads")

# Serve built frontend (SPA fallback handled by SPAFallbackMiddleware above)
if _frontend_dist.exists():
    app.mount("/", StaticFiles(directory=str(_frontend_dist), html=True), name="frontend")
