# personal_manager/main.py
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from personal_manager.core.config import settings
from personal_manager.core.errors import StoreConnectionError, StoreError, ValidationError
from personal_manager.core.logging_config import setup_logging
from personal_manager.core.responses import error_response
from personal_manager.models.db import init_store
from personal_manager.routers import academics, auth, dashboard, finance, planner

setup_logging()
log = logging.getLogger(__name__)


# ---------- STORE BOOTSTRAP ----------
@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await init_store()
        app.state.store_available = True
        log.info("[startup] record store ready")
    except Exception:
        # the process stays up; /health reports the outage
        app.state.store_available = False
        log.exception("[startup] record store unavailable; API requests will get 503")
    yield
    log.info("[shutdown] %s stopping", settings.APP_NAME)


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)


# ---------- MIDDLEWARE ----------
@app.middleware("http")
async def store_guard(request: Request, call_next):
    if request.url.path.startswith(settings.API_PREFIX) and not getattr(app.state, "store_available", True):
        return error_response(StoreConnectionError("Database is not available"))
    return await call_next(request)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    log.info("[http] %s %s -> %d (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    max_age=settings.SESSION_MAX_AGE,
    https_only=settings.SESSION_HTTPS_ONLY,
)

# CORS for local dev (frontend may be on a different port)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- ERROR HANDLERS ----------
@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    if exc.status_code >= 500:
        log.error("[error] %s %s: %s", request.method, request.url.path, exc.message)
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in e.get("loc", ()) if p != "body"), "message": e.get("msg", "")}
        for e in exc.errors()
    ]
    return error_response(ValidationError("Invalid request data", details={"errors": errors}))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    log.exception("[error] unhandled exception on %s %s", request.method, request.url.path)
    return error_response(StoreError("An unexpected error occurred"))


# ---------- API ROUTERS ----------
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(academics.router, prefix=settings.API_PREFIX)
app.include_router(finance.router, prefix=settings.API_PREFIX)
app.include_router(planner.router, prefix=settings.API_PREFIX)
app.include_router(dashboard.router, prefix=settings.API_PREFIX)


# ---------- HEALTH ----------
@app.get("/health")
async def health():
    store = "available" if getattr(app.state, "store_available", True) else "unavailable"
    return {"ok": True, "app": settings.APP_NAME, "store": store}


# ---------- FRONTEND (Static) ----------
_frontend_dir = settings.FRONTEND_DIR
if _frontend_dir.exists():
    app.mount("/frontend", StaticFiles(directory=_frontend_dir, html=True), name="frontend")

    @app.get("/")
    async def root_redirect():
        return RedirectResponse(url="/frontend/")
else:
    # If no frontend folder, keep a simple root so "/" isn't 404
    @app.get("/")
    async def root_ok():
        return {"ok": True}
