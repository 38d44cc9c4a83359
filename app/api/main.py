"""
Payments API - FastAPI Application

Cancels booking payments at the payment app that took them, through the
payment provider registry.

Usage:
    uvicorn app.api.main:app --reload --host 0.0.0.0 --port 8000

Docs:
    http://localhost:8000/docs (Swagger UI)
"""

from dotenv import load_dotenv
import os

load_dotenv()  # load .env from current working directory (project root)

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import asyncio
import logging
import time

from app.core.exceptions import register_exception_handlers
from app.core.logging import setup_logger

setup_logger()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown."""
    logger.info("Payments API starting...")

    try:
        from app.database.session import async_engine
        from sqlalchemy import text
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection OK")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")

    # Load provider modules in a worker thread so imports never block requests
    from app.payments import get_registry
    registry = get_registry()
    loaded = await asyncio.to_thread(registry.preload)
    logger.info(f"Payment providers installed: {registry.keys()}, loaded: {loaded}")

    logger.info("API ready")
    yield

    logger.info("Payments API shutting down...")
    from app.database.session import async_engine
    await async_engine.dispose()


app = FastAPI(
    title="Payments API",
    description="Dispatches payment operations to installed payment apps.",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS – allowed frontend origins (.env CORS_ORIGINS, comma-separated)
_DEFAULT_CORS = "http://localhost:3000,http://127.0.0.1:3000"
_CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", _DEFAULT_CORS).split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} [{response.status_code}] ({process_time:.3f}s)")
    response.headers["X-Process-Time"] = str(process_time)
    return response


register_exception_handlers(app)


@app.exception_handler(Exception)
async def any_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "message": "Check server logs."},
    )


@app.get("/", tags=["Health"])
async def root():
    return {
        "name": "Payments API",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", tags=["Health"])
async def health_check():
    health = {"status": "healthy", "components": {"api": "ok"}}
    try:
        from app.database.session import async_engine
        from sqlalchemy import text
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        health["components"]["database"] = "ok"
    except Exception as e:
        health["status"] = "degraded"
        health["components"]["database"] = f"error: {str(e)}"
    return health


from app.api.routers import payments

app.include_router(payments.router, prefix="/payments", tags=["Payments"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.api.main:app", host="0.0.0.0", port=8000, reload=True)
