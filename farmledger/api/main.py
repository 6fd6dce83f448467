from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from starlette.exceptions import HTTPException
import time

from farmledger.api.config import settings
from farmledger.api.core.database import Database, get_database
from farmledger.api.core.errors import AppError, error_body
from farmledger.api.core.security import get_current_user_id
from farmledger.utils.logger import get_logger, setup_logging

setup_logging(log_level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR)
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info(f"Starting {settings.APP_NAME}...")
    database = Database(settings)
    app.state.database = database

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connected")
    except Exception as e:
        # The pool reconnects on demand; requests fail until the database is reachable
        logger.error(f"Database connection failed: {e}")

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await database.dispose()


# Initialize FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Crop, livestock and sales bookkeeping with profit/loss and ROI reporting",
    version=VERSION,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# GZip compression for responses
app.add_middleware(GZipMiddleware, minimum_size=1000)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"{request.method} {request.url.path} {response.status_code} - {process_time:.3f}s")
    return response


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"Invalid {location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    message = _describe_validation_error(exc)
    logger.warning(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(status_code=400, content=error_body(message))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    message = str(exc) if settings.DEBUG else "Internal server error"
    return JSONResponse(status_code=500, content=error_body(message))


# Health check endpoint
@app.get("/health", tags=["System"])
async def health_check(request: Request):
    """Health check endpoint for monitoring"""
    db_status = "connected"
    try:
        database = get_database(request)
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Health check database query failed: {e}")
        db_status = "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "version": VERSION,
        "database": db_status,
    }


API_PREFIX = settings.API_PREFIX

# Import routers
from farmledger.api.routers import (  # noqa: E402
    auth,
    crops,
    expenses,
    finance,
    financial_summary,
    flocks,
    livestock,
    livestock_expenses,
    livestock_reports,
    medical_treatments,
    production_records,
    reports,
    sales,
)

app.include_router(
    auth.router,
    prefix=f"{API_PREFIX}/auth",
    tags=["Authentication"]
)

# Every other router requires a bearer token
PROTECTED_ROUTERS = [
    (crops.router, "crops", "Crops"),
    (expenses.router, "expenses", "Expenses"),
    (flocks.router, "flocks", "Flocks"),
    (livestock.router, "livestock", "Livestock"),
    (livestock_expenses.router, "livestock-expenses", "Livestock Expenses"),
    (medical_treatments.router, "medical-treatments", "Medical Treatments"),
    (production_records.router, "production-records", "Production Records"),
    (sales.router, "sales", "Sales"),
    (finance.router, "finance", "Finance"),
    (financial_summary.router, "financial-summary", "Financial Summary"),
    (livestock_reports.router, "livestock-reports", "Livestock Reports"),
    (reports.router, "reports", "Reports"),
]

for router, path, tag in PROTECTED_ROUTERS:
    app.include_router(
        router,
        prefix=f"{API_PREFIX}/{path}",
        tags=[tag],
        dependencies=[Depends(get_current_user_id)],
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """API root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "docs": "/api/docs",
        "version": VERSION,
        "endpoints": {
            "health": "/health",
            "docs": "/api/docs",
            "auth": f"{API_PREFIX}/auth",
            **{path: f"{API_PREFIX}/{path}" for _, path, _ in PROTECTED_ROUTERS},
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "farmledger.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
