import logging
import time
from contextlib import asynccontextmanager

from arq import create_pool
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import ALLOWED_ORIGINS
from .database import Base, SessionLocal, engine
from .domain.admin.router import auth_router
from .domain.admin.router import router as admin_router
from .domain.emails.router import router as emails_router
from .domain.facilities.router import router as facilities_router
from .domain.interpreters.router import router as interpreters_router
from .domain.invoices.router import router as invoices_router
from .domain.jobs.router import router as jobs_router
from .domain.payables.router import router as payables_router
from .email_service import seed_default_templates
from .services.app_settings import seed_default_settings
from .worker import get_redis_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Quiet the HTTP and AWS client loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("botocore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Agency CRM API starting")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("✅ Schema ready")
    except Exception as e:
        # Concurrent uvicorn workers race on create_all
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Schema already present, skipping create")
        else:
            logger.error(f"❌ Schema creation failed: {e}")

    db = SessionLocal()
    try:
        seed_default_templates(db)
        seed_default_settings(db)
    except Exception as e:
        logger.warning(f"⚠️ Could not seed defaults: {e}")
        db.rollback()
    finally:
        db.close()

    yield
    logger.info("👋 Agency CRM API stopped")


app = FastAPI(title="ASL Agency CRM API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    A missing or malformed bearer header surfaces as 401; every other
    validation failure stays a 422 with field-level errors
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the raw exception objects pydantic attaches in ctx"""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    elapsed_ms = (time.time() - start) * 1000
    if response.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} - {response.status_code} ({elapsed_ms:.0f}ms)")
    return response


logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(facilities_router)
app.include_router(interpreters_router)
app.include_router(jobs_router)
app.include_router(invoices_router)
app.include_router(payables_router)
app.include_router(emails_router)


@app.get("/")
def root():
    return {"message": "ASL Agency CRM API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}


@app.get("/health/redis")
async def redis_health_check():
    """Check connectivity to the worker queue"""
    try:
        pool = await create_pool(get_redis_settings())
        try:
            start_time = time.time()
            await pool.ping()
            response_time = (time.time() - start_time) * 1000
        finally:
            await pool.close()
        return {
            "status": "healthy",
            "redis": {"connected": True, "response_time_ms": round(response_time, 2)},
        }
    except Exception as e:
        return {"status": "unhealthy", "redis": {"connected": False, "error": str(e)}}
