from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.routers import chat, summarize, transcribe, reports, organization
from app.config.security import SecurityConfig
from app.config.settings import settings
from app.database import init_db
from app.services.scheduler import maintenance_scheduler
from datetime import datetime, timezone
import logging
import platform

logging.basicConfig(
    level=settings.SERVER['log_level'].upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="LastNext24 API")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=SecurityConfig.CORS['allow_origins'],
    allow_methods=SecurityConfig.CORS['allow_methods'],
    allow_headers=SecurityConfig.CORS['allow_headers'],
)


# Every error leaves as {"success": false, "error": "..."}
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == 405:
        message = f"Method not allowed. {request.method} is not supported on {request.url.path}"
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": message},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    logger.info(f"Rejected request to {request.url.path}: {errors}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "; ".join(errors) or "Invalid request"},
    )


# Route registration
app.include_router(chat.router)
app.include_router(summarize.router)
app.include_router(transcribe.router)
app.include_router(reports.router)
app.include_router(organization.router)


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Create the storage table and start the maintenance scheduler"""
    print("Starting LastNext24 API...")
    init_db()
    maintenance_scheduler.start()
    print("Maintenance scheduler started successfully")
    if not settings.is_openai_configured():
        print("OPENAI_API_KEY is not set; chat, summarize and transcribe will fail")


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the maintenance scheduler when the application shuts down"""
    print("Shutting down LastNext24 API...")
    maintenance_scheduler.stop()
    print("Maintenance scheduler stopped")


# Root route
@app.get("/")
def read_root():
    return {"message": "LastNext24 API"}


@app.get("/health")
def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "openai": {
            "configured": settings.is_openai_configured(),
        },
        "environment": {
            "python_version": platform.python_version(),
            "platform": platform.system().lower(),
        },
        "scheduler": maintenance_scheduler.get_scheduler_status(),
    }
