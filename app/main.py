from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi_limiter import FastAPILimiter
import redis.asyncio as redis
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.core.exceptions import PortalError
from app.core.logging import configure_logging
from app.routers import admin, auth, locations, properties, subscriptions
from app.config import settings
import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from app.services.subscription_expiry import deactivate_expired_subscriptions

configure_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(title="Broker Portal API")

origins = [origin.strip() for origin in settings.CORS_ORIGINS.split(",")]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

scheduler = AsyncIOScheduler()

@app.on_event("startup")
async def startup():
    if settings.RATE_LIMIT_ENABLED:
        redis_connection = redis.from_url(settings.REDIS_URL, encoding="utf-8", decode_responses=True)
        await FastAPILimiter.init(redis_connection)

    if settings.SCHEDULER_ENABLED:
        scheduler.add_job(deactivate_expired_subscriptions, "interval", hours=1)
        scheduler.start()
        logger.info("Scheduler started")

@app.on_event("shutdown")
async def shutdown():
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler shut down")

@app.middleware("http")
async def log_requests(request: Request, call_next):
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        path=request.url.path,
        method=request.method,
        client_host=request.client.host if request.client else None,
    )
    response = await call_next(request)
    logger.info("Request completed", status_code=response.status_code)
    return response

def envelope(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": False, "message": message, **extra}),
    )

@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.error("request_failed", error=exc.message, error_type=type(exc).__name__)
    else:
        logger.info("request_rejected", status_code=exc.status_code, error=exc.message)
    extra = {"fields": exc.fields} if getattr(exc, "fields", None) else {}
    return envelope(exc.status_code, exc.message, **extra)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = []
    for error in exc.errors():
        # Skip the "body"/"query" prefix and the union tag pydantic inserts
        name = ".".join(str(part) for part in error["loc"][1:] if part not in ("new", "resale", "rental"))
        if name and name not in fields:
            fields.append(name)
    if fields:
        message = f"Validation error: {', '.join(fields)}"
    else:
        message = exc.errors()[0]["msg"] if exc.errors() else "Validation error"
    return envelope(status.HTTP_400_BAD_REQUEST, message, fields=fields)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return envelope(exc.status_code, str(exc.detail))

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("unhandled_exception", error=str(exc), error_type=type(exc).__name__, exc_info=exc)
    message = str(exc) if settings.EXPOSE_ERROR_DETAILS else "Internal server error"
    return envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, message)

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(properties.router, prefix="/api/properties", tags=["Properties"])
app.include_router(subscriptions.router, prefix="/api/subscriptions", tags=["Subscriptions"])
app.include_router(locations.router, prefix="/api/locations", tags=["Locations"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

@app.get("/health")
def health_check():
    return {"status": "ok"}
