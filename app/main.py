import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.config.content_config import MESSAGES
from app.core.rate_limit import limiter
from app.modules.auth import routes as auth_routes
from app.modules.profiles import routes as profiles_routes
from app.modules.projects import routes as projects_routes
from app.modules.likes import routes as likes_routes
from app.modules.comments import routes as comments_routes
from app.modules.project_updates import routes as project_updates_routes
from app.modules.contact import routes as contact_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter


def error_body(detail) -> dict:
    """Every error is {"error": "..."}; auth errors also carry title/message/suggestion"""
    if isinstance(detail, dict):
        return {"error": detail.get("title") or detail.get("message") or MESSAGES["request_failed"], **detail}
    return {"error": str(detail)}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.debug("Request validation failed on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": MESSAGES["invalid_request"]})


# Sync: SlowAPIMiddleware calls this handler directly and returns its result
@app.exception_handler(RateLimitExceeded)
def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning("Rate limit exceeded on %s: %s", request.url.path, exc.detail)
    return JSONResponse(status_code=429, content={"error": MESSAGES["too_many_requests"]})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"error": MESSAGES["request_failed"]})
    return JSONResponse(status_code=500, content={"error": f"{MESSAGES['request_failed']}: {exc}"})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"Referrer-Policy", b"strict-origin-when-cross-origin"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(profiles_routes.router, prefix="/api/v1")
app.include_router(projects_routes.router, prefix="/api/v1")
app.include_router(projects_routes.users_router, prefix="/api/v1")
app.include_router(likes_routes.router, prefix="/api/v1")
app.include_router(comments_routes.router, prefix="/api/v1")
app.include_router(project_updates_routes.router, prefix="/api/v1")
app.include_router(contact_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup (%s)", settings.environment)
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("SUPABASE_URL / SUPABASE_KEY are not set; database calls will fail")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to Appli Farm API", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: extend here with a Supabase round trip if needed."""
    return {"status": "ready"}
