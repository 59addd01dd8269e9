"""
Job Portal - Main Application

FastAPI backend with:
- MongoDB for users, companies, jobs and applications
- JWT session carried in an http-only cookie
- One access gate deciding every role and ownership check

Run: uvicorn jobportal.main:app --reload
"""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobportal.api.routes import api_router
from jobportal.db.repository import EntityRepository, get_repository
from jobportal.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
log = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Job Portal",
    description="""
    Recruiters post jobs and review applicants; applicants browse and apply.

    ## Features
    - **Users**: register, login/logout with a session cookie, profile
    - **Companies**: recruiters register and manage their companies
    - **Jobs**: public listing and search, recruiter-owned create/update/delete
    - **Applications**: one per job per applicant, pending -> accepted | rejected

    Every response uses the envelope `{success, message?, ...data}`.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS - trusted origins come from configuration; cookies need credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render every HTTP error inside the {success: false, message} envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else "Invalid request"
    return JSONResponse(status_code=422, content={"success": False, "message": message})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        get_repository().ensure_indexes()
        log.info("MongoDB indexes initialized")
    except Exception as e:
        log.error(f"MongoDB index initialization failed: {e}")


@app.get("/health", tags=["Health"])
async def health_check(repo: EntityRepository = Depends(get_repository)):
    """Detailed health check."""
    return {
        "success": True,
        "status": "healthy",
        "mongodb": "connected" if repo.ping() else "disconnected"
    }
