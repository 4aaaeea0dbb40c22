import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text

from .config import settings
from .database import get_db, init_db
from .core.exception import CustomException
from .core.middleware import (
    EdgeAuthMiddleware,
    ExceptionHandlingMiddleware,
    custom_exception_handler,
)
from .schemas.result import Result, Error, ErrorCategory

# Import routes
from .api.v1 import auth, user, associations, applications, events

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Local development creates the sqlite schema on the fly
    if settings.DEBUG:
        init_db()
    yield


app = FastAPI(
    lifespan=lifespan,
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    description="Weave API - associations, membership applications and events",
)

app.add_exception_handler(CustomException, custom_exception_handler)

# Edge interceptor sits inside the exception middleware so its failures are rendered too
app.add_middleware(EdgeAuthMiddleware)
app.add_middleware(ExceptionHandlingMiddleware, log_internal_errors=settings.DEBUG)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(
    auth.router, prefix=f"{settings.API_V1_STR}/auth", tags=["authentication"]
)
app.include_router(user.router, prefix=f"{settings.API_V1_STR}/users", tags=["users"])
app.include_router(
    associations.router,
    prefix=f"{settings.API_V1_STR}/associations",
    tags=["associations"]
)
app.include_router(
    applications.router,
    prefix=f"{settings.API_V1_STR}/applications",
    tags=["applications"]
)
app.include_router(
    events.router,
    prefix=f"{settings.API_V1_STR}/events",
    tags=["events"]
)


@app.get("/", response_model=Result[dict])
async def root():
    """Root endpoint with API information"""
    return Result.successful(
        data={
            "message": f"Welcome to {settings.PROJECT_NAME} API",
            "version": settings.VERSION,
            "docs": f"{settings.API_V1_STR}/docs",
            "status": "online",
        }
    )


@app.get("/health", response_model=Result[dict])
async def health_check(db: Session = Depends(get_db)):
    """Health check endpoint for monitoring"""
    try:
        # Test database connection
        db.execute(text("SELECT 1"))
        return Result.successful(data={"status": "healthy", "database": "connected"})
    except Exception as e:
        return Result.failure(
            error=Error(
                message=f"Health check failed: {str(e)}",
                status_code=503,
                category=ErrorCategory.INTERNAL,
            )
        )
