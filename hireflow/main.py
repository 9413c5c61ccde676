"""
HireFlow - Main Application

FastAPI backend with:
- MongoDB for all records
- DeepSeek AI for mock interviews
- JWT authentication
- In-app / SendGrid notifications for application decisions
- Local disk storage for uploads, served from /uploads

Run: uvicorn hireflow.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from pymongo.errors import PyMongoError

from hireflow.api.routes import api_router
from hireflow.core.config import get_settings
from hireflow.core.exceptions import HireFlowException
from hireflow.core.logging_config import configure_logging
from hireflow.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()
configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning(f"MongoDB index initialization failed: {e}")
    yield


# Create FastAPI app
app = FastAPI(
    title="HireFlow",
    description="""
    Connects job candidates with HR recruiters.

    ## Features
    - **Authentication**: JWT-based auth for candidates and HR recruiters
    - **Hiring posts**: HR job postings
    - **Applications**: Apply, review, shortlist or reject
    - **Notifications**: One decision message per status change
    - **Mock interviews**: AI-generated questions and feedback
    - **Uploads**: Public file URLs for avatars, images and resumes
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")

# Uploaded files; the directory is created on first upload
app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


@app.exception_handler(HireFlowException)
async def hireflow_exception_handler(request: Request, exc: HireFlowException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"success": False, "detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing request data is a 400."""
    return JSONResponse(
        status_code=400,
        content={"success": False, "detail": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(PyMongoError)
async def mongo_exception_handler(request: Request, exc: PyMongoError):
    logger.error(f"{request.method} {request.url.path} database error: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "detail": "Database error"})


@app.get("/health", tags=["Health"])
def health_check():
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected",
        "notificationChannel": settings.notification_channel
    }
