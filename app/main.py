import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.encoders import jsonable_encoder

from app.core.config import settings
from app.core.database import db_handle
from app.routers import notification_router, media_router, chatwoot_router

# --- Import every model module ---
# so SQLAlchemy registers all mappers at startup.
from app.models import tenant
from app.models import user
from app.models import alert
from app.models import notification
from app.models import contact
from app.models import media_file


logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One database handle for the whole process
    db_handle.connect()
    logger.info("Application started")
    yield
    await db_handle.dispose()
    logger.info("Application stopped")


app = FastAPI(title="Tenant Inbox API", lifespan=lifespan)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handling ---
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Bad input is a 400 across the API"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# --- Root ---
@app.get("/")
def read_root():
    return {"status": "success", "message": "Backend is running!"}


# --- API routers ---
app.include_router(notification_router.router)
app.include_router(media_router.router)
app.include_router(chatwoot_router.router)

# Uploaded media is served as static files
os.makedirs(settings.MEDIA_UPLOAD_DIR, exist_ok=True)
app.mount(settings.MEDIA_URL_PREFIX, StaticFiles(directory=settings.MEDIA_UPLOAD_DIR, check_dir=False), name="uploads")
