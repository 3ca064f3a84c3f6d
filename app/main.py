import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.database import create_tables
from app.routers import (
    profile_router, skill_router,
    swap_request_router, feedback_router,
    admin_router, notification_router, realtime_router
)
from app.services.storage_service import STORAGE_ROOT, STATIC_URL_PREFIX

# --- Import every model module ---
# so SQLAlchemy registers them on startup.
from app.models import profile
from app.models import skill
from app.models import swap_request
from app.models import feedback
from app.models import admin_action
from app.models import notification


# Base logging setup
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="SkillSwap API")

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Uploaded profile photos
app.mount(STATIC_URL_PREFIX, StaticFiles(directory=STORAGE_ROOT), name="static")


@app.on_event("startup")
async def on_startup():
    if settings.AUTO_CREATE_TABLES:
        await create_tables()
        logger.info("Database tables ready")


# --- Root ---
@app.get("/")
def read_root():
    return {"status": "success", "message": "Backend is running!"}

# --- API routers ---
app.include_router(profile_router.router)
app.include_router(skill_router.router)
app.include_router(skill_router.my_skills_router)
app.include_router(swap_request_router.router)
app.include_router(feedback_router.router)
app.include_router(admin_router.router)
app.include_router(notification_router.router)
app.include_router(realtime_router.router)
