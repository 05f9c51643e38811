import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# ✅ Import All API Routes
from jobquest.api.routes import auth, jobs, profile, health, session_ws, pages
from jobquest.core import config
from jobquest.core.logging_config import sanitize_log_data, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL)
    settings = sanitize_log_data({
        "database_url": config.DATABASE_URL,
        "run_migrations": config.RUN_MIGRATIONS,
        "frontend_url": config.FRONTEND_URL,
        "cors_origins": config.CORS_ORIGINS,
        "imgbb_api_key": config.IMGBB_API_KEY,
        "google_client_id": config.GOOGLE_CLIENT_ID,
        "smtp_host": config.SMTP_HOST,
    })
    logger.info(f"Starting with configuration: {settings}")

    if config.RUN_MIGRATIONS:
        from jobquest.db.migrate import run_migrations
        run_migrations()
    else:
        from jobquest.db.init_db import init_db
        init_db()

    logger.info("JobQuest API started")
    yield


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="JobQuest API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(jobs.router)
app.include_router(profile.router)
app.include_router(health.router)
app.include_router(session_ws.router)

# Page views last: the catch-all renders access denied for unknown paths
app.include_router(pages.router)
