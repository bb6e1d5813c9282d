import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from league_backend.core.config import settings
from league_backend.core.database import init_db
from league_backend.core.exceptions import LeagueBackendError
from league_backend.core.scheduler import start_scheduler
from league_backend.api import api_router

# Setup logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Ensure database tables are created
    init_db()
    logger.info("✅ Database connected and tables created.")
    scheduler = start_scheduler()
    yield
    if scheduler:
        scheduler.shutdown(wait=False)


app = FastAPI(title="League Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LeagueBackendError)
async def league_backend_error_handler(request: Request, exc: LeagueBackendError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, **exc.details})


@app.get("/")
async def home():
    return {"message": "Welcome to League Backend"}

# Include all API routes
app.include_router(api_router)
