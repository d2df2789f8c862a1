import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from podcast_api.config import settings
from podcast_api.database import engine, init_models
from podcast_api.middleware import TimingMiddleware
from podcast_api.routers import podcasts, users

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.AUTO_CREATE_TABLES:
        await init_models()
        logger.info("Database tables ensured")
    yield
    # Shutdown
    await engine.dispose()

app = FastAPI(
    title="Podcast API",
    description="Accounts and a podcast/episode catalog",
    version="1.0.0",
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(users.router)
app.include_router(podcasts.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
