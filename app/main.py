import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.core import init_database, settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="TrainLog - weekly training log with AI summaries")

# Bearer tokens only, no cookies: credentials are not needed for CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    await init_database()
    logger.info("Application started")


@app.get("/")
async def root():
    return {
        "app": "TrainLog",
        "message": "Weekly training log with AI summaries",
        "links": {
            "entries": "/api/v1/entries",
            "summaries": "/api/v1/summaries",
            "exercises": "/api/v1/exercises",
            "docs": "/docs",
        }
    }
