from fastapi import APIRouter
from app.api.v1.auth import router as auth_router
from app.api.v1.entries import router as entries_router
from app.api.v1.summaries import router as summaries_router
from app.api.v1.exercises import router as exercises_router
from app.api.v1.generate_summary import router as generate_summary_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(entries_router, prefix="/entries", tags=["entries"])
api_router.include_router(summaries_router, prefix="/summaries", tags=["summaries"])
api_router.include_router(exercises_router, prefix="/exercises", tags=["exercises"])
api_router.include_router(generate_summary_router, tags=["ai"])
