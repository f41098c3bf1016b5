from fastapi import APIRouter

from wechat_digest.api.routes import batch_summarize, health

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(batch_summarize.router, prefix="/batch-summarize", tags=["batch-summarize"])
