"""
Dependencies for API routes
"""

from typing import Annotated
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from wechat_digest.db.session import get_session
from wechat_digest.services.batch_summarize_service import BatchSummarizeService

def get_batch_service(request: Request) -> BatchSummarizeService:
    """Batch service built once in the application lifespan"""
    return request.app.state.batch_service

# 定義可重用的依賴
SessionDep = Annotated[AsyncSession, Depends(get_session)]
BatchServiceDep = Annotated[BatchSummarizeService, Depends(get_batch_service)]
