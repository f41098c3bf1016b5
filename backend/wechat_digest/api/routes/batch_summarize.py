"""
Batch summarize routes
"""

import math
from typing import Optional
from fastapi import APIRouter, HTTPException, Query
import logging

from wechat_digest.api.deps import BatchServiceDep, SessionDep
from wechat_digest.core.exceptions import BatchValidationError
from wechat_digest.schemas.batch import (
    BatchSummarizeRequest,
    BatchSummarizeResponse,
    HistoryItem,
    HistoryResponse,
    Pagination,
)
from wechat_digest.schemas.summary import SummaryResult

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("", response_model=BatchSummarizeResponse, response_model_exclude_none=True)
async def batch_summarize(
    payload: BatchSummarizeRequest,
    service: BatchServiceDep,
    db: SessionDep,
) -> BatchSummarizeResponse:
    """
    Extract and summarize a batch of WeChat article URLs

    Args:
        payload: URLs (at most 20) and optional account name
        service: Batch summarize service
        db: Database session

    Returns:
        BatchSummarizeResponse: Per URL results and success/fail counts

    Raises:
        HTTPException(400): If the URL list is empty or too long
    """
    try:
        report = await service.summarize_urls(db, payload.urls, payload.account_name)
    except BatchValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return BatchSummarizeResponse(**report.model_dump())

@router.get("/history", response_model=HistoryResponse)
async def batch_history(
    service: BatchServiceDep,
    db: SessionDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    account_name: Optional[str] = Query(default=None, alias="accountName"),
) -> HistoryResponse:
    """
    Get previously batch imported articles with their summaries
    """
    rows, total = await service.get_history(db, page=page, limit=limit, account_name=account_name)

    data = [
        HistoryItem(
            id=article.id,
            title=article.title,
            url=article.url,
            author=article.author,
            publish_date=article.publish_date,
            created_at=article.created_at,
            summary=SummaryResult(
                summary=summary.content,
                key_points=summary.key_points,
                sentiment=summary.sentiment,
                category=summary.category,
            ) if summary else None,
        )
        for article, summary in rows
    ]

    return HistoryResponse(
        data=data,
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit),
        ),
    )
