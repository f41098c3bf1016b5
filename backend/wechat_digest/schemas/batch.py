"""
Batch summarize schemas
"""

from typing import List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .summary import SummaryResult

class CamelModel(BaseModel):
    """JSON 欄位使用 camelCase"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class BatchSummarizeRequest(CamelModel):
    """批量總結請求"""
    urls: List[str] = Field(default_factory=list)
    account_name: Optional[str] = None

class BatchResultItem(CamelModel):
    """單個 URL 的處理結果"""
    url: str
    title: str
    summary: Optional[SummaryResult] = None
    error: Optional[str] = None

class BatchReport(CamelModel):
    """一次批量處理的統計"""
    results: List[BatchResultItem] = Field(default_factory=list)
    total_processed: int = 0
    success_count: int = 0
    fail_count: int = 0

class BatchSummarizeResponse(BatchReport):
    success: bool = True

class HistoryItem(CamelModel):
    """歷史記錄中的文章"""
    id: UUID
    title: str
    url: str
    author: Optional[str] = None
    publish_date: Optional[datetime] = None
    created_at: datetime
    summary: Optional[SummaryResult] = None

class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int

class HistoryResponse(CamelModel):
    success: bool = True
    data: List[HistoryItem]
    pagination: Pagination
