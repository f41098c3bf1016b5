"""
Summary related schemas
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from wechat_digest.models.enums import Sentiment

DEFAULT_CATEGORY = "未分类"

class SummaryResult(BaseModel):
    """AI 總結結果，欄位永遠完整"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: str = ""
    key_points: List[str] = Field(default_factory=list)
    sentiment: Sentiment = Sentiment.NEUTRAL
    category: str = DEFAULT_CATEGORY

class SummaryOutcome(BaseModel):
    """批量總結中單篇文章的結果：成功時 result 有值，失敗時 error 有值"""
    result: Optional[SummaryResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is not None
