"""
Article related schemas
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, model_validator

class ExtractionResult(BaseModel):
    """單篇微信文章的提取結果，content 與 error 恰有其一"""
    url: str
    title: str
    content: str = ""
    author: Optional[str] = None
    publish_date: Optional[datetime] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_content_or_error(self) -> "ExtractionResult":
        if bool(self.content) == bool(self.error):
            raise ValueError("exactly one of content or error must be set")
        return self

    @property
    def failed(self) -> bool:
        return self.error is not None
