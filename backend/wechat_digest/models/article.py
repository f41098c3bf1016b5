from datetime import datetime
from typing import Optional, List
from uuid import UUID, uuid4
from sqlmodel import Field, SQLModel
from sqlalchemy import JSON, Text

from .enums import Sentiment, TaskStatus, TaskType

class Account(SQLModel, table=True):
    """WeChat public account, articles are grouped under it by display name"""
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(index=True, unique=True)
    display_name: str
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class Article(SQLModel, table=True):
    """Extracted article, the source URL is the natural dedup key"""
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    account_id: UUID = Field(foreign_key="account.id", index=True)
    url: str = Field(index=True, unique=True)

    title: str = Field(index=True)
    content: str = Field(sa_type=Text)
    author: Optional[str] = None
    publish_date: datetime = Field(index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class Summary(SQLModel, table=True):
    """AI summary of an article (one-to-one)"""
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    article_id: UUID = Field(foreign_key="article.id", index=True, unique=True)

    content: str = Field(sa_type=Text)
    key_points: List[str] = Field(default=[], sa_type=JSON)
    sentiment: Sentiment = Field(default=Sentiment.NEUTRAL)
    category: str

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class TaskLog(SQLModel, table=True):
    """One row per batch run"""
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    task_type: TaskType = Field(index=True)
    status: TaskStatus
    message: Optional[str] = None

    total: int = 0
    success_count: int = 0
    fail_count: int = 0

    started_at: datetime = Field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = None
