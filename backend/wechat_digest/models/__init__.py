from sqlmodel import SQLModel

from .article import (
    Account,
    Article,
    Summary,
    TaskLog,
)
from .enums import (
    Sentiment,
    TaskStatus,
    TaskType,
)

__all__ = [
    # Tables
    'Account',
    'Article',
    'Summary',
    'TaskLog',

    # Enums
    'Sentiment',
    'TaskStatus',
    'TaskType',
]
