from enum import Enum

class Sentiment(str, Enum):
    """文章情感傾向"""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"

class TaskStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"

class TaskType(str, Enum):
    BATCH_SUMMARIZE = "batch_summarize"
