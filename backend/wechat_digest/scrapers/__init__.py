from .base import BaseScraper
from .wechat import WeChatArticleScraper
from .batch_fetcher import BatchFetcher

__all__ = [
    'BaseScraper',
    'WeChatArticleScraper',
    'BatchFetcher',
]
