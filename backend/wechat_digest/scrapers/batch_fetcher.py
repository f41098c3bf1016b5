"""
Windowed batch fetching of WeChat articles
"""

from typing import List, Optional, Sequence, Tuple
import asyncio
import logging

from wechat_digest.core.config import settings
from wechat_digest.schemas.article import ExtractionResult
from .wechat import WeChatArticleScraper

logger = logging.getLogger(__name__)

class BatchFetcher:
    """
    Fetch many articles with a small concurrency window and a pause
    between windows so the source site is not hammered
    """

    def __init__(
        self,
        scraper: WeChatArticleScraper,
        window_size: int = settings.FETCH_CONCURRENCY,
        batch_delay: float = settings.FETCH_BATCH_DELAY_SECONDS,
    ):
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        self.scraper = scraper
        self.window_size = window_size
        self.batch_delay = batch_delay

    async def fetch_all(self, urls: Sequence[str]) -> List[ExtractionResult]:
        """
        Extract every URL; the result list is aligned with the input order

        Args:
            urls: Candidate article URLs

        Returns:
            List[ExtractionResult]: One result per input URL
        """
        logger.info(f"開始批量提取 {len(urls)} 個微信文章")

        results: List[Optional[ExtractionResult]] = [None] * len(urls)
        valid: List[Tuple[int, str]] = []

        for index, url in enumerate(urls):
            if self.scraper.is_article_url(url):
                valid.append((index, url))
            else:
                results[index] = self.scraper.invalid_url(url)

        invalid_count = len(urls) - len(valid)
        if invalid_count:
            logger.warning(f"發現 {invalid_count} 個非微信文章URL")

        for start in range(0, len(valid), self.window_size):
            window = valid[start:start + self.window_size]
            outcomes = await asyncio.gather(
                *(self.scraper.extract_article(url) for _, url in window),
                return_exceptions=True,
            )

            for (index, url), outcome in zip(window, outcomes):
                if isinstance(outcome, BaseException):
                    logger.error(f"提取文章異常 {url}: {outcome}")
                    results[index] = self.scraper.failure(url, str(outcome) or type(outcome).__name__)
                else:
                    results[index] = outcome

            if start + self.window_size < len(valid) and self.batch_delay > 0:
                await asyncio.sleep(self.batch_delay)

        success_count = sum(1 for result in results if not result.failed)
        logger.info(f"批量提取完成，成功: {success_count}，失敗: {len(results) - success_count}")
        return results
