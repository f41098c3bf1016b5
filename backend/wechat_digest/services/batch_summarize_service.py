"""
Batch summarize business logic
"""

from typing import List, Optional, Sequence
from datetime import datetime
import asyncio
import logging

from wechat_digest.ai.services.article_summarizer import ArticleSummarizer
from wechat_digest.core.config import settings
from wechat_digest.core.exceptions import BatchValidationError
from wechat_digest.models.enums import TaskStatus
from wechat_digest.schemas.batch import BatchReport, BatchResultItem
from wechat_digest.scrapers.batch_fetcher import BatchFetcher
from .article_service import ArticleService

logger = logging.getLogger(__name__)

class BatchSummarizeService:
    """
    Extract a batch of article URLs, summarize each article and store it

    Per-article failures become error entries in the report; the batch
    itself only fails on invalid input.
    """

    def __init__(
        self,
        fetcher: BatchFetcher,
        summarizer: ArticleSummarizer,
        article_service: Optional[ArticleService] = None,
        article_delay: float = settings.SUMMARY_DELAY_SECONDS,
        max_urls: int = settings.BATCH_MAX_URLS,
        default_account_name: str = settings.DEFAULT_ACCOUNT_NAME,
    ):
        self.fetcher = fetcher
        self.summarizer = summarizer
        self.article_service = article_service or ArticleService()
        self.article_delay = article_delay
        self.max_urls = max_urls
        self.default_account_name = default_account_name

    def validate_urls(self, urls: Sequence[str]) -> None:
        """
        Raises:
            BatchValidationError: If the list is empty or too long
        """
        if not urls:
            raise BatchValidationError("请提供有效的URL数组")
        if len(urls) > self.max_urls:
            raise BatchValidationError(f"单次最多处理{self.max_urls}个URL")

    async def summarize_urls(
        self,
        db,
        urls: Sequence[str],
        account_name: Optional[str] = None,
    ) -> BatchReport:
        """
        處理一批微信文章 URL

        Args:
            db: 數據庫會話
            urls: 文章鏈接
            account_name: 文章歸屬的帳號，預設為批量導入

        Returns:
            BatchReport: 每個 URL 的結果與統計
        """
        self.validate_urls(urls)
        account_name = account_name or self.default_account_name
        started_at = datetime.utcnow()

        logger.info(f"開始批量處理 {len(urls)} 個微信文章URL")
        results: List[BatchResultItem] = []
        success_count = 0
        fail_count = 0

        try:
            extracted_articles = await self.fetcher.fetch_all(urls)

            for article in extracted_articles:
                if article.failed:
                    results.append(BatchResultItem(url=article.url, title=article.title, error=article.error))
                    fail_count += 1
                    continue

                try:
                    summary = await self.summarizer.summarize_article(article.title, article.content)

                    account = await self.article_service.upsert_account(db, account_name)
                    saved_article = await self.article_service.upsert_article(db, article, account)
                    await self.article_service.upsert_summary(db, saved_article, summary)

                    results.append(BatchResultItem(url=article.url, title=article.title, summary=summary))
                    success_count += 1
                    logger.info(f"成功處理文章: {article.title}")

                except Exception as e:
                    logger.error(f"總結文章失敗 {article.url}: {str(e)}")
                    results.append(
                        BatchResultItem(url=article.url, title=article.title, error=f"总结失败: {str(e)}")
                    )
                    fail_count += 1

                if self.article_delay > 0:
                    await asyncio.sleep(self.article_delay)

        except Exception as e:
            logger.error(f"批量處理中斷: {str(e)}")
            await self._record_task_log(
                db, started_at, len(urls), success_count, fail_count,
                message=f"account={account_name}; error={str(e) or type(e).__name__}",
                status=TaskStatus.FAILED,
            )
            raise

        logger.info(f"批量處理完成，成功: {success_count}，失敗: {fail_count}")
        await self._record_task_log(
            db, started_at, len(urls), success_count, fail_count,
            message=f"account={account_name}",
        )

        return BatchReport(
            results=results,
            total_processed=len(urls),
            success_count=success_count,
            fail_count=fail_count,
        )

    async def _record_task_log(
        self,
        db,
        started_at: datetime,
        total: int,
        success_count: int,
        fail_count: int,
        message: str,
        status: TaskStatus = TaskStatus.COMPLETED,
    ) -> None:
        """Write the task log row; a failure here never changes the batch outcome"""
        try:
            await self.article_service.record_task_log(
                db,
                started_at=started_at,
                total=total,
                success_count=success_count,
                fail_count=fail_count,
                message=message,
                status=status,
            )
        except Exception as e:
            logger.error(f"Failed to record task log: {str(e)}")

    async def get_history(
        self,
        db,
        page: int = 1,
        limit: int = 20,
        account_name: Optional[str] = None,
    ):
        """Paginated articles previously imported under the account"""
        return await self.article_service.get_history(
            db,
            account_name=account_name or self.default_account_name,
            page=page,
            limit=limit,
        )
