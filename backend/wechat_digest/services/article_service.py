"""
Article persistence: upserts and history queries
"""

from typing import List, Optional, Tuple
from datetime import datetime
from sqlmodel import select, func
import logging

from wechat_digest.models.article import Account, Article, Summary, TaskLog
from wechat_digest.models.enums import TaskStatus, TaskType
from wechat_digest.schemas.article import ExtractionResult
from wechat_digest.schemas.summary import SummaryResult

logger = logging.getLogger(__name__)

class ArticleService:
    """文章、帳號與總結的存取服務"""

    async def upsert_account(self, db, name: str) -> Account:
        """
        按名稱查找帳號，不存在則創建

        Args:
            db: 數據庫會話
            name: 帳號名稱

        Returns:
            Account: 帳號
        """
        result = await db.execute(select(Account).where(Account.name == name))
        account = result.scalars().first()
        if account:
            return account

        account = Account(
            name=name,
            display_name=name,
            description="通过批量URL导入创建",
        )
        db.add(account)
        try:
            await db.commit()
            await db.refresh(account)
        except Exception as e:
            logger.error(f"Failed to save account {name}: {str(e)}")
            await db.rollback()
            raise
        logger.info(f"Created account: {name}")
        return account

    async def upsert_article(
        self,
        db,
        extracted: ExtractionResult,
        account: Account,
    ) -> Article:
        """
        按 URL 保存文章，已存在則覆蓋標題、內容、日期、作者與帳號

        Args:
            db: 數據庫會話
            extracted: 提取結果
            account: 所屬帳號

        Returns:
            Article: 保存後的文章
        """
        result = await db.execute(select(Article).where(Article.url == extracted.url))
        article = result.scalars().first()

        now = datetime.utcnow()
        fields = dict(
            title=extracted.title,
            content=extracted.content,
            publish_date=extracted.publish_date or now,
            author=extracted.author or account.name,
            account_id=account.id,
        )

        if article:
            for key, value in fields.items():
                setattr(article, key, value)
            article.updated_at = now
        else:
            article = Article(url=extracted.url, **fields)
            db.add(article)

        try:
            await db.commit()
            await db.refresh(article)
        except Exception as e:
            logger.error(f"Failed to save article {extracted.url}: {str(e)}")
            await db.rollback()
            raise
        return article

    async def upsert_summary(self, db, article: Article, summary: SummaryResult) -> Summary:
        """
        按文章保存總結，已存在則覆蓋全部欄位
        """
        result = await db.execute(select(Summary).where(Summary.article_id == article.id))
        record = result.scalars().first()

        fields = dict(
            content=summary.summary,
            key_points=list(summary.key_points),
            sentiment=summary.sentiment,
            category=summary.category,
        )

        if record:
            for key, value in fields.items():
                setattr(record, key, value)
            record.updated_at = datetime.utcnow()
        else:
            record = Summary(article_id=article.id, **fields)
            db.add(record)

        try:
            await db.commit()
            await db.refresh(record)
        except Exception as e:
            logger.error(f"Failed to save summary for article {article.id}: {str(e)}")
            await db.rollback()
            raise
        return record

    async def get_history(
        self,
        db,
        account_name: str,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[Tuple[Article, Optional[Summary]]], int]:
        """
        獲取帳號下的文章與總結，按創建時間倒序分頁

        Returns:
            Tuple[List[Tuple[Article, Optional[Summary]]], int]:
                - 本頁的 (文章, 總結) 列表
                - 文章總數
        """
        count_statement = (
            select(func.count())
            .select_from(Article)
            .join(Account, Article.account_id == Account.id)
            .where(Account.name == account_name)
        )
        total = (await db.execute(count_statement)).scalar() or 0

        statement = (
            select(Article, Summary)
            .join(Account, Article.account_id == Account.id)
            .outerjoin(Summary, Summary.article_id == Article.id)
            .where(Account.name == account_name)
            .order_by(Article.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        rows = (await db.execute(statement)).all()
        return [(row[0], row[1]) for row in rows], total

    async def record_task_log(
        self,
        db,
        started_at: datetime,
        total: int,
        success_count: int,
        fail_count: int,
        message: Optional[str] = None,
        status: TaskStatus = TaskStatus.COMPLETED,
    ) -> TaskLog:
        """保存一次批量處理的記錄"""
        task_log = TaskLog(
            task_type=TaskType.BATCH_SUMMARIZE,
            status=status,
            message=message,
            total=total,
            success_count=success_count,
            fail_count=fail_count,
            started_at=started_at,
            finished_at=datetime.utcnow(),
        )
        db.add(task_log)
        try:
            await db.commit()
            await db.refresh(task_log)
        except Exception:
            await db.rollback()
            raise
        return task_log
