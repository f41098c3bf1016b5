"""
WeChat public account article scraper
"""

from typing import List, Optional
from datetime import datetime
from urllib.parse import urlparse
import logging

import httpx
from bs4 import BeautifulSoup, Tag

from wechat_digest.core.config import settings
from wechat_digest.core.exceptions import ArticleExtractionError
from wechat_digest.schemas.article import ExtractionResult
from .base import BaseScraper
from .text_utils import clean_content, parse_chinese_date

logger = logging.getLogger(__name__)

UNTITLED = "无标题"
INVALID_LINK_TITLE = "无效链接"
INVALID_LINK_ERROR = "不是有效的微信文章链接"
EXTRACTION_FAILED_TITLE = "提取失败"
CONTENT_TOO_SHORT_ERROR = "文章内容提取失败或内容过短"

# Ordered fallback lists, the first selector that yields text wins
TITLE_SELECTORS = [
    "#activity-name",
    ".rich_media_title",
    "h1.rich_media_title",
    ".weui-article__title",
    "h1",
]
AUTHOR_SELECTORS = [
    ".rich_media_meta_text",
    ".profile_nickname",
    "#js_name",
    ".weui-article__author",
]
DATE_SELECTORS = [
    "#publish_time",
    ".rich_media_meta_text",
    ".weui-article__time",
]
CONTENT_SELECTORS = [
    "#js_content",
    ".rich_media_content",
    ".weui-article__bd",
]
NOISE_SELECTORS = "script, style, .rich_media_tool, .qr_code_pc_outer"
PARAGRAPH_TAGS = ["p", "div", "section"]
MIN_PARAGRAPH_LENGTH = 10


class WeChatArticleScraper(BaseScraper):
    """
    Scraper for mp.weixin.qq.com article pages
    """
    HEADERS = {
        **BaseScraper.HEADERS,
        "Accept-Encoding": "gzip, deflate",
        "Connection": "keep-alive",
        "Referer": "https://mp.weixin.qq.com/",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "same-origin",
    }

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = settings.FETCH_TIMEOUT_SECONDS,
        host: str = settings.WECHAT_ARTICLE_HOST,
        path_prefix: str = settings.WECHAT_ARTICLE_PATH_PREFIX,
        max_content_length: int = settings.MAX_CONTENT_LENGTH,
        min_content_length: int = settings.MIN_CONTENT_LENGTH,
    ):
        super().__init__(client=client, timeout=timeout)
        self.host = host
        self.path_prefix = path_prefix
        self.max_content_length = max_content_length
        self.min_content_length = min_content_length

    def is_article_url(self, url: str) -> bool:
        """
        Valid when the URL parses, its host is the article host and its
        path starts with the article path prefix
        """
        try:
            parsed = urlparse(url)
        except (TypeError, ValueError) as e:
            logger.warning(f"URL解析失敗: {url} ({e})")
            return False

        is_valid = (
            parsed.scheme in ("http", "https")
            and parsed.hostname == self.host
            and parsed.path.startswith(self.path_prefix)
        )
        logger.debug(f"URL驗證: {url} -> host={parsed.hostname}, path={parsed.path}, valid={is_valid}")
        return is_valid

    def invalid_url(self, url: str) -> ExtractionResult:
        return ExtractionResult(url=url, title=INVALID_LINK_TITLE, error=INVALID_LINK_ERROR)

    def failure(self, url: str, error: str) -> ExtractionResult:
        return ExtractionResult(url=url, title=EXTRACTION_FAILED_TITLE, error=error)

    def parse_article(self, html: str, url: str) -> ExtractionResult:
        """
        Extract title, author, publish date and content from an article page

        Raises:
            ArticleExtractionError: If the content is missing or too short
        """
        soup = BeautifulSoup(html, "html.parser")

        title = self.extract_title(soup)
        author = self.extract_author(soup)
        publish_date = self.extract_publish_date(soup)
        content = clean_content(self.extract_content(soup), self.max_content_length)

        if len(content) < self.min_content_length:
            raise ArticleExtractionError(CONTENT_TOO_SHORT_ERROR)

        return ExtractionResult(
            url=url,
            title=title or UNTITLED,
            content=content,
            author=author,
            publish_date=publish_date,
        )

    @staticmethod
    def _first_text(soup: BeautifulSoup, selectors: List[str]) -> str:
        for selector in selectors:
            element = soup.select_one(selector)
            if element is None:
                continue
            text = element.get_text().strip()
            if text:
                return text
        return ""

    def extract_title(self, soup: BeautifulSoup) -> str:
        return self._first_text(soup, TITLE_SELECTORS)

    def extract_author(self, soup: BeautifulSoup) -> str:
        return self._first_text(soup, AUTHOR_SELECTORS)

    def extract_publish_date(self, soup: BeautifulSoup) -> Optional[datetime]:
        for selector in DATE_SELECTORS:
            element = soup.select_one(selector)
            if element is None:
                continue
            date_text = element.get_text().strip()
            if date_text:
                publish_date = parse_chinese_date(date_text)
                if publish_date:
                    return publish_date
        return None

    def extract_content(self, soup: BeautifulSoup) -> str:
        """
        Extract the body text, keeping paragraph structure

        Only innermost paragraph-like elements are collected so nested
        sections are not repeated.
        """
        for selector in CONTENT_SELECTORS:
            container = soup.select_one(selector)
            if container is None:
                continue

            for noise in container.select(NOISE_SELECTORS):
                noise.decompose()

            paragraphs = []
            for element in container.find_all(PARAGRAPH_TAGS):
                if not isinstance(element, Tag) or element.find(PARAGRAPH_TAGS) is not None:
                    continue
                text = element.get_text().strip()
                if len(text) > MIN_PARAGRAPH_LENGTH:
                    paragraphs.append(text)

            if paragraphs:
                return "\n\n".join(paragraphs)
            # 段落提取失敗，直接取全部文字
            return container.get_text().strip()

        return ""
