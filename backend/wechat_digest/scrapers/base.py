from abc import ABC, abstractmethod
from typing import Dict, Optional
import logging

import httpx

from wechat_digest.schemas.article import ExtractionResult

logger = logging.getLogger(__name__)

class BaseScraper(ABC):
    """
    Base scraper class that defines the interface for all article page scrapers
    """
    HEADERS: Dict[str, str] = {
        "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
        "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
    }

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        self.client = client
        self.timeout = timeout

    @abstractmethod
    def is_article_url(self, url: str) -> bool:
        """
        Check whether the URL points to an article this scraper can handle
        """
        pass

    @abstractmethod
    def parse_article(self, html: str, url: str) -> ExtractionResult:
        """
        Extract a structured article from a fetched HTML document
        """
        pass

    @abstractmethod
    def failure(self, url: str, error: str) -> ExtractionResult:
        """
        Build the result reported for an article that could not be extracted
        """
        pass

    async def fetch_page(self, url: str) -> str:
        """
        Fetch the raw HTML of a page

        Raises:
            httpx.HTTPError: If the request fails or returns an error status
        """
        if self.client is not None:
            response = await self.client.get(url, headers=self.HEADERS, timeout=self.timeout)
        else:
            async with httpx.AsyncClient(follow_redirects=True, max_redirects=5) as client:
                response = await client.get(url, headers=self.HEADERS, timeout=self.timeout)

        logger.debug(f"GET {url} -> {response.status_code}")
        response.raise_for_status()
        return response.text

    async def extract_article(self, url: str) -> ExtractionResult:
        """
        Fetch and parse one article. Never raises: any failure is returned
        as a result with ``error`` set.
        """
        try:
            logger.info(f"提取文章: {url}")
            html = await self.fetch_page(url)
            return self.parse_article(html, url)
        except Exception as e:
            logger.error(f"提取文章失敗 {url}: {str(e)}")
            return self.failure(url, str(e) or type(e).__name__)
