"""
WeChat article summarizer
"""

from typing import Any, Dict, Iterable, List, Tuple
import asyncio
import json
import logging
import re

from wechat_digest.ai.providers import DeepSeekClient
from wechat_digest.core.config import settings
from wechat_digest.core.exceptions import SummarizationError
from wechat_digest.models.enums import Sentiment
from wechat_digest.schemas.summary import DEFAULT_CATEGORY, SummaryOutcome, SummaryResult
from .prompts.article import SUMMARY_PROMPT_TEMPLATE, SYSTEM_PROMPT

logger = logging.getLogger(__name__)

JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)
FALLBACK_LINES = 3
FALLBACK_SUMMARY_LENGTH = 200


class ArticleSummarizer:
    """Summarize one article into summary, key points, sentiment and category"""

    def __init__(
        self,
        ai_client: DeepSeekClient,
        temperature: float = settings.LLM_TEMPERATURE,
        max_tokens: int = settings.LLM_MAX_TOKENS,
        batch_delay: float = settings.SUMMARY_DELAY_SECONDS,
    ):
        self.ai_client = ai_client
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.batch_delay = batch_delay

    @staticmethod
    def build_prompt(title: str, content: str) -> str:
        return SUMMARY_PROMPT_TEMPLATE.format(title=title, content=content)

    async def summarize_article(self, title: str, content: str) -> SummaryResult:
        """
        Summarize a single article

        Args:
            title: Article title
            content: Article content

        Returns:
            SummaryResult: Parsed result, falling back to a line based
            heuristic when the model does not answer with JSON

        Raises:
            SummarizationError: If the API call fails
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": self.build_prompt(title, content)},
        ]

        try:
            response = await self.ai_client.get_completion(
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
            answer = response["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected DeepSeek response shape: {str(e)}")
            raise SummarizationError(f"Failed to summarize article: unexpected response ({e})")
        except Exception as e:
            logger.error(f"Error calling DeepSeek API: {str(e)}")
            raise SummarizationError(f"Failed to summarize article: {e}")

        return self.parse_summary_response(answer or "")

    def parse_summary_response(self, response: str) -> SummaryResult:
        """
        Map the first JSON object found in the answer to a SummaryResult
        """
        match = JSON_OBJECT_PATTERN.search(response)
        if not match:
            return self.fallback_parsing(response)

        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse DeepSeek response as JSON, using fallback: {str(e)}")
            return self.fallback_parsing(response)

        if not isinstance(parsed, dict):
            return self.fallback_parsing(response)

        return SummaryResult(
            summary=str(parsed.get("summary") or ""),
            key_points=self._key_points(parsed.get("keyPoints")),
            sentiment=self._sentiment(parsed.get("sentiment")),
            category=str(parsed.get("category") or DEFAULT_CATEGORY),
        )

    @staticmethod
    def _key_points(value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [str(point).strip() for point in value if str(point).strip()]

    @staticmethod
    def _sentiment(value: Any) -> Sentiment:
        try:
            return Sentiment(str(value).strip().lower())
        except ValueError:
            return Sentiment.NEUTRAL

    @staticmethod
    def fallback_parsing(response: str) -> SummaryResult:
        """Use the first non-blank lines of the answer"""
        lines = [line.strip() for line in response.splitlines() if line.strip()][:FALLBACK_LINES]

        summary = " ".join(lines)
        if len(summary) > FALLBACK_SUMMARY_LENGTH:
            summary = summary[:FALLBACK_SUMMARY_LENGTH] + "..."

        return SummaryResult(
            summary=summary,
            key_points=lines,
            sentiment=Sentiment.NEUTRAL,
            category=DEFAULT_CATEGORY,
        )

    async def batch_summarize(
        self,
        articles: Iterable[Tuple[str, str, str]],
    ) -> Dict[str, SummaryOutcome]:
        """
        Summarize articles one after another

        Args:
            articles: (id, title, content) tuples

        Returns:
            Dict[str, SummaryOutcome]: Outcome for every id, failures included
        """
        outcomes: Dict[str, SummaryOutcome] = {}
        articles = list(articles)

        for position, (article_id, title, content) in enumerate(articles):
            try:
                result = await self.summarize_article(title, content)
                outcomes[article_id] = SummaryOutcome(result=result)
            except SummarizationError as e:
                logger.error(f"Failed to summarize article {article_id}: {str(e)}")
                outcomes[article_id] = SummaryOutcome(error=str(e))

            if position < len(articles) - 1 and self.batch_delay > 0:
                await asyncio.sleep(self.batch_delay)

        return outcomes
