from typing import Optional, Dict, Any, List
import logging

import httpx

from wechat_digest.core.config import settings
from wechat_digest.core.exceptions import ConfigurationError, LLMRequestError, LLMResponseError

logger = logging.getLogger(__name__)

class DeepSeekClient:
    """DeepSeek (OpenAI compatible) chat completion client"""

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_url = api_url or settings.DEEPSEEK_API_URL
        self.api_key = api_key or settings.DEEPSEEK_API_KEY
        if not self.api_key:
            raise ConfigurationError("DEEPSEEK_API_KEY environment variable is not set")
        if not self.api_url:
            raise ConfigurationError("DEEPSEEK_API_URL environment variable is not set")

        self.model = model or settings.DEEPSEEK_MODEL
        self.timeout = timeout or settings.LLM_TIMEOUT_SECONDS
        self.client = client
        self.headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        logger.info(f"DeepSeek API initialized with key: {self.api_key[:6]}...")

    async def get_completion(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: Optional[int] = 1000,
        **kwargs
    ) -> Dict[str, Any]:
        """
        Get AI completion result

        Args:
            messages: List of conversation messages
            temperature: Temperature parameter
            max_tokens: Maximum number of tokens
            **kwargs: Additional parameters

        Returns:
            Dict[str, Any]: API response result

        Raises:
            LLMRequestError: Connection failure or timeout
            LLMResponseError: Non-2xx status or a body that is not JSON
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs
        }

        try:
            if self.client is not None:
                response = await self.client.post(
                    self.api_url, headers=self.headers, json=payload, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        self.api_url, headers=self.headers, json=payload, timeout=self.timeout
                    )
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"DeepSeek API returned {e.response.status_code}: {e.response.text}")
            raise LLMResponseError(
                status_code=e.response.status_code,
                message=e.response.text
            )
        except httpx.TimeoutException as e:
            logger.error(f"DeepSeek API timeout: {str(e)}")
            raise LLMRequestError(f"請求超時: {str(e)}")
        except httpx.HTTPError as e:
            logger.error(f"DeepSeek API call failed: {str(e)}")
            raise LLMRequestError(f"連接錯誤: {str(e)}")
        except ValueError as e:
            logger.error(f"DeepSeek API returned invalid JSON: {str(e)}")
            raise LLMResponseError(status_code=response.status_code, message="invalid JSON body")
