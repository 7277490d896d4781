"""Classification service backed by an OpenAI-compatible chat completion API."""
import os
import time
from typing import Optional

import httpx
from openai import AsyncOpenAI

from studybase.exceptions import ClassificationError
from studybase.utils.logger import logger


class ClassificationService:
    """Service issuing one text completion per classification request."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o",
        temperature: float = 0.3,
        timeout_seconds: float = 60.0,
    ):
        """
        Initialize classification service.

        Args:
            api_key: API key (from LLM_API_KEY or OPENAI_API_KEY if not provided)
            api_url: Base URL of the OpenAI-compatible API
            model: Model name to use
            temperature: Sampling temperature
            timeout_seconds: Per-request timeout
        """
        self.api_key = api_key or os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError("LLM_API_KEY environment variable is required")

        self.model = model
        self.temperature = temperature

        # OpenAI SDK expects the base URL, not the completions endpoint
        base_url = api_url.split("/chat/completions")[0].rstrip("/")

        # Environment proxy settings are ignored for a direct connection
        http_client = httpx.AsyncClient(timeout=timeout_seconds, trust_env=False)
        self.client = AsyncOpenAI(
            api_key=self.api_key,
            base_url=base_url,
            http_client=http_client,
        )
        logger.info(f"Classification service configured for model {model} at {base_url}")

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Generate a completion for one classification request.

        Args:
            system_prompt: System instruction text
            user_prompt: User instruction text containing the chunk

        Returns:
            Completion text (empty if the model returned no content)

        Raises:
            ClassificationError: If the API call fails
        """
        start_time = time.time()

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
            )
        except Exception as e:
            logger.error(f"Error calling classification API: {str(e)}", exc_info=True)
            raise ClassificationError(f"Failed to classify chunk: {str(e)}") from e

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        token_usage = None
        if response.usage is not None:
            token_usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        logger.debug(
            "Classification response received",
            extra={
                "token_usage": token_usage,
                "response_time_ms": (time.time() - start_time) * 1000,
            },
        )

        return content

    async def close(self):
        """Close HTTP client."""
        await self.client.close()
