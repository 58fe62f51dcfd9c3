"""Text-generation collaborators used by AI-assisted extraction."""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

import httpx
import structlog
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from product_scraper.core.exceptions import ConfigurationError, GenerationError

logger = structlog.get_logger(__name__)


class TextGenerator(ABC):
    """Turns a prompt into raw response text."""

    provider: str = ""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Send a prompt and return the raw text response.

        Raises:
            GenerationError: If the service fails or does not answer in time
        """
        pass


class GeminiGenerator(TextGenerator):
    """Google Gemini client for product extraction prompts."""

    provider = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        timeout_seconds: float = 60.0,
        base_url: Optional[str] = None,
    ):
        if not api_key:
            logger.critical("gemini_api_key_missing")
            raise ConfigurationError("GEMINI_API_KEY", "an API key is required for AI-assisted extraction")
        http_options = types.HttpOptions(base_url=base_url) if base_url else None
        self.client = genai.Client(api_key=api_key, http_options=http_options)
        self.model = model
        self.timeout_seconds = timeout_seconds

    async def generate(self, prompt: str) -> str:
        logger.debug("gemini_request", model=self.model, prompt_chars=len(prompt))
        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt,
                    config=types.GenerateContentConfig(temperature=0.1),
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            raise GenerationError(self.provider, f"no response within {self.timeout_seconds}s")
        except genai_errors.APIError as e:
            raise GenerationError(self.provider, str(e)) from e
        except (httpx.HTTPError, OSError) as e:
            # transport failures (DNS, refused connection, TLS) are not wrapped by the SDK
            logger.warning("gemini_transport_error", model=self.model, error=repr(e))
            raise GenerationError(self.provider, f"transport error: {e!r}") from e

        text = response.text or ""
        logger.debug("gemini_response", model=self.model, response_chars=len(text))
        return text
