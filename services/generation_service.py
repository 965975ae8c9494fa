"""
Generation service for SiteCraft: prompt -> LLM -> parsed code
"""
import time
import logging
from typing import Any, Dict, List, Optional

import httpx

from config import settings
from models.conversation import Message
from models.generation import Framework, GeneratedCode, GenerationOptions
from services.exceptions import ConfigurationError, TransportError
from services.prompt_builder import build_generation_prompt
from services.response_parser import parse_response

logger = logging.getLogger(__name__)


class GenerationService:
    """
    Single entry point for code generation.

    Makes exactly one request per call; there is no retry and no fallback
    content. The timeout is enforced by the HTTP client.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.CLAUDE_API_KEY
        self.api_url = api_url if api_url is not None else settings.CLAUDE_API_URL
        self.model = model or settings.CLAUDE_MODEL
        self.max_tokens = max_tokens or settings.CLAUDE_MAX_TOKENS
        self.timeout = timeout or settings.GENERATION_TIMEOUT
        self._transport = transport

    def check_configuration(self) -> None:
        if not self.api_key:
            raise ConfigurationError("CLAUDE_API_KEY is missing. Set it in the environment or .env file.")
        if not self.api_url:
            raise ConfigurationError("CLAUDE_API_URL is missing. Set it in the environment or .env file.")

    def build_request_body(self, prompt_text: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "text",
                            "text": prompt_text,
                        }
                    ],
                }
            ],
        }

    def build_headers(self) -> Dict[str, str]:
        return {
            "content-type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": settings.ANTHROPIC_VERSION,
        }

    async def generate(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
        conversation: Optional[List[Message]] = None,
    ) -> GeneratedCode:
        """
        Generate code for a prompt.

        A non-empty conversation makes this a refinement request. Raises
        ConfigurationError before any network I/O if the key or URL is missing,
        TransportError if the call fails, ParseError if the answer lacks a
        required code block.
        """
        self.check_configuration()

        framework = options.framework if options else Framework.VANILLA
        is_refinement = bool(conversation)
        prompt_text = build_generation_prompt(prompt, conversation, options)

        logger.info(
            f"Generating {framework.value} code (refinement={is_refinement}, "
            f"history={len(conversation or [])}, prompt={prompt[:100]!r})"
        )
        response_text = await self._call_llm(prompt_text)
        logger.info(f"Response content length: {len(response_text)}")

        code = parse_response(response_text, framework)
        logger.info(f"Parsed {framework.value} code successfully")
        return code

    async def _call_llm(self, prompt_text: str) -> str:
        start_time = time.time()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.api_url,
                    json=self.build_request_body(prompt_text),
                    headers=self.build_headers(),
                )
        except httpx.TimeoutException as e:
            logger.error(f"LLM request timed out after {self.timeout}s: {e}")
            raise TransportError(f"LLM request timed out after {self.timeout}s") from e
        except httpx.RequestError as e:
            logger.error(f"Could not connect to LLM endpoint {self.api_url}: {e}")
            raise TransportError(f"Could not connect to LLM endpoint: {e}") from e

        elapsed = time.time() - start_time
        logger.info(f"LLM responded with status {response.status_code} in {elapsed:.2f}s")

        if not response.is_success:
            logger.error(f"LLM error response {response.status_code}: {response.text[:500]}")
            raise TransportError(
                f"LLM request failed with status {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected LLM response shape: {response.text[:500]}")
            raise TransportError(
                "Unexpected response format from LLM",
                status_code=response.status_code,
                body=response.text,
            ) from e
