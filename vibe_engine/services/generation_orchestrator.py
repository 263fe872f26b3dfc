"""
Generation orchestrator - prompt in, renderable file set out.

Prefers the remote model (AIMLAPI, OpenAI-compatible chat completions)
and degrades to local template scaffolding when no key is configured or
the reply cannot be parsed. Only a missing prompt or a failed upstream
call is reported as an error.
"""
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from vibe_engine.config import settings
from vibe_engine.logging_config import logger
from vibe_engine.services.builder_system_prompt import BUILDER_SYSTEM_PROMPT, build_user_prompt
from vibe_engine.services.errors import InvalidRequest, UpstreamError
from vibe_engine.services.generation_types import GenerationResult, UsageInfo
from vibe_engine.services.llm_response_handler import LLMResponseHandler
from vibe_engine.services.template_generator import build_file_set, render_default_component
from vibe_engine.services.usage_counter import UsageCounter


FALLBACK_MODEL = "fallback"


class LLMResponse:
    """Wrapper class for LLM responses"""
    def __init__(self, text: str, model: str, total_tokens: int = 0):
        self.text = text
        self.model = model
        self.total_tokens = total_tokens


class GenerationOrchestrator:
    """Builds file sets from prompts using the remote model when available"""

    def __init__(
        self,
        usage_counter: UsageCounter,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        response_handler: Optional[LLMResponseHandler] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.usage_counter = usage_counter
        self.api_key = settings.AIMLAPI_KEY if api_key is None else api_key
        self.api_url = api_url or settings.chat_completions_url
        self.response_handler = response_handler or LLMResponseHandler()
        self.transport = transport

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    async def generate(
        self,
        prompt: Optional[str],
        model: Optional[str] = None,
        context: Optional[List[Any]] = None
    ) -> GenerationResult:
        """Generate a file set for a prompt.

        Raises:
            InvalidRequest: prompt missing or blank (before any network call)
            UpstreamError: the provider call failed; carries fallback code
        """
        if not prompt or not prompt.strip():
            raise InvalidRequest("Prompt is required")

        if not self.has_credential:
            logger.info("No provider key configured, generating from templates", prompt_length=len(prompt))
            return GenerationResult(
                primary_code=render_default_component(prompt),
                files=build_file_set(prompt),
                model=FALLBACK_MODEL,
                usage=None
            )

        start_time = time.time()
        model = model or settings.DEFAULT_MODEL

        llm_response = await self._call_provider(
            system_prompt=BUILDER_SYSTEM_PROMPT,
            user_prompt=build_user_prompt(prompt, context, settings.CONTEXT_WINDOW),
            model=model
        )

        snapshot = self.usage_counter.record(llm_response.total_tokens)

        extraction = self.response_handler.extract(llm_response.text, prompt)

        logger.info(
            "Generation complete",
            model=model,
            strategy=extraction.strategy,
            file_count=len(extraction.files),
            tokens=llm_response.total_tokens,
            execution_time=round(time.time() - start_time, 2)
        )

        return GenerationResult(
            primary_code=extraction.primary_code,
            files=extraction.files,
            model=model,
            usage=UsageInfo(
                provider=settings.PROVIDER_NAME,
                requests=snapshot.requests,
                limit=snapshot.limit,
                tokens_used=llm_response.total_tokens
            )
        )

    def build_payload(self, system_prompt: str, user_prompt: str, model: str) -> Dict[str, Any]:
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            "temperature": settings.TEMPERATURE,
            "max_tokens": settings.MAX_TOKENS
        }

    async def _call_provider(self, system_prompt: str, user_prompt: str, model: str) -> LLMResponse:
        """Single chat-completion call. No retries, no streaming."""
        logger.info("Calling AIMLAPI", model=model, prompt_length=len(user_prompt))

        try:
            async with httpx.AsyncClient(timeout=settings.REQUEST_TIMEOUT, transport=self.transport) as client:
                response = await client.post(
                    self.api_url,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json"
                    },
                    json=self.build_payload(system_prompt, user_prompt, model)
                )
        except httpx.HTTPError as e:
            logger.error("AIMLAPI request failed", error=str(e))
            raise UpstreamError(
                f"AIMLAPI request failed: {e}",
                fallback_code=render_default_component("")
            ) from e

        if not response.is_success:
            logger.error("AIMLAPI error", status_code=response.status_code, body=response.text[:500])
            raise UpstreamError(
                "AIMLAPI request failed",
                status_code=response.status_code,
                fallback_code=render_default_component("")
            )

        try:
            result = response.json()
        except ValueError as e:
            logger.error("AIMLAPI returned a non-JSON body", error=str(e))
            raise UpstreamError(
                "AIMLAPI returned an invalid response",
                status_code=response.status_code,
                fallback_code=render_default_component("")
            ) from e

        if not isinstance(result, dict):
            raise UpstreamError(
                "AIMLAPI returned an invalid response",
                status_code=response.status_code,
                fallback_code=render_default_component("")
            )

        content, total_tokens = self.read_completion(result)

        return LLMResponse(
            text=LLMResponseHandler.filter_response(content),
            model=model,
            total_tokens=total_tokens
        )

    @staticmethod
    def read_completion(result: Dict[str, Any]) -> Tuple[Any, int]:
        """Message content and total tokens from a completion body.

        Unexpected shapes read as empty content or zero tokens, so the
        reply still goes through the extraction ladder.
        """
        content: Any = ""
        choices = result.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message")
            if isinstance(message, dict):
                content = message.get("content", "")

        total_tokens = 0
        usage = result.get("usage")
        if isinstance(usage, dict):
            try:
                total_tokens = max(int(usage.get("total_tokens") or 0), 0)
            except (TypeError, ValueError):
                logger.warning("AIMLAPI usage has non-numeric total_tokens", total_tokens=usage.get("total_tokens"))

        return content, total_tokens
