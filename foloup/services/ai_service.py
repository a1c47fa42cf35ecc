"""LLM completion service with OpenAI / Gemini fallback.

Requests are written in the OpenAI chat format. The target provider is the one
passed by the caller (usually resolved from the recruiter's preference) or the
process-wide default. When the target fails, the other provider is tried
through its SDK and then through a plain HTTP call; if everything fails the
original error is raised.
"""

import json
import logging
import re
from typing import Any, Literal, Optional

import google.generativeai as genai
import httpx
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as google_auth_exceptions
from google.generativeai.types import generation_types
from openai import APIConnectionError, APIStatusError, AsyncOpenAI, OpenAIError
from pydantic import BaseModel, Field

from foloup.core.config import settings

logger = logging.getLogger(__name__)

AIProvider = Literal["openai", "gemini"]
SUPPORTED_PROVIDERS: tuple[str, ...] = ("openai", "gemini")
DEFAULT_PROVIDER: AIProvider = "openai"

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


class AIServiceError(Exception):
    """Raised when a provider call fails or returns nothing usable."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        provider: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.provider = provider


class AIMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class AICompletionRequest(BaseModel):
    model: str = "gpt-4o"
    messages: list[AIMessage]
    response_format: Optional[Literal["json_object", "text"]] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None


class TokenUsage(BaseModel):
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None
    total_tokens: Optional[int] = None


class AICompletionResponse(BaseModel):
    content: str
    usage: Optional[TokenUsage] = None
    provider: str = Field(..., description="Provider that produced the content")


def _initial_provider() -> AIProvider:
    if settings.AI_PROVIDER in SUPPORTED_PROVIDERS:
        return settings.AI_PROVIDER  # type: ignore[return-value]
    logger.warning(
        f"Unknown AI_PROVIDER {settings.AI_PROVIDER!r}, using {DEFAULT_PROVIDER}")
    return DEFAULT_PROVIDER


_global_provider: AIProvider = _initial_provider()


def get_global_provider() -> AIProvider:
    """Provider used when a request does not name one."""
    return _global_provider


def set_global_provider(provider: str) -> None:
    """Change the process-wide default provider."""
    global _global_provider
    if provider not in SUPPORTED_PROVIDERS:
        raise ValueError(f"Unsupported AI provider: {provider}")
    logger.info(f"Global provider changing from {_global_provider} to {provider}")
    _global_provider = provider  # type: ignore[assignment]


def other_provider(provider: str) -> AIProvider:
    return "gemini" if provider == "openai" else "openai"


def parse_json_content(content: str) -> Any:
    """Parse a JSON reply, tolerating markdown fences and surrounding prose."""
    cleaned = content.strip()
    cleaned = _FENCE_START.sub("", cleaned)
    cleaned = _FENCE_END.sub("", cleaned).strip()

    if not cleaned.startswith(("{", "[")):
        match = _JSON_OBJECT.search(cleaned)
        if match:
            cleaned = match.group(0)

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ValueError(
            f"Failed to parse AI response: {e.msg}. Raw content: {content[:500]}"
        ) from e


def to_gemini_contents(messages: list[AIMessage]) -> list[dict]:
    """Convert chat messages to Gemini contents.

    Gemini has no system role, so system text is prepended to the first user
    message, and ``assistant`` becomes ``model``.
    """
    system_content = "".join(
        f"{m.content}\n\n" for m in messages if m.role == "system")
    conversation = [m for m in messages if m.role != "system"]

    contents = [
        {
            "role": "model" if m.role == "assistant" else "user",
            "parts": [{"text": m.content}],
        }
        for m in conversation
    ]

    if system_content:
        if contents and contents[0]["role"] == "user":
            first = contents[0]["parts"][0]
            first["text"] = system_content + first["text"]
        elif not contents:
            contents = [{"role": "user", "parts": [{"text": system_content.strip()}]}]

    return contents


class AIService:
    """Chat completions against OpenAI or Gemini."""

    def __init__(self):
        self._openai_client = None
        self._gemini_configured = False

    def _get_openai_client(self) -> AsyncOpenAI:
        if self._openai_client is None:
            if not settings.OPENAI_API_KEY:
                raise AIServiceError(
                    "OPENAI_API_KEY environment variable is not set", provider="openai")
            self._openai_client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                max_retries=settings.OPENAI_MAX_RETRIES,
            )
        return self._openai_client

    def _get_gemini_model(self, model_name: str):
        if not self._gemini_configured:
            if not settings.GEMINI_API_KEY:
                raise AIServiceError(
                    "GEMINI_API_KEY environment variable is not set", provider="gemini")
            genai.configure(api_key=settings.GEMINI_API_KEY)
            self._gemini_configured = True
        return genai.GenerativeModel(model_name)

    async def create_completion(
        self,
        request: AICompletionRequest,
        provider: Optional[str] = None,
    ) -> AICompletionResponse:
        """Run a completion, falling back to the other provider on failure."""
        target = provider or get_global_provider()
        if target not in SUPPORTED_PROVIDERS:
            raise AIServiceError(f"Unsupported AI provider: {target}", status_code=400)

        logger.info(
            f"AI completion via {target} (model={request.model}, "
            f"messages={len(request.messages)}, format={request.response_format})"
        )

        try:
            return await self._complete_with(target, request)
        except AIServiceError as error:
            fallback = other_provider(target)
            logger.warning(
                f"Provider {target} failed ({error.message}), trying fallback {fallback}")

            try:
                return await self._complete_with(fallback, request)
            except AIServiceError as fallback_error:
                logger.warning(
                    f"Fallback {fallback} also failed ({fallback_error.message}), "
                    "trying direct API call")

            try:
                return await self._direct_api_call(request, fallback)
            except AIServiceError as api_error:
                logger.error(f"Direct API call to {fallback} failed: {api_error.message}")
                raise error

    async def complete_json(
        self,
        request: AICompletionRequest,
        provider: Optional[str] = None,
    ) -> Any:
        """Run a completion and parse its content as JSON."""
        response = await self.create_completion(request, provider)
        return parse_json_content(response.content)

    async def _complete_with(
        self, provider: str, request: AICompletionRequest
    ) -> AICompletionResponse:
        if provider == "openai":
            return await self._openai_completion(request)
        return await self._gemini_completion(request)

    async def _openai_completion(self, request: AICompletionRequest) -> AICompletionResponse:
        client = self._get_openai_client()

        kwargs: dict[str, Any] = {
            "model": request.model,
            "messages": [m.model_dump() for m in request.messages],
        }
        if request.response_format:
            kwargs["response_format"] = {"type": request.response_format}
        if request.temperature is not None:
            kwargs["temperature"] = request.temperature
        if request.max_tokens is not None:
            kwargs["max_tokens"] = request.max_tokens

        try:
            completion = await client.chat.completions.create(**kwargs)
        except APIStatusError as e:
            raise AIServiceError(str(e), status_code=e.status_code, provider="openai") from e
        except APIConnectionError as e:
            raise AIServiceError(str(e), status_code=503, provider="openai") from e
        except OpenAIError as e:
            raise AIServiceError(str(e), provider="openai") from e

        choice = completion.choices[0] if completion.choices else None
        if not choice or not choice.message or not choice.message.content:
            raise AIServiceError("No content received from OpenAI", provider="openai")

        usage = None
        if completion.usage:
            usage = TokenUsage(
                prompt_tokens=completion.usage.prompt_tokens,
                completion_tokens=completion.usage.completion_tokens,
                total_tokens=completion.usage.total_tokens,
            )
        return AICompletionResponse(
            content=choice.message.content, usage=usage, provider="openai")

    async def _gemini_completion(self, request: AICompletionRequest) -> AICompletionResponse:
        """
        Run the request on Gemini.

        Every OpenAI model name in the request (gpt-4o, gpt-4, gpt-4.1,
        gpt-3.5-turbo or anything else) runs on ``settings.GEMINI_MODEL``.
        """
        model_name = settings.GEMINI_MODEL
        model = self._get_gemini_model(model_name)
        logger.debug(f"Gemini model {model_name} (mapped from {request.model})")

        generation_config = genai.GenerationConfig(
            temperature=request.temperature if request.temperature is not None else 0.7,
            max_output_tokens=request.max_tokens or 2048,
            response_mime_type=(
                "application/json"
                if request.response_format == "json_object"
                else "text/plain"
            ),
        )

        try:
            response = await model.generate_content_async(
                to_gemini_contents(request.messages),
                generation_config=generation_config,
            )
            text = response.text
        except google_exceptions.GoogleAPICallError as e:
            raise AIServiceError(str(e), status_code=e.code, provider="gemini") from e
        except google_exceptions.GoogleAPIError as e:
            raise AIServiceError(str(e), provider="gemini") from e
        except google_auth_exceptions.GoogleAuthError as e:
            raise AIServiceError(str(e), status_code=401, provider="gemini") from e
        except (
            generation_types.BlockedPromptException,
            generation_types.StopCandidateException,
        ) as e:
            raise AIServiceError(
                f"Gemini stopped generating: {e}", provider="gemini") from e
        except ValueError as e:
            # response.text raises when the candidate was blocked or empty
            raise AIServiceError(
                f"No content received from Gemini: {e}", provider="gemini") from e

        if not text:
            raise AIServiceError("No content received from Gemini", provider="gemini")

        metadata = getattr(response, "usage_metadata", None)
        usage = None
        if metadata is not None:
            usage = TokenUsage(
                prompt_tokens=metadata.prompt_token_count,
                completion_tokens=metadata.candidates_token_count,
                total_tokens=metadata.total_token_count,
            )
        return AICompletionResponse(content=text, usage=usage, provider="gemini")

    async def _direct_api_call(
        self, request: AICompletionRequest, provider: str
    ) -> AICompletionResponse:
        """Call the provider's REST endpoint without its SDK."""
        logger.info(f"Creating direct API call for {provider}")

        try:
            async with httpx.AsyncClient(timeout=settings.AI_REQUEST_TIMEOUT) as client:
                if provider == "gemini":
                    return await self._direct_gemini(client, request)
                return await self._direct_openai(client, request)
        except httpx.HTTPStatusError as e:
            raise AIServiceError(
                f"{provider} API returned {e.response.status_code}",
                status_code=e.response.status_code,
                provider=provider,
            ) from e
        except httpx.HTTPError as e:
            raise AIServiceError(
                f"{provider} API request failed: {e}", status_code=503, provider=provider
            ) from e

    async def _direct_gemini(
        self, client: httpx.AsyncClient, request: AICompletionRequest
    ) -> AICompletionResponse:
        if not settings.GEMINI_API_KEY:
            raise AIServiceError("Gemini API key not found", provider="gemini")

        prompt = "\n".join(f"{m.role}: {m.content}" for m in request.messages)
        response = await client.post(
            f"{settings.GEMINI_BASE_URL}/models/{settings.GEMINI_DIRECT_MODEL}:generateContent",
            json={"contents": [{"parts": [{"text": prompt}]}]},
            headers={
                "Content-Type": "application/json",
                "X-goog-api-key": settings.GEMINI_API_KEY,
            },
        )
        response.raise_for_status()
        data = response.json()

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            text = ""
        if not text:
            raise AIServiceError("No content returned from Gemini API", provider="gemini")

        metadata = data.get("usageMetadata") or {}
        return AICompletionResponse(
            content=text,
            usage=TokenUsage(
                prompt_tokens=metadata.get("promptTokenCount"),
                completion_tokens=metadata.get("candidatesTokenCount"),
                total_tokens=metadata.get("totalTokenCount"),
            ),
            provider="gemini",
        )

    async def _direct_openai(
        self, client: httpx.AsyncClient, request: AICompletionRequest
    ) -> AICompletionResponse:
        if not settings.OPENAI_API_KEY:
            raise AIServiceError("OpenAI API key not found", provider="openai")

        payload: dict[str, Any] = {
            "model": request.model,
            "messages": [m.model_dump() for m in request.messages],
        }
        if request.response_format:
            payload["response_format"] = {"type": request.response_format}
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens

        response = await client.post(
            f"{settings.OPENAI_BASE_URL}/chat/completions",
            json=payload,
            headers={"Authorization": f"Bearer {settings.OPENAI_API_KEY}"},
        )
        response.raise_for_status()
        data = response.json()

        choices = data.get("choices") or []
        content = choices[0].get("message", {}).get("content") if choices else None
        if not content:
            raise AIServiceError("No content returned from OpenAI API", provider="openai")

        usage = data.get("usage")
        return AICompletionResponse(
            content=content,
            usage=TokenUsage(**usage) if usage else None,
            provider="openai",
        )


ai_service = AIService()


def get_ai_service() -> AIService:
    """Dependency for getting the shared AI service."""
    return ai_service
