"""
Retrying call gateway.

Every outbound generate-content call goes through LanguageGateway, which
merges the caller's cognitive configuration into the request, retries
transient failures with exponential backoff, and captures usage data.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol

from ..core.budget import BudgetGuard
from ..core.thinking import (
    DEFAULT_SPEED,
    EmbeddingModel,
    GenAIState,
    ThinkingShape,
    supports_trace,
)
from ..core.token_counter import TokenUsage

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (503, 429)

# Callback invoked with (model, usage, retry_count, response_id) after each successful call
UsageRecorder = Callable[[str, TokenUsage, int, Optional[str]], None]


class LanguageClient(Protocol):
    """Generate/embed capability the gateway depends on."""

    async def generate_content(self, contents: Any, model: str, config: Dict[str, Any]) -> Any:
        ...

    async def embed_content(self, contents: Any, model: str) -> Any:
        ...


class MaxRetriesExceeded(Exception):
    """Raised when every attempt failed with a retryable error."""
    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(f"Max retries exceeded after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff settings. Delays are in seconds."""
    max_attempts: int = 5
    initial_delay: float = 1.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.initial_delay < 0:
            raise ValueError("initial_delay cannot be negative")


@dataclass(frozen=True)
class CallRequest:
    """One outbound generate-content request."""
    payload: Any
    shape: ThinkingShape
    system_instruction: str = ""
    model_override: Optional[str] = None

    @property
    def model(self) -> str:
        model = self.model_override or self.shape.speed or DEFAULT_SPEED
        return str(getattr(model, "value", model))

    def to_config(self) -> Dict[str, Any]:
        """Provider config for this request.

        The thinking block is only sent when traces are explicitly enabled
        and the model accepts one.
        """
        config: Dict[str, Any] = {"system_instruction": self.system_instruction}
        if self.shape.include_thoughts:
            if supports_trace(self.model):
                config["thinking_config"] = {
                    "include_thoughts": True,
                    "thinking_level": self.shape.thinking_level.value,
                }
            else:
                logger.debug("Model %s does not support thinking traces, ignoring", self.model)
        return config

    def prompt_text(self) -> str:
        """Flattened request text, used for cost projection."""
        payload = self.payload if isinstance(self.payload, str) else json.dumps(self.payload, default=str)
        return self.system_instruction + payload


@dataclass(frozen=True)
class CallOutcome:
    """Normalized result of a successful call."""
    text: str
    usage_metadata: TokenUsage
    model: str
    attempts: int = 1
    raw: Any = None


def _status_of(error: BaseException) -> Optional[int]:
    for attr in ("code", "status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    nested = getattr(error, "error", None)
    if isinstance(nested, dict) and isinstance(nested.get("code"), int):
        return nested["code"]
    return None


def is_retryable(error: BaseException) -> bool:
    """Whether an error signals 503 or 429.

    Checks status attributes first, then the message text.
    """
    if _status_of(error) in RETRYABLE_STATUS_CODES:
        return True
    message = str(error)
    return any(str(code) in message for code in RETRYABLE_STATUS_CODES)


def _usage_from_response(response: Any) -> TokenUsage:
    usage = getattr(response, "usage_metadata", None)
    if usage is None:
        return TokenUsage(prompt_tokens=0, completion_tokens=0)
    return TokenUsage(
        prompt_tokens=getattr(usage, "prompt_token_count", None) or 0,
        completion_tokens=getattr(usage, "candidates_token_count", None) or 0,
        cached_tokens=getattr(usage, "cached_content_token_count", None) or 0,
    )


class LanguageGateway:
    """Retrying, cost-aware wrapper around a LanguageClient.

    Calls are strictly sequential; the only suspension points are the
    outbound call and the backoff delay.
    """

    def __init__(
        self,
        client: LanguageClient,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        usage_recorder: Optional[UsageRecorder] = None,
        budget: Optional[BudgetGuard] = None,
    ):
        self.client = client
        self.retry_policy = retry_policy or RetryPolicy()
        self.usage_recorder = usage_recorder
        self.budget = budget
        self._sleep = sleep

    async def _with_retry(self, operation: Callable[[], Awaitable[Any]]) -> tuple:
        """Run operation, retrying 503/429 with exponential backoff.

        Returns:
            (result, attempts) of the first successful attempt

        Raises:
            MaxRetriesExceeded: If every attempt failed with a retryable error
            Exception: Any non-retryable error, unmodified
        """
        policy = self.retry_policy
        delay = policy.initial_delay
        for attempt in range(1, policy.max_attempts + 1):
            try:
                return await operation(), attempt
            except Exception as error:
                if not is_retryable(error):
                    raise
                if attempt == policy.max_attempts:
                    raise MaxRetriesExceeded(attempt, error) from error
                logger.warning(
                    "API error %s - retrying in %.1fs (attempt %d/%d)",
                    _status_of(error) or "unknown", delay, attempt, policy.max_attempts,
                )
                await self._sleep(delay)
                delay *= 2
        raise AssertionError("unreachable")

    async def process(
        self,
        contents: Any,
        genai_state: GenAIState,
        model_override: Optional[str] = None,
    ) -> CallOutcome:
        """Send contents using the caller's cognitive configuration.

        Args:
            contents: Prompt text or structured content
            genai_state: Thinking shape and system instruction, read now
            model_override: Model to use instead of the shape's speed

        Returns:
            CallOutcome with the response text ("" if the model returned none)

        Raises:
            MaxRetriesExceeded: After exhausting retries on 503/429
            BudgetExceeded: If the budget guard blocks the call
        """
        request = CallRequest(
            payload=contents,
            shape=genai_state.shape,
            system_instruction=genai_state.system_instruction,
            model_override=model_override,
        )
        model = request.model
        config = request.to_config()

        if self.budget is not None:
            self.budget.check(model, request.prompt_text())

        response, attempts = await self._with_retry(
            lambda: self.client.generate_content(contents=contents, model=model, config=config)
        )

        usage = _usage_from_response(response)
        logger.info(
            "Usage for %s: input=%d output=%d cached=%d",
            model, usage.prompt_tokens, usage.completion_tokens, usage.cached_tokens,
        )
        if self.budget is not None:
            self.budget.charge(model, usage)
        if self.usage_recorder is not None:
            self.usage_recorder(model, usage, attempts - 1, getattr(response, "response_id", None))

        text = getattr(response, "text", None)
        if not text:
            logger.warning("No text generated by %s", model)
            text = ""

        return CallOutcome(
            text=text,
            usage_metadata=usage,
            model=model,
            attempts=attempts,
            raw=response,
        )

    async def embed(self, contents: Any, model: str = EmbeddingModel.STANDARD.value) -> Any:
        """Embed contents, with the same retry policy as process."""
        embeddings, _ = await self._with_retry(
            lambda: self.client.embed_content(contents=contents, model=model)
        )
        return embeddings
