"""
OpenAI Chat Provider - Concrete implementation of ChatCompletionPort for OpenAI.

Used by the RAG search to rerank vector-search candidates.
"""

import logging
import time
from typing import Optional

from openai import OpenAI, APIError, RateLimitError, APITimeoutError, AuthenticationError

from ...domain.ai.ports import (
    ChatCompletionPort,
    ChatCompletionResult,
    ChatCompletionError,
    ChatCompletionUnavailableError,
    ChatCompletionInvalidResponseError,
    EmbeddingCapability,
    LLMMessage,
)
from ...observability.metrics import ai_calls_total, ai_latency_ms, ai_tokens_total

logger = logging.getLogger(__name__)

DEFAULT_CHAT_MODEL = "gpt-3.5-turbo"


class OpenAIChatProvider(ChatCompletionPort):
    """
    OpenAI implementation of ChatCompletionPort.

    Every provider, transport or response fault is raised as a
    ChatCompletionError so callers can fall back with a single except clause.
    """

    def __init__(
        self,
        capability: EmbeddingCapability,
        model: str = DEFAULT_CHAT_MODEL,
        timeout: float = 30.0,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize OpenAI chat provider.

        Args:
            capability: Feature flag and credentials (shared with embeddings)
            model: Chat model name
            timeout: Request timeout in seconds
            client: Preconfigured OpenAI client (tests inject a mock)
        """
        self.capability = capability
        self.model = model
        self.client = client
        if self.client is None and capability.enabled:
            self.client = OpenAI(
                api_key=capability.api_key,
                base_url=capability.base_url or None,
                timeout=timeout,
            )

    def complete(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.3,
        max_tokens: int = 500,
    ) -> ChatCompletionResult:
        """
        Issue one chat-completion request.

        Args:
            messages: System instruction and user turn
            temperature: Sampling temperature
            max_tokens: Output size bound

        Returns:
            ChatCompletionResult with the first choice's content

        Raises:
            ChatCompletionUnavailableError: Capability disabled
            ChatCompletionInvalidResponseError: No choices / empty content
            ChatCompletionError: Any other provider or transport fault
        """
        if not self.capability.enabled or self.client is None:
            raise ChatCompletionUnavailableError("Chat-completion provider is not configured")

        start_time = time.perf_counter()

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": m.role, "content": m.content} for m in messages],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except AuthenticationError as e:
            ai_calls_total.labels(call_type="chat", status="error").inc()
            raise ChatCompletionError(f"OpenAI authentication failed: {e}") from e
        except RateLimitError as e:
            ai_calls_total.labels(call_type="chat", status="error").inc()
            raise ChatCompletionError(f"OpenAI rate limit exceeded: {e}") from e
        except APITimeoutError as e:
            ai_calls_total.labels(call_type="chat", status="error").inc()
            raise ChatCompletionError(f"OpenAI API timeout: {e}") from e
        except APIError as e:
            ai_calls_total.labels(call_type="chat", status="error").inc()
            raise ChatCompletionError(f"OpenAI service error: {e}") from e
        except Exception as e:
            ai_calls_total.labels(call_type="chat", status="error").inc()
            raise ChatCompletionError(f"Unexpected error calling OpenAI: {e}") from e

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        ai_latency_ms.labels(call_type="chat").observe(latency_ms)

        if not response.choices or response.choices[0].message is None:
            ai_calls_total.labels(call_type="chat", status="error").inc()
            raise ChatCompletionInvalidResponseError("No choices returned from chat completion")

        content = response.choices[0].message.content
        if not content:
            ai_calls_total.labels(call_type="chat", status="error").inc()
            raise ChatCompletionInvalidResponseError("Chat completion returned empty content")

        usage = getattr(response, "usage", None)
        prompt_tokens = usage.prompt_tokens if usage else None
        completion_tokens = usage.completion_tokens if usage else None

        ai_calls_total.labels(call_type="chat", status="success").inc()
        if prompt_tokens:
            ai_tokens_total.labels(call_type="chat", direction="input").inc(prompt_tokens)
        if completion_tokens:
            ai_tokens_total.labels(call_type="chat", direction="output").inc(completion_tokens)

        return ChatCompletionResult(
            content=content,
            model=self.model,
            tokens_in=prompt_tokens,
            tokens_out=completion_tokens,
            latency_ms=latency_ms,
        )
