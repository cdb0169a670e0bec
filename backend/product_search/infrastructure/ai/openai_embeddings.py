"""OpenAI Embedding Adapter - Implementation of EmbeddingProviderPort using OpenAI API.

Works against api.openai.com or any OpenAI-compatible endpoint configured via
EmbeddingCapability.base_url.

Architecture: Hexagonal - Infrastructure adapter implementing domain port
"""

import logging
import time
from typing import Optional

from openai import OpenAI, APIError, APITimeoutError, RateLimitError, AuthenticationError

from ...domain.ai.ports import (
    EmbeddingCapability,
    EmbeddingProviderPort,
    EmbeddingResult,
    ProviderUnavailableError,
    EmbeddingRequestFailedError,
    EmbeddingTimeoutError,
    EmbeddingRateLimitError,
    EmbeddingAuthError,
    EmbeddingEmptyResponseError,
)
from ...observability.metrics import ai_calls_total, ai_latency_ms, ai_tokens_total

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_MODEL = "text-embedding-ada-002"
DEFAULT_MAX_INPUT_CHARS = 8000


class OpenAIEmbeddingAdapter(EmbeddingProviderPort):
    """OpenAI implementation of EmbeddingProviderPort.

    The adapter is always constructible: with a disabled capability no client
    is created and every call raises ProviderUnavailableError.

    Example Usage:
        adapter = OpenAIEmbeddingAdapter(EmbeddingCapability(api_key="sk-..."))
        result = adapter.embed_text("Title: Running Shoes\\nBrand: Stride\\n")
        # result.embedding is list[float] of length 1536
    """

    def __init__(
        self,
        capability: EmbeddingCapability,
        model: str = DEFAULT_EMBEDDING_MODEL,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
        timeout: float = 30.0,
        client: Optional[OpenAI] = None,
    ):
        """Initialize OpenAI embedding adapter.

        Args:
            capability: Feature flag and credentials
            model: Embedding model name
            max_input_chars: Input is truncated to this many characters
            timeout: Request timeout in seconds
            client: Preconfigured OpenAI client (tests inject a mock)
        """
        self._capability = capability
        self.model = model
        self.max_input_chars = max_input_chars
        self.timeout = timeout
        self.client = client
        if self.client is None and capability.enabled:
            self.client = OpenAI(
                api_key=capability.api_key,
                base_url=capability.base_url or None,
                timeout=timeout,
            )

    @property
    def capability(self) -> EmbeddingCapability:
        return self._capability

    def embed_text(self, text: str) -> EmbeddingResult:
        """Generate embedding vector for text using the embeddings API.

        Args:
            text: Text to embed; silently truncated to ``max_input_chars``

        Returns:
            EmbeddingResult with vector, tokens and latency

        Raises:
            ProviderUnavailableError: Capability disabled / no credentials
            ValueError: If text is empty
            EmbeddingAuthError / EmbeddingRateLimitError / EmbeddingTimeoutError:
                Specific provider faults (all EmbeddingRequestFailedError)
            EmbeddingRequestFailedError: Any other transport or API error
            EmbeddingEmptyResponseError: Provider returned no vectors
        """
        if not self._capability.enabled or self.client is None:
            raise ProviderUnavailableError("Embedding provider is not configured")

        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        if len(text) > self.max_input_chars:
            text = text[:self.max_input_chars]

        start_time = time.perf_counter()

        try:
            response = self.client.embeddings.create(
                model=self.model,
                input=[text],
            )
        except AuthenticationError as e:
            ai_calls_total.labels(call_type="embedding", status="error").inc()
            raise EmbeddingAuthError(f"OpenAI authentication failed: {e}") from e
        except RateLimitError as e:
            ai_calls_total.labels(call_type="embedding", status="error").inc()
            raise EmbeddingRateLimitError(f"OpenAI rate limit exceeded: {e}") from e
        except APITimeoutError as e:
            ai_calls_total.labels(call_type="embedding", status="error").inc()
            raise EmbeddingTimeoutError(f"OpenAI request timed out: {e}") from e
        except APIError as e:
            ai_calls_total.labels(call_type="embedding", status="error").inc()
            raise EmbeddingRequestFailedError(f"OpenAI API error: {e}") from e
        except Exception as e:
            ai_calls_total.labels(call_type="embedding", status="error").inc()
            raise EmbeddingRequestFailedError(f"Unexpected error from OpenAI: {e}") from e

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        ai_latency_ms.labels(call_type="embedding").observe(latency_ms)

        if not response.data:
            ai_calls_total.labels(call_type="embedding", status="error").inc()
            raise EmbeddingEmptyResponseError("No embedding data returned")

        embedding = list(response.data[0].embedding)
        if not embedding:
            ai_calls_total.labels(call_type="embedding", status="error").inc()
            raise EmbeddingEmptyResponseError("Provider returned an empty embedding vector")

        tokens = response.usage.total_tokens if getattr(response, "usage", None) else 0

        ai_calls_total.labels(call_type="embedding", status="success").inc()
        ai_tokens_total.labels(call_type="embedding", direction="input").inc(tokens or 0)

        return EmbeddingResult(
            embedding=embedding,
            model=self.model,
            dimension=len(embedding),
            tokens=tokens or 0,
            latency_ms=latency_ms,
        )
