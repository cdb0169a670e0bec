"""AI Provider Ports - Abstract interfaces for embedding and chat-completion providers.

Hexagonal Architecture: These are domain ports that infrastructure adapters implement.
Search logic depends on these ports, not on concrete implementations (OpenAI,
OpenAI-compatible gateways, test stubs).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class EmbeddingResult:
    """Result from embedding generation call.

    Attributes:
        embedding: Vector embedding (list of floats, 1536-dim for ada-002)
        model: Model name (e.g., 'text-embedding-ada-002')
        dimension: Embedding dimension
        tokens: Number of tokens used (0 if provider doesn't report)
        latency_ms: Wall-clock latency of the provider call
    """
    embedding: list[float]
    model: str
    dimension: int
    tokens: int = 0
    latency_ms: int = 0


@dataclass
class LLMMessage:
    """Message format for LLM conversations.

    Attributes:
        role: Message role ('system', 'user', 'assistant')
        content: Text content
    """
    role: str
    content: str


@dataclass
class ChatCompletionResult:
    """Result from a chat-completion call.

    Attributes:
        content: Content of the first choice's message
        model: Model name used for the call
        tokens_in: Prompt tokens (None if provider doesn't report)
        tokens_out: Completion tokens (None if provider doesn't report)
        latency_ms: Latency in milliseconds
    """
    content: str
    model: str
    tokens_in: Optional[int] = None
    tokens_out: Optional[int] = None
    latency_ms: int = 0


@dataclass(frozen=True)
class EmbeddingCapability:
    """Explicit feature flag for the semantic search subsystem.

    The presence of provider credentials is the single authoritative switch:
    adapters receive this object in their constructor and every search
    component checks ``enabled`` before attempting a provider call.

    Attributes:
        api_key: Provider API key (None disables the subsystem)
        base_url: Optional OpenAI-compatible endpoint
        switched_on: Operator kill switch (EMBEDDINGS_ENABLED)
    """
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    switched_on: bool = True

    @property
    def enabled(self) -> bool:
        return self.switched_on and bool(self.api_key)

    @classmethod
    def from_settings(cls, settings) -> "EmbeddingCapability":
        return cls(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            switched_on=settings.EMBEDDINGS_ENABLED,
        )

    @classmethod
    def disabled(cls) -> "EmbeddingCapability":
        return cls(api_key=None, switched_on=False)


class EmbeddingProviderPort(ABC):
    """Abstract interface for embedding providers.

    Implementations must handle:
    - API authentication (via EmbeddingCapability)
    - Input truncation to the provider limit
    - Response parsing
    - Error mapping (timeouts, rate limits, empty responses)

    Example Usage:
        provider = OpenAIEmbeddingAdapter(capability)
        result = provider.embed_text("wireless noise cancelling headphones")
        # result.embedding is list[float]
    """

    @property
    @abstractmethod
    def capability(self) -> EmbeddingCapability:
        """Capability the adapter was built with."""
        pass

    @abstractmethod
    def embed_text(self, text: str) -> EmbeddingResult:
        """Generate embedding vector for text.

        Args:
            text: Text to embed (product canonical text or query)

        Returns:
            EmbeddingResult with vector and metadata

        Raises:
            ProviderUnavailableError: No credentials/endpoint configured
            EmbeddingRequestFailedError: Transport or API error (incl. subclasses)
            EmbeddingEmptyResponseError: Provider returned zero vectors

        Notes:
            - Text longer than the configured maximum is truncated, not rejected
            - No retries are performed; callers own backoff
        """
        pass


class ChatCompletionPort(ABC):
    """Abstract interface for chat-completion providers used for reranking."""

    @abstractmethod
    def complete(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.3,
        max_tokens: int = 500,
    ) -> ChatCompletionResult:
        """Issue a single chat-completion request.

        Args:
            messages: Conversation (system instruction + user turn)
            temperature: Sampling temperature
            max_tokens: Output size bound

        Returns:
            ChatCompletionResult with the first choice's content

        Raises:
            ChatCompletionError: Any provider, transport or response fault
        """
        pass


# Custom exceptions for embedding operations
class EmbeddingError(Exception):
    """Base exception for embedding operations"""
    pass


class ProviderUnavailableError(EmbeddingError):
    """No credentials or endpoint configured for the provider"""
    pass


class EmbeddingRequestFailedError(EmbeddingError):
    """Transport or API error while requesting an embedding"""
    pass


class EmbeddingTimeoutError(EmbeddingRequestFailedError):
    """Embedding request timed out"""
    pass


class EmbeddingRateLimitError(EmbeddingRequestFailedError):
    """Rate limit exceeded"""
    pass


class EmbeddingAuthError(EmbeddingRequestFailedError):
    """Authentication failed"""
    pass


class EmbeddingEmptyResponseError(EmbeddingError):
    """Provider answered but returned no embedding vectors"""
    pass


# Custom exceptions for chat-completion operations
class ChatCompletionError(Exception):
    """Base exception for chat-completion operations"""
    pass


class ChatCompletionUnavailableError(ChatCompletionError):
    """No credentials or endpoint configured for the provider"""
    pass


class ChatCompletionInvalidResponseError(ChatCompletionError):
    """Provider returned no choices or empty content"""
    pass
