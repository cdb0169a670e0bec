"""AI domain layer - Ports and domain models for embedding/chat providers"""

from .ports import (
    EmbeddingCapability,
    EmbeddingProviderPort,
    EmbeddingResult,
    ChatCompletionPort,
    ChatCompletionResult,
    LLMMessage,
    EmbeddingError,
    ProviderUnavailableError,
    EmbeddingRequestFailedError,
    EmbeddingTimeoutError,
    EmbeddingRateLimitError,
    EmbeddingAuthError,
    EmbeddingEmptyResponseError,
    ChatCompletionError,
    ChatCompletionUnavailableError,
    ChatCompletionInvalidResponseError,
)

__all__ = [
    "EmbeddingCapability",
    "EmbeddingProviderPort",
    "EmbeddingResult",
    "ChatCompletionPort",
    "ChatCompletionResult",
    "LLMMessage",
    "EmbeddingError",
    "ProviderUnavailableError",
    "EmbeddingRequestFailedError",
    "EmbeddingTimeoutError",
    "EmbeddingRateLimitError",
    "EmbeddingAuthError",
    "EmbeddingEmptyResponseError",
    "ChatCompletionError",
    "ChatCompletionUnavailableError",
    "ChatCompletionInvalidResponseError",
]
