"""Prompt construction and response parsing for LLM reranking.

The model is asked for a bare JSON array of product PIDs. Anything else is a
RerankFailedError, which callers turn into a vector-only fallback.
"""

import json

from ..ai.ports import LLMMessage
from .errors import RerankFailedError
from .models import RerankRequest

RERANK_SYSTEM_PROMPT = """You are an e-commerce product search assistant. Given a user query and product context,
return a JSON array of product IDs that best match the query. Consider:
1. Relevance to user intent
2. Product quality and rating
3. Value for money
4. Availability

Return only JSON array like: ["pid1", "pid2", "pid3"]"""


def build_rerank_messages(request: RerankRequest) -> list[LLMMessage]:
    """Build the system + user messages for one rerank call."""
    user_prompt = (
        f"User query: {request.query}\n\n"
        f"Available products:\n{request.context}\n\n"
        f"Return top {request.limit} relevant product PIDs:"
    )
    return [
        LLMMessage(role="system", content=RERANK_SYSTEM_PROMPT),
        LLMMessage(role="user", content=user_prompt),
    ]


def parse_ranked_ids(content: str) -> list[str]:
    """Parse the model output strictly as a JSON array of strings.

    Only surrounding whitespace is tolerated; markdown fences, prose or
    non-string elements are rejected.

    Raises:
        RerankFailedError: If the content is not a JSON array of strings
    """
    if content is None:
        raise RerankFailedError("empty rerank response")

    try:
        parsed = json.loads(content.strip())
    except (TypeError, ValueError) as e:
        raise RerankFailedError(f"rerank response is not valid JSON: {e}") from e

    if not isinstance(parsed, list):
        raise RerankFailedError(f"rerank response is a {type(parsed).__name__}, expected a JSON array")

    if not all(isinstance(pid, str) for pid in parsed):
        raise RerankFailedError("rerank response array contains non-string identifiers")

    return parsed
