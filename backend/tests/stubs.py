"""Stub providers and an in-memory repository for search tests."""

from typing import Optional

from product_search.domain.ai.ports import (
    ChatCompletionPort,
    ChatCompletionResult,
    EmbeddingCapability,
    EmbeddingProviderPort,
    EmbeddingResult,
    EmbeddingRequestFailedError,
    LLMMessage,
)
from product_search.domain.search.models import CatalogProduct, ProductFilters
from product_search.domain.search.ports import ProductRepositoryPort


ENABLED = EmbeddingCapability(api_key="test-key")


class StubEmbeddingProvider(EmbeddingProviderPort):
    """Deterministic embedding provider.

    Texts registered in ``vectors`` get that vector; any other text gets
    ``default``. Texts containing a string from ``fail_on`` raise
    EmbeddingRequestFailedError.
    """

    def __init__(
        self,
        vectors: Optional[dict[str, list[float]]] = None,
        default: Optional[list[float]] = None,
        fail_on: tuple[str, ...] = (),
        capability: EmbeddingCapability = ENABLED,
    ):
        self.vectors = vectors or {}
        self.default = default if default is not None else [1.0, 0.0]
        self.fail_on = fail_on
        self._capability = capability
        self.calls: list[str] = []

    @property
    def capability(self) -> EmbeddingCapability:
        return self._capability

    def embed_text(self, text: str) -> EmbeddingResult:
        self.calls.append(text)
        if any(marker in text for marker in self.fail_on):
            raise EmbeddingRequestFailedError(f"stub failure for {text[:20]!r}")
        vector = self.vectors.get(text, self.default)
        return EmbeddingResult(embedding=list(vector), model="stub", dimension=len(vector))


class StubChatProvider(ChatCompletionPort):
    """Chat provider returning a fixed content string, or raising ``error``."""

    def __init__(self, content: str = "[]", error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: list[list[LLMMessage]] = []
        self.kwargs: list[dict] = []

    def complete(self, messages, temperature=0.3, max_tokens=500) -> ChatCompletionResult:
        self.calls.append(messages)
        self.kwargs.append({"temperature": temperature, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return ChatCompletionResult(content=self.content, model="stub")


class InMemoryProductRepository(ProductRepositoryPort):
    """ProductRepositoryPort over a list, ordered by id."""

    def __init__(self, products: Optional[list[CatalogProduct]] = None):
        self.products = sorted(products or [], key=lambda p: p.id)
        self.batch_writes: list[dict[int, list[float]]] = []
        self.fail_writes = False

    def _matches(self, product: CatalogProduct, filters: Optional[ProductFilters]) -> bool:
        if filters is None:
            return True
        if filters.category and product.category != filters.category:
            return False
        if filters.sub_category and product.sub_category != filters.sub_category:
            return False
        if filters.brand and product.brand != filters.brand:
            return False
        if filters.in_stock and product.out_of_stock:
            return False
        price_range = filters.price_range
        if price_range is not None:
            if price_range.min_price > 0 and product.price_numeric < price_range.min_price:
                return False
            if price_range.max_price > 0 and product.price_numeric > price_range.max_price:
                return False
        return True

    def list_products(self, filters, page, page_size):
        matching = [p for p in self.products if self._matches(p, filters)]
        start = (page - 1) * page_size
        return matching[start:start + page_size], len(matching)

    def get_product_by_pid(self, pid):
        for product in self.products:
            if product.pid == pid:
                return product
        return None

    def update_embedding(self, product_id, embedding):
        self.batch_update_embeddings({product_id: embedding})

    def batch_update_embeddings(self, embeddings):
        if self.fail_writes:
            raise RuntimeError("write failed")
        self.batch_writes.append(dict(embeddings))
        for product in self.products:
            if product.id in embeddings:
                product.embedding = list(embeddings[product.id])
        return len(embeddings)

    def products_without_embeddings(self, limit):
        return [p for p in self.products if not p.has_embedding][:limit]

    def products_with_embeddings(self, filters, limit):
        return [p for p in self.products if p.has_embedding and self._matches(p, filters)][:limit]
