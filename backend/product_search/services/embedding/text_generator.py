"""Embedding Text Generator - Generate canonical text for embedding.

Provides deterministic text generation from product and query data so that the
same product always yields the same embedding input.
"""

from ...domain.search.models import CatalogProduct

DESCRIPTION_MAX_CHARS = 500
DEFAULT_MAX_INPUT_CHARS = 8000


def generate_product_embedding_text(product: CatalogProduct) -> str:
    """Generate canonical embedding text for a product.

    Format:
        Title: {title}
        Brand: {brand}
        Category: {category} - {sub_category}
        Description: {description, first 500 chars}
        Details: {k}: {v}, {k}: {v},
        Price: {actual_price} (Discounted: {selling_price})
        Rating: {average_rating}
        Seller: {seller}

    Args:
        product: Catalog product

    Returns:
        Canonical text string for embedding

    Example:
        >>> generate_product_embedding_text(CatalogProduct(
        ...     id=1, pid="SHOEABC123", title="Running Shoes", brand="Stride",
        ...     category="Footwear", sub_category="Sports",
        ...     actual_price="2,999", selling_price="1,499", seller="ShoeMart",
        ... ))
        'Title: Running Shoes\\nBrand: Stride\\nCategory: Footwear - Sports\\nPrice: 2,999 (Discounted: 1,499)\\nSeller: ShoeMart\\n'

    Notes:
        - Description, details and rating lines are omitted when empty
        - Detail maps are rendered in stored order
    """
    lines = [
        f"Title: {product.title}",
        f"Brand: {product.brand}",
        f"Category: {product.category} - {product.sub_category}",
    ]

    if product.description:
        lines.append(f"Description: {product.description[:DESCRIPTION_MAX_CHARS]}")

    if product.product_details:
        details = "".join(
            f"{key}: {value}, "
            for detail in product.product_details
            for key, value in detail.items()
        )
        lines.append(f"Details: {details}")

    lines.append(f"Price: {product.actual_price or ''} (Discounted: {product.selling_price or ''})")

    if product.average_rating:
        lines.append(f"Rating: {product.average_rating}")

    lines.append(f"Seller: {product.seller or ''}")

    return "\n".join(lines) + "\n"


def generate_query_embedding_text(query: str) -> str:
    """Generate embedding text for a free-text search query.

    Queries are embedded as typed, minus surrounding whitespace.
    """
    return (query or "").strip()


def truncate_text_for_embedding(text: str, max_chars: int = DEFAULT_MAX_INPUT_CHARS) -> str:
    """Truncate text to the provider input limit.

    Truncation preserves the beginning of the text (title and brand come
    first in the canonical format).
    """
    if len(text) <= max_chars:
        return text
    return text[:max_chars]
