"""Render a compact product summary for LLM prompts."""

from typing import Sequence

from .models import CatalogProduct

MAX_CONTEXT_PRODUCTS = 5
DESCRIPTION_PREVIEW_CHARS = 200


def _rating(product: CatalogProduct) -> str:
    if product.average_rating:
        return product.average_rating
    return f"{product.rating_numeric:.1f}"


def summarize_products(
    products: Sequence[CatalogProduct],
    max_products: int = MAX_CONTEXT_PRODUCTS,
) -> str:
    """Format products as numbered text blocks.

    Only the first ``max_products`` (at most 5) are rendered so the prompt
    stays bounded. Descriptions longer than 200 characters are cut and
    suffixed with "...".

    Example:
        Product 1:
        PID: SHOEABC123
        Title: Running Shoes
        Brand: Stride
        Category: Footwear - Sports
        Price: 1,499 (Discounted from 2,999)
        Rating: 4.2
        Description: Lightweight mesh upper...
        ---
    """
    lines = []
    for position, product in enumerate(products[:min(max_products, MAX_CONTEXT_PRODUCTS)], start=1):
        lines.append(f"Product {position}:")
        lines.append(f"PID: {product.pid}")
        lines.append(f"Title: {product.title}")
        lines.append(f"Brand: {product.brand}")
        lines.append(f"Category: {product.category} - {product.sub_category}")
        lines.append(
            f"Price: {product.selling_price or ''} (Discounted from {product.actual_price or ''})"
        )
        lines.append(f"Rating: {_rating(product)}")
        if product.description:
            description = product.description
            if len(description) > DESCRIPTION_PREVIEW_CHARS:
                description = description[:DESCRIPTION_PREVIEW_CHARS] + "..."
            lines.append(f"Description: {description}")
        lines.append("---")

    if not lines:
        return ""
    return "\n".join(lines) + "\n"
