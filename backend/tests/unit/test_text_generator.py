"""Unit tests for canonical embedding text."""

from product_search.services.embedding.text_generator import (
    generate_product_embedding_text,
    generate_query_embedding_text,
    truncate_text_for_embedding,
)


class TestProductEmbeddingText:
    def test_full_product(self, make_product):
        product = make_product(
            1,
            title="Cotton Shirt",
            brand="Weave",
            category="Clothing",
            sub_category="Shirts",
            description="Soft breathable cotton",
            product_details=[{"Fabric": "Cotton"}, {"Fit": "Regular"}],
            actual_price="1,999",
            selling_price="999",
            average_rating="4.3",
            seller="Weave Store",
        )

        text = generate_product_embedding_text(product)

        assert text == (
            "Title: Cotton Shirt\n"
            "Brand: Weave\n"
            "Category: Clothing - Shirts\n"
            "Description: Soft breathable cotton\n"
            "Details: Fabric: Cotton, Fit: Regular, \n"
            "Price: 1,999 (Discounted: 999)\n"
            "Rating: 4.3\n"
            "Seller: Weave Store\n"
        )

    def test_optional_lines_omitted(self, make_product):
        text = generate_product_embedding_text(
            make_product(1, description=None, product_details=[], average_rating=None)
        )

        assert "Description:" not in text
        assert "Details:" not in text
        assert "Rating:" not in text

    def test_description_capped_at_500_chars(self, make_product):
        text = generate_product_embedding_text(make_product(1, description="d" * 900))

        assert f"Description: {'d' * 500}\n" in text

    def test_deterministic(self, make_product):
        product = make_product(1, product_details=[{"a": "1"}])

        assert generate_product_embedding_text(product) == generate_product_embedding_text(product)


class TestQueryText:
    def test_strips_whitespace(self):
        assert generate_query_embedding_text("  blue jeans \n") == "blue jeans"

    def test_blank_query(self):
        assert generate_query_embedding_text("   ") == ""


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate_text_for_embedding("abc", max_chars=5) == "abc"

    def test_long_text_cut(self):
        assert truncate_text_for_embedding("a" * 9000) == "a" * 8000
