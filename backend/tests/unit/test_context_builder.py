"""Unit tests for the LLM product context summary."""

from product_search.domain.search.context_builder import summarize_products


class TestSummarizeProducts:
    def test_renders_product_block(self, make_product):
        product = make_product(
            1,
            pid="SHOEABC123",
            title="Running Shoes",
            brand="Stride",
            category="Footwear",
            sub_category="Sports",
            selling_price="1,499",
            actual_price="2,999",
            average_rating="4.2",
            description="Lightweight mesh upper",
        )

        text = summarize_products([product])

        assert text == (
            "Product 1:\n"
            "PID: SHOEABC123\n"
            "Title: Running Shoes\n"
            "Brand: Stride\n"
            "Category: Footwear - Sports\n"
            "Price: 1,499 (Discounted from 2,999)\n"
            "Rating: 4.2\n"
            "Description: Lightweight mesh upper\n"
            "---\n"
        )

    def test_caps_at_five_products(self, make_product):
        products = [make_product(i) for i in range(1, 9)]

        text = summarize_products(products)

        assert "Product 5:" in text
        assert "Product 6:" not in text
        assert text.count("---") == 5

    def test_larger_max_is_still_capped(self, make_product):
        products = [make_product(i) for i in range(1, 9)]

        assert summarize_products(products, max_products=50).count("---") == 5

    def test_long_description_is_truncated(self, make_product):
        product = make_product(1, description="x" * 250)

        text = summarize_products([product])

        assert f"Description: {'x' * 200}...\n" in text

    def test_description_at_limit_is_not_marked(self, make_product):
        product = make_product(1, description="y" * 200)

        text = summarize_products([product])

        assert f"Description: {'y' * 200}\n" in text
        assert "..." not in text

    def test_empty_description_omitted(self, make_product):
        text = summarize_products([make_product(1, description=None)])

        assert "Description:" not in text

    def test_rating_falls_back_to_numeric(self, make_product):
        text = summarize_products([make_product(1, average_rating=None, rating_numeric=3.5)])

        assert "Rating: 3.5\n" in text

    def test_empty_input(self):
        assert summarize_products([]) == ""

    def test_deterministic(self, make_product):
        products = [make_product(i, description="desc") for i in range(1, 4)]

        assert summarize_products(products) == summarize_products(products)
