from __future__ import annotations

import unittest

from lib.schema_builder import build_faq_schema, build_product_schema, humanize_key
from schemas.common import FAQ, ProductImage
from schemas.product import Product, ProductSpecifications


def _product(**overrides) -> Product:
    data = dict(
        id="p1",
        name="Pro Chef Knife",
        slug="pro-chef-knife",
        price=129.0,
        count_in_stock=4,
        images=[ProductImage(url="https://cdn.example/1.jpg"), ProductImage(url="https://cdn.example/2.jpg")],
        specifications=ProductSpecifications(bladeLength="8 in", handleMaterial="Rosewood"),
    )
    data.update(overrides)
    return Product(**data)


class TestSchemaBuilder(unittest.TestCase):
    def test_humanize_key(self) -> None:
        self.assertEqual(humanize_key("bladeLength"), "blade Length")
        self.assertEqual(humanize_key("weight"), "weight")
        self.assertEqual(humanize_key("BladeStyle"), "Blade Style")

    def test_minimal_product_schema(self) -> None:
        schema = build_product_schema(
            _product(specifications=ProductSpecifications()),
            None,
            site_url="https://gladiustraders.com/",
            default_brand="Gladius",
        )

        self.assertEqual(schema["@context"], "https://schema.org/")
        self.assertEqual(schema["@type"], "Product")
        self.assertEqual(schema["image"], ["https://cdn.example/1.jpg", "https://cdn.example/2.jpg"])
        self.assertEqual(schema["brand"], {"@type": "Brand", "name": "Gladius"})
        self.assertEqual(schema["offers"]["url"], "https://gladiustraders.com/product/pro-chef-knife")
        self.assertEqual(schema["offers"]["priceCurrency"], "USD")
        self.assertEqual(schema["offers"]["availability"], "https://schema.org/InStock")
        self.assertEqual(schema["offers"]["itemCondition"], "https://schema.org/NewCondition")
        for key in ("description", "aggregateRating", "category", "additionalProperty"):
            self.assertNotIn(key, schema)

    def test_optional_parts(self) -> None:
        product = _product(description="Hand forged.", rating=4.5, num_reviews=12, brand="Kaiju", count_in_stock=0)
        schema = build_product_schema(product, "Chef Knife", site_url="https://gladiustraders.com")

        self.assertEqual(schema["description"], "Hand forged.")
        self.assertEqual(schema["brand"]["name"], "Kaiju")
        self.assertEqual(schema["category"], "Chef Knife")
        self.assertEqual(schema["offers"]["availability"], "https://schema.org/OutOfStock")
        self.assertEqual(
            schema["aggregateRating"],
            {"@type": "AggregateRating", "ratingValue": 4.5, "reviewCount": 12},
        )
        self.assertEqual(
            schema["additionalProperty"],
            [
                {"@type": "PropertyValue", "name": "blade Length", "value": "8 in"},
                {"@type": "PropertyValue", "name": "handle Material", "value": "Rosewood"},
            ],
        )

    def test_rating_without_reviews_is_omitted(self) -> None:
        schema = build_product_schema(_product(rating=5.0, num_reviews=0), "Chef Knife")
        self.assertNotIn("aggregateRating", schema)

    def test_faq_schema(self) -> None:
        schema = build_faq_schema([FAQ(question="Is it dishwasher safe?", answer="Hand wash only.")])
        self.assertEqual(schema["@type"], "FAQPage")
        self.assertEqual(
            schema["mainEntity"],
            [
                {
                    "@type": "Question",
                    "name": "Is it dishwasher safe?",
                    "acceptedAnswer": {"@type": "Answer", "text": "Hand wash only."},
                }
            ],
        )


if __name__ == "__main__":
    unittest.main()
