from __future__ import annotations

import re
from typing import Any, Iterable

from schemas.common import FAQ
from schemas.product import Product


DEFAULT_SITE_URL = "https://gladiustraders.com"
DEFAULT_BRAND = "Gladius"

_INTERIOR_CAPITAL = re.compile(r"(?<=.)([A-Z])")


def humanize_key(key: str) -> str:
    """bladeLength -> 'blade Length' (space before interior capitals)."""
    return _INTERIOR_CAPITAL.sub(r" \1", str(key or "")).strip()


def _image_urls(product: Product) -> list[str]:
    return [img.url for img in product.images if img.url]


def build_product_schema(
    product: Product,
    category_name: str | None,
    *,
    site_url: str = DEFAULT_SITE_URL,
    default_brand: str = DEFAULT_BRAND,
) -> dict[str, Any]:
    """
    schema.org Product markup for a catalog product.

    Optional parts (rating, category, additionalProperty) are omitted when
    there is nothing to say; this never raises on a valid Product.
    """
    schema: dict[str, Any] = {
        "@context": "https://schema.org/",
        "@type": "Product",
        "name": product.name,
        "image": _image_urls(product),
        "brand": {
            "@type": "Brand",
            "name": product.brand or default_brand,
        },
        "offers": {
            "@type": "Offer",
            "url": f"{site_url.rstrip('/')}/product/{product.slug}",
            "priceCurrency": "USD",
            "price": product.price,
            "availability": (
                "https://schema.org/InStock" if product.count_in_stock > 0 else "https://schema.org/OutOfStock"
            ),
            "itemCondition": "https://schema.org/NewCondition",
        },
    }

    if product.description:
        schema["description"] = product.description

    if product.rating and product.num_reviews > 0:
        schema["aggregateRating"] = {
            "@type": "AggregateRating",
            "ratingValue": product.rating,
            "reviewCount": product.num_reviews,
        }

    if category_name:
        schema["category"] = category_name

    properties = [
        {
            "@type": "PropertyValue",
            "name": humanize_key(key),
            "value": value,
        }
        for key, value in product.specifications.filled().items()
    ]
    if properties:
        schema["additionalProperty"] = properties

    return schema


def build_faq_schema(faqs: Iterable[FAQ]) -> dict[str, Any]:
    return {
        "@context": "https://schema.org",
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": faq.question,
                "acceptedAnswer": {
                    "@type": "Answer",
                    "text": faq.answer,
                },
            }
            for faq in faqs
        ],
    }
