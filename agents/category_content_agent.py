from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from agents.content_generator import ContentGenerator, format_price
from agents.prompt_templates import render_prompt
from lib.catalog_store import CategoryContentStore, CategoryStore, ProductStore
from lib.errors import NotFoundError, ProviderError
from schemas.category import Category, CategoryContent
from schemas.common import SampleProduct


logger = logging.getLogger(__name__)

MAX_SAMPLE_PRODUCTS = 10
MAX_PROMPT_EXAMPLES = 3


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def fallback_category_description(category_name: str) -> str:
    return (
        f"Explore our collection of {category_name.lower()}s. "
        "Each piece is crafted for precision and durability."
    )


@dataclass(frozen=True)
class CategoryContentResult:
    category: Category
    content: CategoryContent
    product_count: int
    created: bool


class CategoryContentGenerator:
    """
    Buying guide + description for a category, stored as one CategoryContent
    document per category (created on first run, overwritten afterwards).
    """

    def __init__(
        self,
        *,
        generator: ContentGenerator,
        categories: CategoryStore,
        products: ProductStore,
        contents: CategoryContentStore,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.generator = generator
        self.categories = categories
        self.products = products
        self.contents = contents
        self.clock = clock

    async def build_buying_guide(self, category_name: str, sample_products: Sequence[SampleProduct]) -> Optional[str]:
        async def produce() -> str:
            examples = "\n".join(
                f"- {p.name} (${format_price(p.price)})" for p in list(sample_products)[:MAX_PROMPT_EXAMPLES]
            )
            prompt = render_prompt(
                "buying_guide",
                category=category_name,
                product_examples=examples or "Various professional knives",
            )
            text = await self.generator.complete(prompt)
            if not text:
                raise ProviderError("AI buying guide response was empty")
            logger.info("Generated buying guide for %s (%d chars)", category_name, len(text))
            return text

        return await self.generator.resolve("buying_guide", produce)

    async def build_category_description(self, category_name: str, product_count: int) -> str:
        async def produce() -> str:
            prompt = render_prompt(
                "category_description",
                category=category_name,
                product_count=product_count,
            )
            text = await self.generator.complete(prompt)
            if not text:
                raise ProviderError("AI category description response was empty")
            return text

        return await self.generator.resolve(
            "category_description",
            produce,
            lambda: fallback_category_description(category_name),
        )

    async def generate_for_category(self, category_id: str) -> CategoryContentResult:
        category = self.categories.find_by_id(category_id)
        if category is None:
            raise NotFoundError("Category not found")

        samples = [
            SampleProduct(name=p.name, price=p.price, specifications=p.specifications.filled())
            for p in self.products.find_by_category(category.id, limit=MAX_SAMPLE_PRODUCTS)
        ]

        buying_guide = await self.build_buying_guide(category.name, samples)
        description = await self.build_category_description(category.name, len(samples))

        content, created = self._upsert(category, description=description, buying_guide=buying_guide)
        logger.info("Generated buying guide for category: %s", category.name)
        return CategoryContentResult(category=category, content=content, product_count=len(samples), created=created)

    def _upsert(
        self,
        category: Category,
        *,
        description: str,
        buying_guide: Optional[str],
    ) -> tuple[CategoryContent, bool]:
        existing = self.contents.find_one(category.id)
        if existing is None:
            content = CategoryContent(
                category=category.id,
                description=description,
                buying_guide=buying_guide,
                ai_generated=True,
                last_updated=self.clock(),
            )
            return self.contents.create(content), True

        existing.description = description
        existing.buying_guide = buying_guide
        existing.ai_generated = True
        existing.last_updated = self.clock()
        self.contents.save(existing)
        return existing, False
