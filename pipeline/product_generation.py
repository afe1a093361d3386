from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from agents.content_generator import ContentGenerator
from agents.intent_classifier import tag_keywords
from app_logging.run_logger import RunLogger
from lib.catalog_store import CategoryStore, ProductStore
from lib.errors import NotFoundError
from lib.schema_builder import DEFAULT_SITE_URL, build_product_schema
from pipeline.approval import ApprovalWorkflow
from schemas.common import ApprovalStatus, ImageAlt, ImageRole
from schemas.content import GeneratedContentRecord
from schemas.product import Product


logger = logging.getLogger(__name__)

MAIN_IMAGE_CONTEXT = "main product photo"


@dataclass(frozen=True)
class GenerationOutcome:
    product: Product
    record: GeneratedContentRecord
    operation: str

    @property
    def product_name(self) -> str:
        return self.product.name


class ProductContentPipeline:
    """
    Single-product generate/regenerate path.

    Description first (everything else is written around it), then keywords,
    meta description, image ALT texts and FAQs as independent calls. The
    result overwrites the product's draft fields and sets status=pending.
    """

    def __init__(
        self,
        *,
        generator: ContentGenerator,
        products: ProductStore,
        categories: CategoryStore,
        workflow: ApprovalWorkflow,
        site_url: str = DEFAULT_SITE_URL,
        max_image_alts: int = 5,
        run_logger: Optional[RunLogger] = None,
    ) -> None:
        self.generator = generator
        self.products = products
        self.categories = categories
        self.workflow = workflow
        self.site_url = site_url
        self.max_image_alts = max_image_alts
        self.run_logger = run_logger

    def category_name(self, product: Product) -> str:
        if product.category_id:
            category = self.categories.find_by_id(product.category_id)
            if category is not None and category.name:
                return category.name
        return self.generator.default_category

    async def generate(self, product_id: str) -> GenerationOutcome:
        return await self._run(product_id, operation="generate")

    async def regenerate(self, product_id: str) -> GenerationOutcome:
        return await self._run(product_id, operation="regenerate")

    async def _run(self, product_id: str, *, operation: str) -> GenerationOutcome:
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")

        category_name = self.category_name(product)
        logger.info("%s AI content for: %s", operation.capitalize(), product.name)
        if self.run_logger:
            self.run_logger.start(operation, product.id, {"name": product.name, "category": category_name})

        try:
            record = await self.build_record(product, category_name)
            saved = self.workflow.mark_pending(product, record)
        except Exception as e:
            if self.run_logger:
                self.run_logger.error(operation, product.id, e)
            raise

        if self.run_logger:
            self.run_logger.end(
                operation,
                saved.id,
                {"status": saved.ai_approval_status.value},
                metrics={
                    "description_chars": len(record.description),
                    "keywords": len(record.keywords),
                    "image_alts": len(record.image_alts),
                    "faqs": len(record.faqs),
                },
            )
        logger.info("AI content generated for: %s", saved.name)
        return GenerationOutcome(product=saved, record=record, operation=operation)

    async def build_record(self, product: Product, category_name: str) -> GeneratedContentRecord:
        g = self.generator
        description = await g.generate_description(g.facts_for(product, category_name))

        keywords, meta_description, image_alts, faq = await asyncio.gather(
            g.generate_keywords(product.name, category_name, description),
            g.generate_meta_description(product.name, description, category_name, product.price),
            self.generate_image_alts(product, category_name),
            g.generate_faq_schema(product.name, category_name),
        )

        # Schema describes the product as it will look once this draft is live.
        preview = product.model_copy(update={"description": description})
        product_schema = build_product_schema(
            preview,
            category_name,
            site_url=self.site_url,
            default_brand=g.default_brand,
        )

        return GeneratedContentRecord(
            description=description,
            meta_description=meta_description,
            keywords=tag_keywords(keywords),
            image_alts=image_alts,
            faqs=faq.faqs if faq else [],
            faq_schema=faq.faq_schema if faq else None,
            product_schema=product_schema,
            status=ApprovalStatus.pending,
            generated_at=self.workflow.clock(),
        )

    async def generate_image_alts(self, product: Product, category_name: str) -> list[ImageAlt]:
        images = product.images[: self.max_image_alts]
        texts = await asyncio.gather(*(
            self.generator.generate_image_alt(
                product.name,
                category_name,
                i,
                MAIN_IMAGE_CONTEXT if i == 0 else "",
            )
            for i in range(len(images))
        ))
        return [
            ImageAlt(
                image_url=image.url,
                alt_text=text,
                category=ImageRole.primary if i == 0 else ImageRole.additional,
            )
            for i, (image, text) in enumerate(zip(images, texts))
        ]
