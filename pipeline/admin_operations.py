"""Admin actions over the SEO pipeline, each returning a JSON-safe envelope.

    {"success": true,  "message": "...", "data": {...}}
    {"success": false, "message": "...", "error": {"type": "NotFoundError", "status": 404}}

Only pipeline errors are turned into failure envelopes; anything else is a bug
and propagates to the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional, Sequence

from agents.category_content_agent import CategoryContentGenerator
from agents.content_generator import ContentGenerator
from agents.seo_score_agent import calculate_score, score_draft, seo_snapshot
from lib.catalog_store import ProductStore
from lib.errors import NotFoundError, SEOPipelineError, ValidationError
from pipeline.approval import ApprovalWorkflow
from pipeline.batch import BatchCoordinator
from pipeline.product_generation import GenerationOutcome, ProductContentPipeline
from schemas.common import ApprovalStatus
from schemas.product import Product


logger = logging.getLogger(__name__)

Envelope = dict[str, Any]


def ok(message: str, data: Any = None) -> Envelope:
    return {"success": True, "message": message, "data": data}


def fail(err: SEOPipelineError) -> Envelope:
    return {
        "success": False,
        "message": err.message,
        "error": {"type": err.__class__.__name__, "status": err.status},
    }


def _generation_data(outcome: GenerationOutcome) -> dict[str, Any]:
    p = outcome.product
    return {
        "product_id": p.id,
        "product_name": p.name,
        "ai_generated_description": p.ai_generated_description,
        "ai_generated_meta_description": p.ai_generated_meta_description,
        "ai_suggested_keywords": list(p.ai_suggested_keywords),
        "keyword_intent": [k.to_dict() for k in p.ai_keyword_intent],
        "image_alts": [a.to_dict() for a in p.ai_image_alts],
        "faqs": [f.to_dict() for f in p.ai_faqs],
        "status": p.ai_approval_status.value,
        "generated_at": p.ai_generated_at.isoformat() if p.ai_generated_at else None,
    }


def _live_data(p: Product) -> dict[str, Any]:
    return {
        "product_id": p.id,
        "name": p.name,
        "description": p.description,
        "meta_description": p.meta_description,
        "meta_keywords": list(p.meta_keywords),
        "focus_keyword": p.focus_keyword,
        "status": p.ai_approval_status.value,
    }


class AdminOperations:
    def __init__(
        self,
        *,
        products: ProductStore,
        generator: ContentGenerator,
        pipeline: ProductContentPipeline,
        workflow: ApprovalWorkflow,
        batch: BatchCoordinator,
        categories: CategoryContentGenerator,
    ) -> None:
        self.products = products
        self.generator = generator
        self.pipeline = pipeline
        self.workflow = workflow
        self.batch = batch
        self.category_content = categories

    async def _guard(self, action: Callable[[], Awaitable[Envelope]]) -> Envelope:
        try:
            return await action()
        except SEOPipelineError as e:
            logger.warning("%s: %s", e.__class__.__name__, e.message)
            return fail(e)

    def _product(self, product_id: str) -> Product:
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    async def generate(self, product_id: str) -> Envelope:
        async def action() -> Envelope:
            outcome = await self.pipeline.generate(product_id)
            return ok("AI content generated successfully. Awaiting approval.", _generation_data(outcome))

        return await self._guard(action)

    async def regenerate(self, product_id: str) -> Envelope:
        async def action() -> Envelope:
            outcome = await self.pipeline.regenerate(product_id)
            return ok("AI content regenerated successfully", _generation_data(outcome))

        return await self._guard(action)

    async def approve(self, product_id: str) -> Envelope:
        async def action() -> Envelope:
            return ok("AI content approved and published", _live_data(self.workflow.approve(product_id)))

        return await self._guard(action)

    async def reject(self, product_id: str) -> Envelope:
        async def action() -> Envelope:
            product = self.workflow.reject(product_id)
            return ok("AI content rejected", {"product_id": product.id, "product_name": product.name})

        return await self._guard(action)

    async def edit(
        self,
        product_id: str,
        *,
        description: Optional[str] = None,
        meta_description: Optional[str] = None,
        keywords: Optional[list[str]] = None,
    ) -> Envelope:
        async def action() -> Envelope:
            product = self.workflow.edit_draft(
                product_id,
                description=description,
                meta_description=meta_description,
                keywords=keywords,
            )
            return ok("AI content updated", {
                "product_id": product.id,
                "ai_generated_description": product.ai_generated_description,
                "ai_generated_meta_description": product.ai_generated_meta_description,
                "ai_suggested_keywords": list(product.ai_suggested_keywords),
                "status": product.ai_approval_status.value,
            })

        return await self._guard(action)

    async def analyze(self, product_id: str) -> Envelope:
        async def action() -> Envelope:
            product = self._product(product_id)
            recommendations = await self.generator.generate_seo_recommendations(product)
            data = {
                "analysis": recommendations,
                "seo_score": calculate_score(product).to_dict(),
                "current_seo": seo_snapshot(product).to_dict(),
            }
            if product.has_draft():
                data["draft_score"] = score_draft(product).to_dict()
            return ok(f"SEO analysis for {product.name}", data)

        return await self._guard(action)

    async def batch_generate(self, product_ids: Sequence[str] | None) -> Envelope:
        async def action() -> Envelope:
            result = await self.batch.generate_batch(product_ids)
            return ok(
                f"Processed {result.total} products. {result.successful} successful.",
                result.to_dict(),
            )

        return await self._guard(action)

    async def category_buying_guide(self, category_id: str) -> Envelope:
        async def action() -> Envelope:
            res = await self.category_content.generate_for_category(category_id)
            return ok(f"Generated buying guide for category: {res.category.name}", {
                "category_name": res.category.name,
                "description": res.content.description,
                "buying_guide": res.content.buying_guide,
                "product_count": res.product_count,
            })

        return await self._guard(action)

    async def compare(self, product_id_1: Optional[str], product_id_2: Optional[str]) -> Envelope:
        async def action() -> Envelope:
            if not product_id_1 or not product_id_2:
                raise ValidationError("Two product IDs required")
            first, second = self.products.find_by_id(product_id_1), self.products.find_by_id(product_id_2)
            if first is None or second is None:
                raise NotFoundError("One or both products not found")
            article = await self.generator.generate_comparison_article(first, second)
            return ok(f"Generated comparison: {first.name} vs {second.name}", {
                "product_1": first.name,
                "product_2": second.name,
                "article": article,
            })

        return await self._guard(action)

    async def products_status(self) -> Envelope:
        async def action() -> Envelope:
            products = self.products.list_all()
            products.sort(key=lambda p: p.ai_generated_at.timestamp() if p.ai_generated_at else float("-inf"), reverse=True)

            def count(status: ApprovalStatus) -> int:
                return sum(1 for p in products if p.ai_approval_status == status)

            summary = {
                "total": len(products),
                "pending": count(ApprovalStatus.pending),
                "approved": count(ApprovalStatus.approved),
                "rejected": count(ApprovalStatus.rejected),
                "no_ai": sum(1 for p in products if not p.has_draft()),
            }
            rows = [
                {
                    "product_id": p.id,
                    "name": p.name,
                    "category_id": p.category_id,
                    "status": p.ai_approval_status.value,
                    "generated_at": p.ai_generated_at.isoformat() if p.ai_generated_at else None,
                    "has_draft": p.has_draft(),
                }
                for p in products
            ]
            return ok("AI status for all products", {"summary": summary, "products": rows})

        return await self._guard(action)
