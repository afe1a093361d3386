from __future__ import annotations

import unittest
from datetime import datetime, timezone
from pathlib import Path
from tempfile import TemporaryDirectory

from agents.content_generator import ContentGenerator
from app_logging.run_logger import RunLogger
from lib.catalog_store import open_stores
from lib.errors import NotFoundError, ProviderError, ValidationError
from pipeline.approval import ApprovalWorkflow
from pipeline.batch import MAX_BATCH_SIZE, BatchCoordinator, validate_batch_ids
from pipeline.product_generation import ProductContentPipeline
from schemas.category import Category
from schemas.common import ApprovalStatus, ImageRole, ProductImage, SearchIntent
from schemas.product import Product, ProductSpecifications


FIXED_NOW = datetime(2026, 2, 1, 12, 0, tzinfo=timezone.utc)

DESCRIPTION = "expert e-commerce copywriter"
KEYWORDS = "SEO keyword research expert"
META = "SEO-optimized meta description"
ALT = "Generate descriptive ALT text"
FAQ = "Generate 5 common FAQs"

DRAFT_DESCRIPTION = "Forged from layered Damascus steel, this chef knife holds a keen edge. " * 3

RESPONSES = {
    DESCRIPTION: DRAFT_DESCRIPTION,
    KEYWORDS: "buy chef knife, how to sharpen a chef knife, damascus chef knife, gladius store, best gyuto",
    META: '"' + "Premium Damascus chef knife. " * 8 + '"',
    ALT: "Pro Chef Knife with rosewood handle on a walnut board",
    FAQ: 'Here you go:\n[{"question": "Is it dishwasher safe?", "answer": "Hand wash only."}]',
}


class _ScriptedModel:
    def __init__(self, responses: dict[str, str], failures: tuple[str, ...] = ()) -> None:
        self.responses = responses
        self.failures = failures
        self.calls: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.calls.append(prompt)
        for marker in self.failures:
            if marker in prompt:
                raise ProviderError("model unavailable")
        for marker, text in self.responses.items():
            if marker in prompt:
                return text
        return ""


class _PipelineCase(unittest.IsolatedAsyncioTestCase):
    failures: tuple[str, ...] = ()

    def setUp(self) -> None:
        self._td = TemporaryDirectory()
        self.addCleanup(self._td.cleanup)
        root = Path(self._td.name)

        self.products, self.categories, _ = open_stores(root)
        self.categories.save(Category(id="c1", name="Chef Knife", slug="chef-knife"))
        self.products.save(
            Product(
                id="p1",
                name="Pro Chef Knife",
                slug="pro-chef-knife",
                price=129.0,
                category_id="c1",
                count_in_stock=3,
                images=[ProductImage(url=f"https://cdn.example/{i}.jpg") for i in range(7)],
                specifications=ProductSpecifications(bladeLength="8 in", bladeMaterial="Damascus"),
            )
        )
        self.products.save(Product(id="p2", name="Paring Knife", slug="paring-knife", price=39.0))

        self.model = _ScriptedModel(RESPONSES, self.failures)
        self.run_logger = RunLogger(log_path=root / "runs.jsonl", run_id="test-run")
        self.workflow = ApprovalWorkflow(products=self.products, clock=lambda: FIXED_NOW)
        self.pipeline = ProductContentPipeline(
            generator=ContentGenerator(self.model),
            products=self.products,
            categories=self.categories,
            workflow=self.workflow,
            site_url="https://gladiustraders.com",
            max_image_alts=5,
            run_logger=self.run_logger,
        )


class TestGenerate(_PipelineCase):
    async def test_generate_stages_a_pending_draft(self) -> None:
        outcome = await self.pipeline.generate("p1")

        product = self.products.find_by_id("p1")
        assert product is not None
        self.assertEqual(outcome.product, product)
        self.assertEqual(product.ai_approval_status, ApprovalStatus.pending)
        self.assertEqual(product.ai_generated_description, DRAFT_DESCRIPTION.strip())
        self.assertEqual(product.ai_generated_at, FIXED_NOW)
        self.assertLessEqual(len(product.ai_generated_meta_description), 155)
        self.assertFalse(product.ai_generated_meta_description.startswith('"'))

        self.assertEqual(len(product.ai_suggested_keywords), 5)
        intents = {k.keyword: k.intent for k in product.ai_keyword_intent}
        self.assertEqual(intents["how to sharpen a chef knife"], SearchIntent.informational)
        self.assertEqual(intents["gladius store"], SearchIntent.navigational)
        self.assertEqual(intents["buy chef knife"], SearchIntent.transactional)

        # at most five alts, first one is the primary
        self.assertEqual(len(product.ai_image_alts), 5)
        self.assertEqual(product.ai_image_alts[0].category, ImageRole.primary)
        self.assertEqual(product.ai_image_alts[0].image_url, "https://cdn.example/0.jpg")
        self.assertTrue(all(a.category == ImageRole.additional for a in product.ai_image_alts[1:]))

        self.assertEqual(product.ai_faqs[0].question, "Is it dishwasher safe?")
        self.assertEqual(product.ai_faq_schema["@type"], "FAQPage")
        self.assertEqual(product.ai_product_schema["description"], DRAFT_DESCRIPTION.strip())
        self.assertEqual(product.ai_product_schema["category"], "Chef Knife")

        # live fields only change on approve
        self.assertEqual(product.description, "")
        self.assertEqual(product.meta_keywords, [])
        self.assertIsNone(product.product_schema)

    async def test_prompts_use_category_and_draft_description(self) -> None:
        await self.pipeline.generate("p1")

        description_prompt = next(p for p in self.model.calls if DESCRIPTION in p)
        self.assertIn("- Category: Chef Knife", description_prompt)
        self.assertIn("- Brand: Gladius", description_prompt)

        meta_prompt = next(p for p in self.model.calls if META in p)
        self.assertIn("Description: " + DRAFT_DESCRIPTION[:150].strip(), meta_prompt)

        alt_prompts = [p for p in self.model.calls if ALT in p]
        self.assertEqual(len(alt_prompts), 5)
        self.assertTrue(any("Context: main product photo" in p for p in alt_prompts))

    async def test_missing_category_uses_default(self) -> None:
        await self.pipeline.generate("p2")
        description_prompt = next(p for p in self.model.calls if DESCRIPTION in p)
        self.assertIn("- Category: Knife", description_prompt)
        self.assertEqual(self.products.find_by_id("p2").ai_image_alts, [])

    async def test_approve_then_regenerate(self) -> None:
        await self.pipeline.generate("p1")
        approved = self.workflow.approve("p1")

        self.assertEqual(approved.description, DRAFT_DESCRIPTION.strip())
        self.assertEqual(approved.focus_keyword, "buy chef knife")
        self.assertEqual(len(approved.image_alts), 5)
        self.assertEqual(approved.faq_schema["@type"], "FAQPage")

        outcome = await self.pipeline.regenerate("p1")
        self.assertEqual(outcome.operation, "regenerate")
        self.assertEqual(outcome.product.ai_approval_status, ApprovalStatus.pending)
        # approved copy stays live while the new draft waits
        self.assertEqual(outcome.product.focus_keyword, "buy chef knife")

    async def test_unknown_product(self) -> None:
        with self.assertRaises(NotFoundError):
            await self.pipeline.generate("missing")
        self.assertEqual(self.model.calls, [])

    async def test_run_log(self) -> None:
        await self.pipeline.generate("p1")
        events = self.run_logger.read()
        self.assertEqual([e["event"] for e in events], ["start", "end"])
        self.assertEqual(events[0]["run_id"], "test-run")
        self.assertEqual(events[1]["product_id"], "p1")
        self.assertEqual(events[1]["metrics"]["image_alts"], 5)


class TestGenerateDescriptionFailure(_PipelineCase):
    failures = (DESCRIPTION,)

    async def test_description_failure_saves_nothing(self) -> None:
        before = self.products.find_by_id("p1")

        with self.assertRaises(ProviderError):
            await self.pipeline.generate("p1")

        self.assertEqual(self.products.find_by_id("p1"), before)
        self.assertFalse(any(KEYWORDS in p for p in self.model.calls))
        events = self.run_logger.read()
        self.assertEqual(events[-1]["event"], "error")
        self.assertEqual(events[-1]["error"]["type"], "ProviderError")


class TestGenerateSoftFailures(_PipelineCase):
    failures = (KEYWORDS, META, ALT, FAQ)

    async def test_soft_artifacts_fall_back(self) -> None:
        outcome = await self.pipeline.generate("p1")
        product = outcome.product

        self.assertEqual(product.ai_approval_status, ApprovalStatus.pending)
        self.assertEqual(product.ai_suggested_keywords[0], "pro chef knife")
        self.assertTrue(product.ai_generated_meta_description.startswith("Pro Chef Knife - Premium Chef Knife."))
        self.assertEqual(product.ai_image_alts[0].alt_text, "Pro Chef Knife - Chef Knife - Image 1")
        self.assertEqual(product.ai_faqs, [])
        self.assertIsNone(product.ai_faq_schema)


class TestBatch(_PipelineCase):
    def test_validate_batch_ids(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            validate_batch_ids([])
        self.assertEqual(ctx.exception.message, "Product IDs required")
        with self.assertRaises(ValidationError):
            validate_batch_ids(None)
        with self.assertRaises(ValidationError) as ctx:
            validate_batch_ids([str(i) for i in range(MAX_BATCH_SIZE + 1)])
        self.assertEqual(ctx.exception.message, "Maximum 20 products per batch")
        self.assertEqual(len(validate_batch_ids([str(i) for i in range(MAX_BATCH_SIZE)])), 20)

    def test_bare_string_is_not_a_batch(self) -> None:
        for ids in ("p1", b"p1"):
            with self.assertRaises(ValidationError) as ctx:
                validate_batch_ids(ids)
            self.assertEqual(ctx.exception.message, "Product IDs must be a list")

    async def test_invalid_batches_make_no_calls(self) -> None:
        batch = BatchCoordinator(pipeline=self.pipeline)
        for ids in ([], [f"p{i}" for i in range(21)], "p1"):
            with self.assertRaises(ValidationError):
                await batch.generate_batch(ids)
        self.assertEqual(len(self.model.calls), 0)

    async def test_one_failing_item_does_not_block_others(self) -> None:
        batch = BatchCoordinator(pipeline=self.pipeline, concurrency=2)

        result = await batch.generate_batch(["p1", "missing", "p2"])

        self.assertEqual((result.total, result.successful, result.failed), (3, 2, 1))
        self.assertEqual([r.product_id for r in result.results], ["p1", "missing", "p2"])
        self.assertEqual(result.results[0].product_name, "Pro Chef Knife")
        self.assertFalse(result.results[1].success)
        self.assertEqual(result.results[1].error, "Product not found")
        self.assertEqual(self.products.find_by_id("p2").ai_approval_status, ApprovalStatus.pending)


if __name__ == "__main__":
    unittest.main()
