from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from lib.errors import SEOPipelineError, ValidationError
from pipeline.product_generation import ProductContentPipeline
from schemas.batch import BatchItemOutcome, BatchResult, BatchSummary


logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 20


def validate_batch_ids(product_ids: Sequence[str] | None) -> list[str]:
    """Reject empty or oversized batches before anything else runs."""
    if isinstance(product_ids, (str, bytes)):
        raise ValidationError("Product IDs must be a list")
    ids = [str(pid) for pid in (product_ids or [])]
    if not ids:
        raise ValidationError("Product IDs required")
    if len(ids) > MAX_BATCH_SIZE:
        raise ValidationError(f"Maximum {MAX_BATCH_SIZE} products per batch")
    return ids


class BatchCoordinator:
    """
    Runs the single-product generate path over up to 20 ids.

    Items run concurrently under a semaphore; each item's failure is captured
    in its own outcome and never affects its siblings. Results come back in
    request order.
    """

    def __init__(self, *, pipeline: ProductContentPipeline, concurrency: int = 5) -> None:
        self.pipeline = pipeline
        self.concurrency = max(1, int(concurrency))

    async def generate_batch(self, product_ids: Sequence[str] | None) -> BatchResult:
        ids = validate_batch_ids(product_ids)
        logger.info("Batch generating AI content for %d products", len(ids))

        semaphore = asyncio.Semaphore(self.concurrency)

        async def run_one(product_id: str) -> BatchItemOutcome:
            async with semaphore:
                try:
                    outcome = await self.pipeline.generate(product_id)
                except SEOPipelineError as e:
                    logger.warning("Failed for product %s: %s", product_id, e)
                    return BatchItemOutcome(product_id=product_id, success=False, error=str(e))
                except Exception as e:
                    logger.exception("Unexpected failure for product %s", product_id)
                    return BatchItemOutcome(product_id=product_id, success=False, error=str(e))
                return BatchItemOutcome(product_id=product_id, success=True, product_name=outcome.product_name)

        results = await asyncio.gather(*(run_one(pid) for pid in ids))

        successful = sum(1 for r in results if r.success)
        summary = BatchSummary(total=len(ids), successful=successful, failed=len(ids) - successful)
        logger.info("Processed %d products. %d successful.", summary.total, summary.successful)
        return BatchResult(summary=summary, results=list(results))
