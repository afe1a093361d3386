"""Review gate between AI drafts and the live storefront.

States (derived from a Product):

    NoDraft ──generate──▶ Pending(draft) ──approve──▶ Approved
                              │                          │
                              └──reject──▶ Rejected ◀────┘ (reject is valid from any state)

Any regenerate moves Approved/Rejected back to Pending. Approve only needs a
draft description to exist. Every transition works on a copy of the product
and returns a TransitionResult; the workflow saves the copy once, so a failed
transition never leaves a half-updated document behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from agents.draft_preview import apply_draft
from agents.intent_classifier import tag_keywords
from lib.catalog_store import ProductStore
from lib.errors import NoContentError, NotFoundError, SEOPipelineError, ValidationError
from lib.text_utils import META_DESCRIPTION_LIMIT, clip, dedupe_preserve_order
from schemas.common import ApprovalStatus
from schemas.content import GeneratedContentRecord
from schemas.product import Product


logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@dataclass(frozen=True)
class NoDraft:
    status = ApprovalStatus.none


@dataclass(frozen=True)
class Pending:
    draft: GeneratedContentRecord
    status = ApprovalStatus.pending


@dataclass(frozen=True)
class Approved:
    status = ApprovalStatus.approved


@dataclass(frozen=True)
class Rejected:
    status = ApprovalStatus.rejected


ApprovalState = Union[NoDraft, Pending, Approved, Rejected]


@dataclass(frozen=True)
class TransitionResult:
    product: Optional[Product] = None
    state: Optional[ApprovalState] = None
    error: Optional[SEOPipelineError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Product:
        if self.error is not None:
            raise self.error
        assert self.product is not None
        return self.product


def draft_record(product: Product) -> GeneratedContentRecord:
    """The product's draft fields as a content record."""
    status = product.ai_approval_status
    if status == ApprovalStatus.pending and not product.has_draft():
        status = ApprovalStatus.none
    return GeneratedContentRecord(
        description=product.ai_generated_description or "",
        meta_description=product.ai_generated_meta_description or "",
        keywords=list(product.ai_keyword_intent) or tag_keywords(product.ai_suggested_keywords),
        image_alts=list(product.ai_image_alts),
        faqs=list(product.ai_faqs),
        faq_schema=product.ai_faq_schema,
        product_schema=product.ai_product_schema,
        status=status,
        generated_at=product.ai_generated_at,
    )


def approval_state(product: Product) -> ApprovalState:
    status = product.ai_approval_status
    if status == ApprovalStatus.pending and product.has_draft():
        return Pending(draft=draft_record(product))
    if status == ApprovalStatus.approved:
        return Approved()
    if status == ApprovalStatus.rejected:
        return Rejected()
    return NoDraft()


def approve_transition(product: Product) -> TransitionResult:
    if not product.has_draft():
        return TransitionResult(error=NoContentError("No AI-generated content to approve"))
    updated = apply_draft(product)
    updated.ai_approval_status = ApprovalStatus.approved
    return TransitionResult(product=updated, state=Approved())


def reject_transition(product: Product) -> TransitionResult:
    updated = product.model_copy(deep=True)
    updated.ai_approval_status = ApprovalStatus.rejected
    return TransitionResult(product=updated, state=Rejected())


def pending_transition(
    product: Product,
    record: GeneratedContentRecord,
    *,
    now: Optional[datetime] = None,
) -> TransitionResult:
    """Overwrite (never merge) the draft with `record` and put it up for review."""
    if not record.description.strip():
        return TransitionResult(error=ValidationError("Cannot queue a draft without a description"))

    generated_at = record.generated_at or now or _utc_now()
    updated = product.model_copy(deep=True)
    updated.ai_generated_description = record.description
    updated.ai_generated_meta_description = record.meta_description
    updated.ai_suggested_keywords = record.keyword_list
    updated.ai_keyword_intent = list(record.keywords)
    updated.ai_image_alts = list(record.image_alts)
    updated.ai_product_schema = record.product_schema
    updated.ai_faqs = list(record.faqs)
    updated.ai_faq_schema = record.faq_schema
    updated.ai_approval_status = ApprovalStatus.pending
    updated.ai_generated_at = generated_at

    pending = record.model_copy(update={"status": ApprovalStatus.pending, "generated_at": generated_at})
    return TransitionResult(product=updated, state=Pending(draft=pending))


def edit_transition(
    product: Product,
    *,
    description: Optional[str] = None,
    meta_description: Optional[str] = None,
    keywords: Optional[list[str]] = None,
) -> TransitionResult:
    """Admin edits to a draft before approval. Status ends up pending."""
    if not product.has_draft():
        return TransitionResult(error=NoContentError("No AI-generated content to edit"))
    if description is not None and not description.strip():
        return TransitionResult(error=ValidationError("Edited description cannot be empty"))

    updated = product.model_copy(deep=True)
    if description is not None:
        updated.ai_generated_description = description.strip()
    if meta_description is not None:
        updated.ai_generated_meta_description = clip(meta_description.strip(), META_DESCRIPTION_LIMIT)
    if keywords is not None:
        cleaned = dedupe_preserve_order(keywords)
        updated.ai_suggested_keywords = cleaned
        updated.ai_keyword_intent = tag_keywords(cleaned)
    updated.ai_approval_status = ApprovalStatus.pending
    return TransitionResult(product=updated, state=Pending(draft=draft_record(updated)))


class ApprovalWorkflow:
    """Loads a product, applies one transition, saves it once."""

    def __init__(self, *, products: ProductStore, clock: Callable[[], datetime] = _utc_now) -> None:
        self.products = products
        self.clock = clock

    def _load(self, product_id: str) -> Product:
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def _commit(self, result: TransitionResult) -> Product:
        product = result.unwrap()
        self.products.save(product)
        return product

    def state(self, product_id: str) -> ApprovalState:
        return approval_state(self._load(product_id))

    def approve(self, product_id: str) -> Product:
        product = self._commit(approve_transition(self._load(product_id)))
        logger.info("AI content approved for: %s", product.name)
        return product

    def reject(self, product_id: str) -> Product:
        product = self._commit(reject_transition(self._load(product_id)))
        logger.info("AI content rejected for: %s", product.name)
        return product

    def edit_draft(
        self,
        product_id: str,
        *,
        description: Optional[str] = None,
        meta_description: Optional[str] = None,
        keywords: Optional[list[str]] = None,
    ) -> Product:
        result = edit_transition(
            self._load(product_id),
            description=description,
            meta_description=meta_description,
            keywords=keywords,
        )
        product = self._commit(result)
        logger.info("AI draft edited for: %s", product.name)
        return product

    def mark_pending(self, product: Product, record: GeneratedContentRecord) -> Product:
        return self._commit(pending_transition(product, record, now=self.clock()))
