"""Promote a product's staged AI draft onto its live fields, without saving."""

from __future__ import annotations

from agents.intent_classifier import first_transactional, tag_keywords
from schemas.product import Product


def apply_draft(product: Product) -> Product:
    """
    Copy of `product` with the draft promoted to the live fields.

    Focus keyword becomes the first transactional keyword; when there is none
    the existing focus keyword is kept. Staged structured data (image alts,
    product schema, FAQs) is promoted only when the draft has it.
    """
    updated = product.model_copy(deep=True)
    updated.description = product.ai_generated_description or ""
    updated.meta_description = product.ai_generated_meta_description or ""
    updated.meta_keywords = list(product.ai_suggested_keywords)

    tagged = list(product.ai_keyword_intent) or tag_keywords(product.ai_suggested_keywords)
    focus = first_transactional(tagged)
    if focus:
        updated.focus_keyword = focus

    if product.ai_image_alts:
        updated.image_alts = [a.model_copy() for a in product.ai_image_alts]
    if product.ai_product_schema:
        updated.product_schema = dict(product.ai_product_schema)
    if product.ai_faq_schema:
        updated.faq_schema = dict(product.ai_faq_schema)
        updated.faqs = [f.model_copy() for f in product.ai_faqs]
    return updated
