"""SEO score agent.

This agent is intentionally deterministic: the score is a pure function of a
product's live SEO fields, so the same product always gets the same score and
grade.

Scoring (0–100), six independent checks:
- Description length: 180–400 chars = 25, >= 100 chars = 15.
- Meta description: 140–155 chars = 20, any = 10.
- Keywords: 5–10 = 20, any = 10.
- Image ALT texts: every image covered = 15, some = 7.
- Focus keyword set = 10.
- SEO-friendly URL (slug longer than 3 chars with a hyphen) = 10.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from agents.base import BaseAgent
from agents.draft_preview import apply_draft
from schemas.product import Product
from schemas.seo import CheckStatus, Grade, SEOCheck, SEOScoreReport, SEOSnapshot


MAX_SCORE = 100


@dataclass(frozen=True)
class _Tier:
    status: CheckStatus
    points: int


_POOR = _Tier("poor", 0)


@dataclass(frozen=True)
class _Check:
    name: str
    evaluate: Callable[[Product], _Tier]


def _description_length(p: Product) -> _Tier:
    n = len(p.description or "")
    if 180 <= n <= 400:
        return _Tier("excellent", 25)
    if n >= 100:
        return _Tier("good", 15)
    return _POOR


def _meta_description(p: Product) -> _Tier:
    n = len(p.meta_description or "")
    if 140 <= n <= 155:
        return _Tier("excellent", 20)
    if n > 0:
        return _Tier("good", 10)
    return _POOR


def _keywords(p: Product) -> _Tier:
    n = len(p.meta_keywords)
    if 5 <= n <= 10:
        return _Tier("excellent", 20)
    if n > 0:
        return _Tier("good", 10)
    return _POOR


def _image_alts(p: Product) -> _Tier:
    alt_count = len(p.image_alts)
    image_count = len(p.images) or 1
    if alt_count >= image_count and alt_count > 0:
        return _Tier("excellent", 15)
    if alt_count > 0:
        return _Tier("good", 7)
    return _POOR


def _focus_keyword(p: Product) -> _Tier:
    return _Tier("excellent", 10) if p.focus_keyword else _POOR


def _slug(p: Product) -> _Tier:
    slug = p.slug or ""
    return _Tier("excellent", 10) if len(slug) > 3 and "-" in slug else _POOR


def _checks() -> list[_Check]:
    """Ordered rubric. Ordering is the order checks appear in the report."""
    return [
        _Check("Description Length", _description_length),
        _Check("Meta Description", _meta_description),
        _Check("Keywords", _keywords),
        _Check("Image ALT Texts", _image_alts),
        _Check("Focus Keyword", _focus_keyword),
        _Check("SEO-Friendly URL", _slug),
    ]


def grade_for(score: int) -> Grade:
    if score >= 90:
        return "A+"
    if score >= 80:
        return "A"
    if score >= 70:
        return "B"
    if score >= 60:
        return "C"
    return "D"


def calculate_score(product: Product) -> SEOScoreReport:
    checks: list[SEOCheck] = []
    total = 0
    for check in _checks():
        tier = check.evaluate(product)
        total += tier.points
        checks.append(SEOCheck(name=check.name, status=tier.status, points=tier.points))

    total = max(0, min(MAX_SCORE, total))
    return SEOScoreReport(
        total_score=total,
        max_score=MAX_SCORE,
        percentage=total,
        grade=grade_for(total),
        checks=checks,
    )


def score_draft(product: Product) -> SEOScoreReport:
    """Score the product as it would look once its draft is approved."""
    if not product.has_draft():
        return calculate_score(product)
    return calculate_score(apply_draft(product))


def seo_snapshot(product: Product) -> SEOSnapshot:
    return SEOSnapshot(
        has_meta_description=bool(product.meta_description),
        meta_description_length=len(product.meta_description or ""),
        description_length=len(product.description or ""),
        keywords_count=len(product.meta_keywords),
        has_image_alts=len(product.image_alts) > 0,
        image_alts_count=len(product.image_alts),
        has_focus_keyword=bool(product.focus_keyword),
        has_product_schema=bool(product.product_schema),
        has_faq_schema=bool(product.faq_schema),
    )


class SEOScoreAgent(BaseAgent):
    """Score a product's SEO completeness (live fields, or the pending draft)."""

    name = "seo-score"

    def run(self, input: Product | dict) -> dict[str, Any]:
        if isinstance(input, Product):
            product, use_draft = input, False
        else:
            payload = dict(input)
            use_draft = bool(payload.pop("use_draft", False))
            product = Product(**payload)

        report = score_draft(product) if use_draft else calculate_score(product)
        return report.to_dict()
