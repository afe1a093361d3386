from typing import Literal

from pydantic import Field

from schemas.base import SchemaBase

CheckStatus = Literal["excellent", "good", "poor"]
Grade = Literal["A+", "A", "B", "C", "D"]


class SEOCheck(SchemaBase):
    name: str = Field(..., description="Human-readable check name")
    status: CheckStatus
    points: int = Field(..., ge=0)


class SEOScoreReport(SchemaBase):
    total_score: int = Field(..., ge=0, le=100)
    max_score: int = 100
    percentage: int = Field(..., ge=0, le=100)
    grade: Grade
    checks: list[SEOCheck] = Field(default_factory=list)


class SEOSnapshot(SchemaBase):
    """Presence/length flags for a product's live SEO fields."""
    has_meta_description: bool
    meta_description_length: int
    description_length: int
    keywords_count: int
    has_image_alts: bool
    image_alts_count: int
    has_focus_keyword: bool
    has_product_schema: bool
    has_faq_schema: bool
