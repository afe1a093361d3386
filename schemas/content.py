from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, model_validator

from schemas.base import SchemaBase
from schemas.common import FAQ, ApprovalStatus, ImageAlt, KeywordIntent


class DescriptionFacts(SchemaBase):
    """Product facts fed to the description prompt."""
    name: str
    category: str
    brand: str
    price: float
    specifications: dict[str, str] = Field(default_factory=dict)


class FAQResult(SchemaBase):
    faqs: list[FAQ]
    faq_schema: dict[str, Any]


class GeneratedContentRecord(SchemaBase):
    """
    One generation run's worth of draft content for a product.

    status=pending requires a non-empty description: that is what approve
    promotes to the storefront.
    """

    description: str = ""
    meta_description: str = ""
    keywords: list[KeywordIntent] = Field(default_factory=list)
    image_alts: list[ImageAlt] = Field(default_factory=list)
    faqs: list[FAQ] = Field(default_factory=list)
    faq_schema: Optional[dict[str, Any]] = None
    product_schema: Optional[dict[str, Any]] = None
    status: ApprovalStatus = ApprovalStatus.none
    generated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _pending_needs_description(self) -> "GeneratedContentRecord":
        if self.status == ApprovalStatus.pending and not self.description.strip():
            raise ValueError("A pending content record requires a non-empty description")
        return self

    @property
    def keyword_list(self) -> list[str]:
        return [k.keyword for k in self.keywords]
