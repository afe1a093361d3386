from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import ConfigDict, Field

from schemas.base import SchemaBase
from schemas.common import FAQ, ApprovalStatus, ImageAlt, KeywordIntent, ProductImage


class ProductSpecifications(SchemaBase):
    """
    Known product specification keys, in display order.

    Stored documents use the camelCase keys (bladeLength, handleMaterial, ...).
    Anything outside this set is rejected at validation time.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    blade_length: Optional[str] = Field(None, alias="bladeLength")
    blade_material: Optional[str] = Field(None, alias="bladeMaterial")
    blade_style: Optional[str] = Field(None, alias="bladeStyle")
    handle_material: Optional[str] = Field(None, alias="handleMaterial")
    total_length: Optional[str] = Field(None, alias="totalLength")
    weight: Optional[str] = Field(None, alias="weight")
    hardness: Optional[str] = Field(None, alias="hardness")
    origin: Optional[str] = Field(None, alias="origin")

    def entries(self) -> list[tuple[str, Optional[str]]]:
        """(key, value) pairs in declaration order, keyed by the stored name."""
        out: list[tuple[str, Optional[str]]] = []
        for name, field in type(self).model_fields.items():
            out.append((field.alias or name, getattr(self, name)))
        return out

    def filled(self) -> dict[str, str]:
        return {k: v for k, v in self.entries() if v and str(v).strip()}

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Product(SchemaBase):
    id: str = Field(..., description="Catalog id")
    name: str = Field(..., description="Product name")
    slug: str = Field("", description="URL slug")
    price: float = Field(0.0, ge=0)
    brand: Optional[str] = None
    category_id: Optional[str] = None
    count_in_stock: int = Field(0, description="Units available")
    rating: float = Field(0.0, ge=0, le=5)
    num_reviews: int = 0
    images: list[ProductImage] = Field(default_factory=list)
    specifications: ProductSpecifications = Field(default_factory=ProductSpecifications)

    # Live fields (storefront)
    description: str = ""
    meta_description: str = ""
    meta_keywords: list[str] = Field(default_factory=list)
    focus_keyword: Optional[str] = None
    image_alts: list[ImageAlt] = Field(default_factory=list)
    product_schema: Optional[dict[str, Any]] = None
    faq_schema: Optional[dict[str, Any]] = None
    faqs: list[FAQ] = Field(default_factory=list)

    # Draft fields (awaiting review)
    ai_generated_description: Optional[str] = None
    ai_generated_meta_description: Optional[str] = None
    ai_suggested_keywords: list[str] = Field(default_factory=list)
    ai_keyword_intent: list[KeywordIntent] = Field(default_factory=list)
    ai_image_alts: list[ImageAlt] = Field(default_factory=list)
    ai_product_schema: Optional[dict[str, Any]] = None
    ai_faqs: list[FAQ] = Field(default_factory=list)
    ai_faq_schema: Optional[dict[str, Any]] = None
    ai_approval_status: ApprovalStatus = ApprovalStatus.none
    ai_generated_at: Optional[datetime] = None

    def has_draft(self) -> bool:
        return bool((self.ai_generated_description or "").strip())

    def to_document(self) -> dict[str, Any]:
        doc = self.model_dump(mode="json")
        doc["specifications"] = self.specifications.to_document()
        return doc
