from __future__ import annotations

from typing import Optional

from pydantic import Field

from schemas.base import SchemaBase


class BatchItemOutcome(SchemaBase):
    product_id: str
    success: bool
    product_name: Optional[str] = None
    error: Optional[str] = None


class BatchSummary(SchemaBase):
    total: int = Field(..., ge=0)
    successful: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)


class BatchResult(SchemaBase):
    summary: BatchSummary
    results: list[BatchItemOutcome] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return self.summary.total

    @property
    def successful(self) -> int:
        return self.summary.successful

    @property
    def failed(self) -> int:
        return self.summary.failed
