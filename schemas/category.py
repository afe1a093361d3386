from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from schemas.base import SchemaBase


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


class Category(SchemaBase):
    id: str
    name: str
    slug: str = ""


class CategoryContent(SchemaBase):
    """Category-level copy. One document per category."""
    category: str = Field(..., description="Category id")
    description: str
    buying_guide: Optional[str] = None
    ai_generated: bool = False
    last_updated: datetime = Field(default_factory=_utc_now)
