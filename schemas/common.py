from enum import Enum
from pydantic import Field
from .base import SchemaBase

class SearchIntent(str, Enum):
    informational = "informational"
    navigational = "navigational"
    transactional = "transactional"

class ApprovalStatus(str, Enum):
    none = "none"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"

class ImageRole(str, Enum):
    primary = "primary"
    additional = "additional"

class KeywordIntent(SchemaBase):
    keyword: str
    intent: SearchIntent

class FAQ(SchemaBase):
    question: str
    answer: str

class ImageAlt(SchemaBase):
    image_url: str = ""
    alt_text: str
    category: ImageRole = ImageRole.additional

class ProductImage(SchemaBase):
    url: str
    public_id: str | None = None

class SampleProduct(SchemaBase):
    """Slim product view used in category prompts."""
    name: str
    price: float = 0.0
    specifications: dict[str, str] = Field(default_factory=dict)
