from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional, Protocol, TypedDict

from schemas.category import Category, CategoryContent
from schemas.product import Product


logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


class ProductStore(Protocol):
    def find_by_id(self, product_id: str) -> Optional[Product]: ...

    def find_by_ids(self, product_ids: Iterable[str]) -> list[Product]: ...

    def find_by_category(self, category_id: str, *, limit: int | None = None) -> list[Product]: ...

    def list_all(self) -> list[Product]: ...

    def save(self, product: Product) -> None: ...


class CategoryStore(Protocol):
    def find_by_id(self, category_id: str) -> Optional[Category]: ...


class CategoryContentStore(Protocol):
    def find_one(self, category_id: str) -> Optional[CategoryContent]: ...

    def create(self, content: CategoryContent) -> CategoryContent: ...

    def save(self, content: CategoryContent) -> None: ...


class CollectionFile(TypedDict):
    version: int
    updated_at: str
    items: dict[str, dict[str, Any]]


class JsonCollection:
    """
    One JSON document per collection, keyed by id:

        {"version": 1, "updated_at": "...", "items": {"<id>": {...}}}

    Key behaviors:
    - load(): missing or empty file -> valid empty collection (never raises JSONDecodeError)
    - save(data): normalizes, stamps updated_at, writes the whole document
    - each write is a single whole-file save; there is no locking, last write wins
    """

    def __init__(self, *, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _normalize(self, raw: Any) -> CollectionFile:
        if not isinstance(raw, dict):
            return {"version": 1, "updated_at": _utc_now_iso(), "items": {}}

        items = raw.get("items")
        if not isinstance(items, dict):
            items = {}

        return {
            "version": int(raw.get("version", 1)),
            "updated_at": str(raw.get("updated_at", _utc_now_iso())),
            "items": items,
        }

    def load(self) -> CollectionFile:
        if not self._path.exists():
            return self._normalize(None)

        text = self._path.read_text(encoding="utf-8").strip()
        if not text:
            return self._normalize(None)

        return self._normalize(json.loads(text))

    def save(self, data: CollectionFile) -> None:
        data = self._normalize(data)
        data["updated_at"] = _utc_now_iso()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str) -> Optional[dict[str, Any]]:
        item = self.load()["items"].get(str(key))
        return item if isinstance(item, dict) else None

    def put(self, key: str, doc: dict[str, Any]) -> None:
        data = self.load()
        data["items"][str(key)] = doc
        self.save(data)

    def values(self) -> list[dict[str, Any]]:
        return [v for v in self.load()["items"].values() if isinstance(v, dict)]


class JsonProductStore:
    def __init__(self, *, path: Path) -> None:
        self._collection = JsonCollection(path=path)

    def find_by_id(self, product_id: str) -> Optional[Product]:
        doc = self._collection.get(product_id)
        return Product.model_validate(doc) if doc is not None else None

    def find_by_ids(self, product_ids: Iterable[str]) -> list[Product]:
        wanted = [str(pid) for pid in product_ids]
        items = self._collection.load()["items"]
        return [Product.model_validate(items[pid]) for pid in wanted if isinstance(items.get(pid), dict)]

    def find_by_category(self, category_id: str, *, limit: int | None = None) -> list[Product]:
        out = [p for p in self.list_all() if p.category_id == category_id]
        return out[:limit] if limit is not None else out

    def list_all(self) -> list[Product]:
        return [Product.model_validate(doc) for doc in self._collection.values()]

    def save(self, product: Product) -> None:
        self._collection.put(product.id, product.to_document())
        logger.debug("Saved product %s", product.id)


class JsonCategoryStore:
    def __init__(self, *, path: Path) -> None:
        self._collection = JsonCollection(path=path)

    def find_by_id(self, category_id: str) -> Optional[Category]:
        doc = self._collection.get(category_id)
        return Category.model_validate(doc) if doc is not None else None

    def save(self, category: Category) -> None:
        self._collection.put(category.id, category.to_document())


class JsonCategoryContentStore:
    """CategoryContent documents keyed by category id (at most one per category)."""

    def __init__(self, *, path: Path) -> None:
        self._collection = JsonCollection(path=path)

    def find_one(self, category_id: str) -> Optional[CategoryContent]:
        doc = self._collection.get(category_id)
        return CategoryContent.model_validate(doc) if doc is not None else None

    def create(self, content: CategoryContent) -> CategoryContent:
        if self._collection.get(content.category) is not None:
            raise ValueError(f"Category content already exists for category {content.category!r}")
        self._collection.put(content.category, content.to_document())
        return content

    def save(self, content: CategoryContent) -> None:
        self._collection.put(content.category, content.to_document())


def open_stores(data_dir: Path) -> tuple[JsonProductStore, JsonCategoryStore, JsonCategoryContentStore]:
    return (
        JsonProductStore(path=data_dir / "products.json"),
        JsonCategoryStore(path=data_dir / "categories.json"),
        JsonCategoryContentStore(path=data_dir / "category_content.json"),
    )
