"""Generative SEO copy for catalog products.

Every public method is one independent prompt call against the injected
GenerativeTextModel. Failure handling is looked up in ARTIFACT_POLICIES:
soft artifacts resolve to deterministic fallbacks, hard artifacts raise
ProviderError (or resolve to None where the contract allows it).
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Awaitable, Callable, Optional, TypeVar

from agents.artifact_policy import OnFailure, policy_for
from agents.llm_client import GenerativeTextModel
from agents.prompt_templates import render_prompt
from lib.errors import ProviderError
from lib.schema_builder import build_faq_schema
from lib.text_utils import (
    IMAGE_ALT_LIMIT,
    META_DESCRIPTION_LIMIT,
    clip,
    dedupe_preserve_order,
    strip_wrapping_quotes,
)
from schemas.common import FAQ
from schemas.content import DescriptionFacts, FAQResult
from schemas.product import Product


logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_KEYWORDS = 10
MAX_KEYWORD_LENGTH = 60

IMAGE_VIEW_TYPES = [
    "product showcase",
    "side profile view",
    "detailed close-up",
    "handle grip detail",
    "full blade view",
    "packaging view",
]

_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


def format_price(price: float) -> str:
    """129.0 -> '129', 129.5 -> '129.5'."""
    return f"{float(price):.2f}".rstrip("0").rstrip(".")


def parse_keywords(text: str) -> list[str]:
    candidates = [k.strip() for k in (text or "").split(",")]
    kept = [k for k in candidates if 0 < len(k) < MAX_KEYWORD_LENGTH]
    return dedupe_preserve_order(kept)[:MAX_KEYWORDS]


def fallback_keywords(name: str, category: str) -> list[str]:
    return [
        name.lower(),
        f"{category} knife".lower(),
        "premium knife",
        "professional cutlery",
        "handcrafted blade",
    ]


def fallback_meta_description(name: str, category: str, price: float) -> str:
    text = f"{name} - Premium {category}. ${format_price(price)}. Shop now for quality craftsmanship."
    return text[:META_DESCRIPTION_LIMIT]


def fallback_image_alt(name: str, category: str, index: int) -> str:
    return f"{name} - {category} - Image {index + 1}"


def extract_faqs(text: str) -> list[FAQ]:
    """
    Parse the first [...] span of a model response into FAQ entries.

    Raises ValueError when there is no array, it is not valid JSON, or an
    entry is missing its question/answer.
    """
    match = _JSON_ARRAY.search(text or "")
    if not match:
        raise ValueError("No JSON array found in FAQ response")

    raw = json.loads(match.group(0))
    if not isinstance(raw, list) or not raw:
        raise ValueError("FAQ response is not a non-empty JSON array")

    faqs: list[FAQ] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"FAQ entry {i} is not an object")
        faqs.append(FAQ(question=str(item["question"]).strip(), answer=str(item["answer"]).strip()))
    return faqs


def _specs_json(product: Product) -> str:
    return json.dumps(product.specifications.filled(), indent=2)


class ContentGenerator:
    def __init__(
        self,
        model: GenerativeTextModel,
        *,
        request_timeout: Optional[float] = 60.0,
        default_brand: str = "Gladius",
        default_category: str = "Knife",
    ) -> None:
        self.model = model
        self.request_timeout = request_timeout
        self.default_brand = default_brand
        self.default_category = default_category

    async def complete(self, prompt: str) -> str:
        """One bounded generative call. Every failure mode becomes ProviderError."""
        try:
            if self.request_timeout:
                text = await asyncio.wait_for(self.model.generate(prompt), timeout=self.request_timeout)
            else:
                text = await self.model.generate(prompt)
        except ProviderError:
            raise
        except asyncio.TimeoutError as e:
            raise ProviderError(f"AI generation timed out after {self.request_timeout}s") from e
        except Exception as e:
            raise ProviderError(f"AI generation failed: {e}") from e
        return (text or "").strip()

    async def resolve(
        self,
        artifact: str,
        produce: Callable[[], Awaitable[T]],
        fallback: Optional[Callable[[], T]] = None,
    ) -> Optional[T]:
        """Run `produce` and apply the artifact's declared failure policy."""
        policy = policy_for(artifact)
        try:
            return await produce()
        except ProviderError as e:
            if policy.on_failure is OnFailure.fallback:
                if fallback is None:
                    raise ValueError(f"Artifact {artifact!r} is declared with a fallback but none was given") from e
                logger.warning("AI %s failed, using fallback: %s", artifact, e)
                return fallback()
            if policy.on_failure is OnFailure.none:
                logger.error("AI %s failed: %s", artifact, e)
                return None
            logger.error("AI %s failed: %s", artifact, e)
            raise

    def facts_for(self, product: Product, category_name: Optional[str]) -> DescriptionFacts:
        return DescriptionFacts(
            name=product.name,
            category=category_name or self.default_category,
            brand=product.brand or self.default_brand,
            price=product.price,
            specifications=product.specifications.filled(),
        )

    async def generate_description(self, facts: DescriptionFacts) -> str:
        async def produce() -> str:
            prompt = render_prompt(
                "product_description",
                name=facts.name,
                category=facts.category,
                brand=facts.brand,
                price=format_price(facts.price),
                specifications=json.dumps(facts.specifications, indent=2),
            )
            text = await self.complete(prompt)
            if not text:
                raise ProviderError("AI generation failed: empty description")
            logger.info("Generated description for %s (%d chars)", facts.name, len(text))
            return text

        return await self.resolve("description", produce)

    async def generate_keywords(self, name: str, category: str, description: Optional[str]) -> list[str]:
        async def produce() -> list[str]:
            prompt = render_prompt(
                "keywords",
                name=name,
                category=category,
                description=(description or "")[:200],
            )
            keywords = parse_keywords(await self.complete(prompt))
            if not keywords:
                raise ProviderError("AI keyword response contained no usable keywords")
            logger.info("Generated %d keywords for %s", len(keywords), name)
            return keywords

        return await self.resolve("keywords", produce, lambda: fallback_keywords(name, category))

    async def generate_meta_description(
        self,
        name: str,
        description: Optional[str],
        category: str,
        price: float,
    ) -> str:
        async def produce() -> str:
            prompt = render_prompt(
                "meta_description",
                name=name,
                category=category,
                price=format_price(price),
                description=(description or "")[:150],
            )
            text = strip_wrapping_quotes(await self.complete(prompt))
            if not text:
                raise ProviderError("AI meta description response was empty")
            text = clip(text, META_DESCRIPTION_LIMIT)
            logger.info("Generated meta description for %s (%d chars)", name, len(text))
            return text

        return await self.resolve(
            "meta_description",
            produce,
            lambda: fallback_meta_description(name, category, price),
        )

    async def generate_image_alt(self, name: str, category: str, index: int = 0, context: str = "") -> str:
        async def produce() -> str:
            view_type = IMAGE_VIEW_TYPES[index] if 0 <= index < len(IMAGE_VIEW_TYPES) else f"view {index + 1}"
            prompt = render_prompt(
                "image_alt",
                name=name,
                category=category,
                view_type=view_type,
                context=context or "product photography",
            )
            text = strip_wrapping_quotes(await self.complete(prompt))
            if not text:
                raise ProviderError("AI image ALT response was empty")
            return clip(text, IMAGE_ALT_LIMIT)

        return await self.resolve("image_alt", produce, lambda: fallback_image_alt(name, category, index))

    async def generate_faq_schema(self, name: str, category: str) -> Optional[FAQResult]:
        async def produce() -> FAQResult:
            text = await self.complete(render_prompt("faq", name=name, category=category))
            try:
                faqs = extract_faqs(text)
            except (ValueError, KeyError) as e:
                raise ProviderError(f"Unparsable FAQ response: {e}") from e
            logger.info("Generated FAQ schema with %d questions", len(faqs))
            return FAQResult(faqs=faqs, faq_schema=build_faq_schema(faqs))

        return await self.resolve("faq", produce)

    async def generate_comparison_article(self, first: Product, second: Product) -> str:
        async def produce() -> str:
            prompt = render_prompt(
                "comparison",
                name_1=first.name,
                price_1=format_price(first.price),
                specifications_1=_specs_json(first),
                name_2=second.name,
                price_2=format_price(second.price),
                specifications_2=_specs_json(second),
            )
            text = await self.complete(prompt)
            if not text:
                raise ProviderError("AI comparison response was empty")
            return text

        return await self.resolve("comparison", produce)

    async def generate_seo_recommendations(self, product: Product) -> str:
        async def produce() -> str:
            prompt = render_prompt(
                "seo_recommendations",
                name=product.name,
                description_length=len(product.description or ""),
                meta_description=product.meta_description or "None",
                meta_description_length=len(product.meta_description or ""),
                keywords_count=len(product.meta_keywords),
                keywords=", ".join(product.meta_keywords) or "None",
                image_alts_count=len(product.image_alts),
                focus_keyword=product.focus_keyword or "None",
            )
            text = await self.complete(prompt)
            if not text:
                raise ProviderError("AI recommendations response was empty")
            return text

        return await self.resolve(
            "seo_recommendations",
            produce,
            lambda: "Unable to generate recommendations at this time.",
        )
