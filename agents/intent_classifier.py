"""Rule-based keyword intent tagging.

Each keyword is matched case-insensitively against three fixed vocabularies,
in order: informational, navigational, transactional. The first vocabulary
with a substring hit wins; keywords matching none default to transactional,
which is what a product page mostly ranks for.
"""

from __future__ import annotations

from typing import Iterable

from schemas.common import KeywordIntent, SearchIntent


INFORMATIONAL_TERMS = ("what", "how", "why", "guide", "tutorial", "learn", "tips")
NAVIGATIONAL_TERMS = ("brand", "official", "website", "store")
TRANSACTIONAL_TERMS = ("buy", "price", "cheap", "best", "review", "discount", "shop", "purchase")

_ORDERED_VOCABULARIES: tuple[tuple[SearchIntent, tuple[str, ...]], ...] = (
    (SearchIntent.informational, INFORMATIONAL_TERMS),
    (SearchIntent.navigational, NAVIGATIONAL_TERMS),
    (SearchIntent.transactional, TRANSACTIONAL_TERMS),
)


def classify_search_intent(keyword: str) -> SearchIntent:
    lowered = (keyword or "").lower()
    for intent, terms in _ORDERED_VOCABULARIES:
        if any(term in lowered for term in terms):
            return intent
    return SearchIntent.transactional


def tag_keywords(keywords: Iterable[str]) -> list[KeywordIntent]:
    return [KeywordIntent(keyword=k, intent=classify_search_intent(k)) for k in keywords]


def first_transactional(tagged: Iterable[KeywordIntent]) -> str | None:
    for ki in tagged:
        if ki.intent == SearchIntent.transactional:
            return ki.keyword
    return None
