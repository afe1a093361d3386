"""What happens when a generative call for an artifact fails.

soft artifacts fall back to deterministic text and the operation carries on.
hard artifacts either raise ProviderError or, where the operation's contract
is "maybe", resolve to None. Adding an artifact means adding a row here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Criticality(str, Enum):
    soft = "soft"
    hard = "hard"


class OnFailure(str, Enum):
    fallback = "fallback"
    none = "none"
    raise_ = "raise"


@dataclass(frozen=True)
class ArtifactPolicy:
    criticality: Criticality
    on_failure: OnFailure


ARTIFACT_POLICIES: dict[str, ArtifactPolicy] = {
    "description": ArtifactPolicy(Criticality.hard, OnFailure.raise_),
    "keywords": ArtifactPolicy(Criticality.soft, OnFailure.fallback),
    "meta_description": ArtifactPolicy(Criticality.soft, OnFailure.fallback),
    "image_alt": ArtifactPolicy(Criticality.soft, OnFailure.fallback),
    "faq": ArtifactPolicy(Criticality.hard, OnFailure.none),
    "buying_guide": ArtifactPolicy(Criticality.hard, OnFailure.none),
    "category_description": ArtifactPolicy(Criticality.soft, OnFailure.fallback),
    "comparison": ArtifactPolicy(Criticality.hard, OnFailure.raise_),
    "seo_recommendations": ArtifactPolicy(Criticality.soft, OnFailure.fallback),
}


def policy_for(artifact: str) -> ArtifactPolicy:
    try:
        return ARTIFACT_POLICIES[artifact]
    except KeyError:
        raise KeyError(f"No failure policy declared for artifact {artifact!r}") from None
