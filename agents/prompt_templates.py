from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

PROMPTS_DIR = Path(__file__).resolve().parent / "prompts"

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


@lru_cache(maxsize=None)
def load_template(template: str) -> str:
    path = PROMPTS_DIR / f"{template}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")
    return path.read_text(encoding="utf-8")


def render_prompt(template: str, /, **values: object) -> str:
    """
    Fill `{{key}}` placeholders in prompts/<template>.txt in a single pass.

    Substituted values are never re-scanned; placeholders without a value
    are left as written.
    """

    def fill(match: re.Match[str]) -> str:
        key = match.group(1)
        return str(values[key]) if key in values else match.group(0)

    return _PLACEHOLDER.sub(fill, load_template(template)).strip()
