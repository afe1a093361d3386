from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml

from schemas.settings import PipelineSettings


DEFAULT_SETTINGS_PATH = Path("config/seo_pipeline.yaml")


def _apply_env_overrides(raw: dict, env: Mapping[str, str]) -> dict:
    llm = dict(raw.get("llm") or {})
    if env.get("OPENAI_MODEL"):
        llm["model"] = env["OPENAI_MODEL"]
    if env.get("OPENAI_TEMPERATURE"):
        llm["temperature"] = float(env["OPENAI_TEMPERATURE"])
    if env.get("OPENAI_SEED"):
        llm["seed"] = int(env["OPENAI_SEED"])
    if env.get("SEO_REQUEST_TIMEOUT"):
        llm["request_timeout_seconds"] = float(env["SEO_REQUEST_TIMEOUT"])
    if llm:
        raw["llm"] = llm

    if env.get("SEO_SITE_URL"):
        raw["site_url"] = env["SEO_SITE_URL"]
    if env.get("SEO_DATA_DIR"):
        raw["data_dir"] = env["SEO_DATA_DIR"]
    return raw


def load_pipeline_settings(
    path: Optional[Path] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> PipelineSettings:
    """
    Loads and validates pipeline settings.

    A missing file is not an error: defaults apply, then env overrides.
    """
    p = path or DEFAULT_SETTINGS_PATH
    raw: dict = {}
    if p.exists():
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Settings file must contain a mapping: {p}")

    raw = _apply_env_overrides(raw, os.environ if env is None else env)
    settings = PipelineSettings.model_validate(raw)

    # Basic sanity checks
    if not settings.site_url.startswith(("http://", "https://")):
        raise ValueError(f"site_url must be an absolute http(s) URL, got: {settings.site_url!r}")

    return settings
