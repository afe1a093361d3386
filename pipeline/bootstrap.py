from __future__ import annotations

from pathlib import Path
from typing import Optional

from agents.category_content_agent import CategoryContentGenerator
from agents.content_generator import ContentGenerator
from agents.llm_client import GenerativeTextModel, LLMClient
from app_logging.run_logger import RunLogger
from lib.catalog_store import open_stores
from pipeline.admin_operations import AdminOperations
from pipeline.approval import ApprovalWorkflow
from pipeline.batch import BatchCoordinator
from pipeline.product_generation import ProductContentPipeline
from schemas.settings import PipelineSettings


def build_admin_operations(
    settings: PipelineSettings,
    *,
    model: Optional[GenerativeTextModel] = None,
    repo_root: Optional[Path] = None,
) -> AdminOperations:
    """
    Wire stores, generator and workflows from settings.

    `model` defaults to the OpenAI-backed LLMClient; tests pass a fake.
    Relative paths in settings resolve against `repo_root` (default: cwd).
    """
    root = repo_root or Path(".")
    data_dir = Path(settings.data_dir)
    if not data_dir.is_absolute():
        data_dir = root / data_dir
    log_path = Path(settings.run_log_path)
    if not log_path.is_absolute():
        log_path = root / log_path

    products, categories, contents = open_stores(data_dir)

    generator = ContentGenerator(
        model or LLMClient.from_settings(settings.llm),
        request_timeout=settings.llm.request_timeout_seconds,
        default_brand=settings.default_brand,
        default_category=settings.default_category,
    )
    workflow = ApprovalWorkflow(products=products)
    pipeline = ProductContentPipeline(
        generator=generator,
        products=products,
        categories=categories,
        workflow=workflow,
        site_url=settings.site_url,
        max_image_alts=settings.max_image_alts,
        run_logger=RunLogger(log_path=log_path),
    )
    return AdminOperations(
        products=products,
        generator=generator,
        pipeline=pipeline,
        workflow=workflow,
        batch=BatchCoordinator(pipeline=pipeline, concurrency=settings.batch_concurrency),
        categories=CategoryContentGenerator(
            generator=generator,
            categories=categories,
            products=products,
            contents=contents,
        ),
    )
