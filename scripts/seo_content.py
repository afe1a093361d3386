from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from agents.seo_score_agent import SEOScoreAgent
from lib.catalog_store import open_stores
from lib.errors import NotFoundError
from lib.env import load_env
from lib.settings_loader import load_pipeline_settings
from pipeline.admin_operations import AdminOperations, fail, ok
from pipeline.bootstrap import build_admin_operations


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _split_ids(raw: str) -> list[str]:
    return [s.strip() for s in (raw or "").split(",") if s.strip()]


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Generate, review and publish AI SEO content for catalog products")
    ap.add_argument("--config", default=None, help="Settings YAML (default: config/seo_pipeline.yaml)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("generate", "Generate a pending AI draft for a product"),
        ("regenerate", "Replace a product's AI draft"),
        ("approve", "Publish a product's AI draft"),
        ("reject", "Reject a product's AI draft"),
        ("analyze", "AI recommendations plus current SEO score"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("product_id")

    p = sub.add_parser("edit", help="Edit a pending draft before approval")
    p.add_argument("product_id")
    p.add_argument("--description", default=None)
    p.add_argument("--meta-description", default=None)
    p.add_argument("--keywords", default=None, help="Comma-separated keywords")

    p = sub.add_parser("score", help="Deterministic SEO score (no AI calls)")
    p.add_argument("product_id")
    p.add_argument("--draft", action="store_true", help="Score the draft as if it were approved")

    p = sub.add_parser("batch", help="Generate drafts for up to 20 products")
    p.add_argument("product_ids", help="Comma-separated product ids")

    p = sub.add_parser("category-guide", help="Generate a category buying guide and description")
    p.add_argument("category_id")

    p = sub.add_parser("compare", help="Generate a comparison article for two products")
    p.add_argument("product_id_1")
    p.add_argument("product_id_2")

    sub.add_parser("status", help="AI content status for all products")
    return ap


async def _dispatch(ops: AdminOperations, args: argparse.Namespace) -> dict[str, Any]:
    cmd = args.command
    if cmd == "generate":
        return await ops.generate(args.product_id)
    if cmd == "regenerate":
        return await ops.regenerate(args.product_id)
    if cmd == "approve":
        return await ops.approve(args.product_id)
    if cmd == "reject":
        return await ops.reject(args.product_id)
    if cmd == "analyze":
        return await ops.analyze(args.product_id)
    if cmd == "edit":
        return await ops.edit(
            args.product_id,
            description=args.description,
            meta_description=args.meta_description,
            keywords=_split_ids(args.keywords) if args.keywords is not None else None,
        )
    if cmd == "batch":
        return await ops.batch_generate(_split_ids(args.product_ids))
    if cmd == "category-guide":
        return await ops.category_buying_guide(args.category_id)
    if cmd == "compare":
        return await ops.compare(args.product_id_1, args.product_id_2)
    if cmd == "status":
        return await ops.products_status()
    raise ValueError(f"Unknown command: {cmd}")


def _score(data_dir: Path, product_id: str, use_draft: bool) -> dict[str, Any]:
    products, _, _ = open_stores(data_dir)
    product = products.find_by_id(product_id)
    if product is None:
        return fail(NotFoundError("Product not found"))
    payload = product.model_dump()
    payload["use_draft"] = use_draft
    return ok(f"SEO score for {product.name}", SEOScoreAgent().run(payload))


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    repo_root = _repo_root()
    load_env(repo_root)
    config = Path(args.config) if args.config else repo_root / "config" / "seo_pipeline.yaml"
    settings = load_pipeline_settings(config)

    if args.command == "score":
        data_dir = Path(settings.data_dir)
        if not data_dir.is_absolute():
            data_dir = repo_root / data_dir
        envelope = _score(data_dir, args.product_id, bool(args.draft))
    else:
        ops = build_admin_operations(settings, repo_root=repo_root)
        envelope = asyncio.run(_dispatch(ops, args))

    print(json.dumps(envelope, indent=2, ensure_ascii=False))
    return 0 if envelope.get("success") else 1


if __name__ == "__main__":
    raise SystemExit(main())
