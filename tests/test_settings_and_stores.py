from __future__ import annotations

import json
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from app_logging.run_logger import RunLogger
from lib.catalog_store import JsonCollection, JsonCategoryContentStore, JsonProductStore
from lib.settings_loader import load_pipeline_settings
from lib.text_utils import clip, dedupe_preserve_order, strip_wrapping_quotes
from schemas.category import CategoryContent
from schemas.product import Product, ProductSpecifications


class TestSettingsLoader(unittest.TestCase):
    def test_repo_config_loads(self) -> None:
        repo = Path(__file__).resolve().parents[1]
        settings = load_pipeline_settings(repo / "config" / "seo_pipeline.yaml", env={})
        self.assertEqual(settings.site_url, "https://gladiustraders.com")
        self.assertEqual(settings.default_brand, "Gladius")
        self.assertEqual(settings.batch_concurrency, 5)

    def test_missing_file_uses_defaults_and_env_overrides(self) -> None:
        with TemporaryDirectory() as td:
            settings = load_pipeline_settings(
                Path(td) / "nope.yaml",
                env={"OPENAI_MODEL": "gpt-test", "OPENAI_SEED": "7", "SEO_REQUEST_TIMEOUT": "5"},
            )
        self.assertEqual(settings.default_category, "Knife")
        self.assertEqual(settings.llm.model, "gpt-test")
        self.assertEqual(settings.llm.seed, 7)
        self.assertEqual(settings.llm.request_timeout_seconds, 5.0)

    def test_invalid_settings(self) -> None:
        with TemporaryDirectory() as td:
            path = Path(td) / "settings.yaml"
            path.write_text("site_url: ftp://example.com\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_pipeline_settings(path, env={})

            path.write_text("- just\n- a list\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_pipeline_settings(path, env={})

            path.write_text("unknown_key: 1\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_pipeline_settings(path, env={})


class TestStores(unittest.TestCase):
    def setUp(self) -> None:
        self._td = TemporaryDirectory()
        self.addCleanup(self._td.cleanup)
        self.root = Path(self._td.name)

    def test_empty_or_missing_file_is_an_empty_collection(self) -> None:
        path = self.root / "products.json"
        self.assertEqual(JsonCollection(path=path).load()["items"], {})
        path.write_text("   ", encoding="utf-8")
        self.assertEqual(JsonProductStore(path=path).list_all(), [])

    def test_products_are_stored_with_camel_case_specifications(self) -> None:
        store = JsonProductStore(path=self.root / "products.json")
        product = Product(
            id="p1",
            name="Pro Chef Knife",
            category_id="c1",
            specifications=ProductSpecifications(blade_length="8 in", origin="Seki"),
        )
        store.save(product)

        raw = json.loads((self.root / "products.json").read_text(encoding="utf-8"))
        self.assertEqual(raw["items"]["p1"]["specifications"], {"bladeLength": "8 in", "origin": "Seki"})
        self.assertEqual(store.find_by_id("p1"), product)
        self.assertIsNone(store.find_by_id("p2"))
        self.assertEqual([p.id for p in store.find_by_ids(["p2", "p1"])], ["p1"])
        self.assertEqual(len(store.find_by_category("c1", limit=10)), 1)

    def test_unknown_specification_key_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ProductSpecifications.model_validate({"bladeLength": "8 in", "color": "red"})

    def test_category_content_create_is_once_per_category(self) -> None:
        store = JsonCategoryContentStore(path=self.root / "category_content.json")
        store.create(CategoryContent(category="c1", description="One"))
        with self.assertRaises(ValueError):
            store.create(CategoryContent(category="c1", description="Two"))
        self.assertEqual(store.find_one("c1").description, "One")


class TestRunLogger(unittest.TestCase):
    def test_events_are_appended_as_jsonl(self) -> None:
        with TemporaryDirectory() as td:
            log = RunLogger(log_path=Path(td) / "logs" / "runs.jsonl", run_id="r1")
            log.start("generate", "p1", {"name": "Pro Chef Knife"})
            log.error("generate", "p1", RuntimeError("boom"))

            events = log.read()
            lines = (Path(td) / "logs" / "runs.jsonl").read_text(encoding="utf-8").splitlines()

        self.assertEqual(len(lines), 2)
        self.assertEqual([e["event"] for e in events], ["start", "error"])
        self.assertEqual(events[1]["status"], "error")
        self.assertEqual(events[1]["error"], {"type": "RuntimeError", "message": "boom"})

    def test_read_missing_log(self) -> None:
        self.assertEqual(RunLogger(log_path=Path("/nonexistent/runs.jsonl")).read(), [])


class TestTextUtils(unittest.TestCase):
    def test_clip(self) -> None:
        self.assertEqual(clip("abc", 5), "abc")
        self.assertEqual(clip("abcdefgh", 5), "ab...")
        self.assertEqual(len(clip("x" * 400, 155)), 155)

    def test_strip_and_dedupe(self) -> None:
        self.assertEqual(strip_wrapping_quotes('"Sharp knife"'), "Sharp knife")
        self.assertEqual(strip_wrapping_quotes("Chef's knife"), "Chef's knife")
        self.assertEqual(dedupe_preserve_order(["A b", "a  B", "", "c"]), ["A b", "c"])


if __name__ == "__main__":
    unittest.main()
