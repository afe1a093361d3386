from pydantic import Field

from schemas.base import SchemaBase


class LLMSettings(SchemaBase):
    model: str = Field("gpt-5.2", description="Responses API model id")
    temperature: float | None = Field(0.2, ge=0, le=2)
    seed: int | None = 1337
    max_output_tokens: int | None = Field(None, ge=1)
    reasoning_effort: str = "low"
    request_timeout_seconds: float = Field(60.0, gt=0, description="Wall-clock bound per generative call")


class PipelineSettings(SchemaBase):
    """
    Runtime settings for the SEO content pipeline.

    Loaded from config/seo_pipeline.yaml; environment variables override
    the model knobs and the storefront URL.
    """
    site_url: str = Field("https://gladiustraders.com", description="Storefront base URL used in product schema offers")
    default_brand: str = "Gladius"
    default_category: str = "Knife"
    data_dir: str = Field("data", description="Directory holding the JSON stores")
    run_log_path: str = Field("output/seo_runs.jsonl", description="Append-only generation run log")
    batch_concurrency: int = Field(5, ge=1, le=20)
    max_image_alts: int = Field(5, ge=0)
    llm: LLMSettings = Field(default_factory=LLMSettings)
