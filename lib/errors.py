from __future__ import annotations


class SEOPipelineError(Exception):
    """Base error for the SEO content pipeline. `status` mirrors the admin API code."""

    status: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SEOPipelineError):
    """Bad or missing input, rejected before any external call."""

    status = 400


class NotFoundError(SEOPipelineError):
    status = 404


class NoContentError(SEOPipelineError):
    """Approve/edit attempted on a product without a draft."""

    status = 400


class ProviderError(SEOPipelineError):
    """The generative call failed, timed out, or returned unusable output."""

    status = 502
