"""Message-processing orchestrator."""

from .models import EnrichmentOptions, ExchangeResult, PipelineStage
from .orchestrator import (
    CANCELLED_CONTENT,
    ERROR_CONTENT,
    IMAGE_FALLBACK_CAVEAT,
    MISSING_CREDENTIAL_CONTENT,
    EnrichmentPipeline,
)

__all__ = [
    "EnrichmentOptions",
    "ExchangeResult",
    "PipelineStage",
    "EnrichmentPipeline",
    "CANCELLED_CONTENT",
    "ERROR_CONTENT",
    "IMAGE_FALLBACK_CAVEAT",
    "MISSING_CREDENTIAL_CONTENT",
]
