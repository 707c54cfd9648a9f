"""Remote model access for MediaMuse."""

from .model_gateway import (
    ModelGateway,
    create_client,
    ANALYZE_PROMPT,
    IDENTIFY_PROMPT,
    ANALYZE_FALLBACK,
    IDENTIFY_FALLBACK,
)

__all__ = [
    "ModelGateway",
    "create_client",
    "ANALYZE_PROMPT",
    "IDENTIFY_PROMPT",
    "ANALYZE_FALLBACK",
    "IDENTIFY_FALLBACK",
]
