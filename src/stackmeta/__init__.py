"""stackmeta: construct provenance analytics for synthesized templates."""

from .analytics import construct_info, format_analytics
from .config import StackMetaSettings
from .constructs import App, CloudAssembly, Construct, Stack, StackArtifact
from .models import ConstructInfo, Deferred, EncodedPayload, InclusionDecision, InclusionKind, Resolved

__all__ = [
    "App",
    "CloudAssembly",
    "Construct",
    "ConstructInfo",
    "Deferred",
    "EncodedPayload",
    "InclusionDecision",
    "InclusionKind",
    "Resolved",
    "Stack",
    "StackArtifact",
    "StackMetaSettings",
    "construct_info",
    "format_analytics",
]
