"""Construct analytics: provenance collection, encoding and template gating."""

from .collector import construct_info_from_construct, construct_info_from_stack, jsii_agent_version
from .encoder import encode_analytics, expand_analytics, format_analytics, prefix_encode
from .gate import add_metadata_resource, decide_inclusion, region_availability_condition
from .provenance import filter_trusted, is_trusted
from .registry import ConstructInfoRegistry, construct_info, default_registry

__all__ = [
    "ConstructInfoRegistry",
    "add_metadata_resource",
    "construct_info",
    "construct_info_from_construct",
    "construct_info_from_stack",
    "decide_inclusion",
    "default_registry",
    "encode_analytics",
    "expand_analytics",
    "filter_trusted",
    "format_analytics",
    "is_trusted",
    "jsii_agent_version",
    "prefix_encode",
    "region_availability_condition",
]
