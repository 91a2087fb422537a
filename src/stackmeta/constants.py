from __future__ import annotations

from enum import Enum


class ExitCode(int, Enum):
    """Process exit codes."""

    SUCCESS = 0
    ERROR = 2
    INTERNAL = 3


class Analytics:
    """Fixed names for the analytics payload and its template resource."""

    FORMAT_VERSION = 2
    RUNTIME_FQN = "jsii-runtime.Runtime"
    RESOURCE_ID = "CDKMetadata"
    RESOURCE_TYPE = "AWS::CDK::Metadata"
    PROPERTY_NAME = "Analytics"
    CONDITION_ID = "CDKMetadataAvailable"
    REGION_PSEUDO_PARAMETER = "AWS::Region"
    MAX_OR_CONDITIONS = 10  # Fn::Or accepts at most 10 operands


DEFAULT_TOOLKIT_STACK_NAME = "CDKToolkit"
