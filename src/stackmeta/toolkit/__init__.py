"""Bootstrap toolkit stack introspection."""

from .info import (
    DEFAULT_TOOLKIT_STACK_NAME,
    EcrRepositoryInfo,
    ToolkitInfo,
    ToolkitSdk,
    describe_stack,
    stack_outputs,
)

__all__ = [
    "DEFAULT_TOOLKIT_STACK_NAME",
    "EcrRepositoryInfo",
    "ToolkitInfo",
    "ToolkitSdk",
    "describe_stack",
    "stack_outputs",
]
