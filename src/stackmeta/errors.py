from __future__ import annotations

from .constants import ExitCode


class StackMetaError(Exception):
    """Base exception for all stackmeta errors."""

    exit_code: ExitCode = ExitCode.ERROR


class ConfigError(StackMetaError):
    """Configuration validation failed."""


class ConstructError(StackMetaError):
    """Invalid construct tree (bad id, duplicate child, unknown stack)."""


class TemplateError(StackMetaError):
    """Invalid template mutation (duplicate logical id)."""


class AnalyticsError(StackMetaError):
    """Base for analytics pipeline errors."""


class AnalyticsEncodingError(AnalyticsError):
    """Compression of the analytics body failed (environment problem, not usage)."""

    exit_code = ExitCode.INTERNAL


class AnalyticsFormatError(AnalyticsError):
    """An analytics string could not be parsed."""


class ToolkitError(StackMetaError):
    """Bootstrap toolkit stack is missing something we need."""
