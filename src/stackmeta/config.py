from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_TOOLKIT_STACK_NAME


class StackMetaSettings(BaseSettings):
    """Synthesis settings loaded from the environment."""

    model_config = SettingsConfigDict(
        env_prefix="STACKMETA_",
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    analytics_reporting: bool = Field(
        default=True,
        description="Attach the CDKMetadata analytics resource to synthesized templates",
    )
    force_uncompressed: bool = Field(
        default=False,
        description="Always emit the plaintext analytics encoding",
    )
    toolkit_stack_name: str = Field(
        default=DEFAULT_TOOLKIT_STACK_NAME,
        min_length=1,
        description="Name of the bootstrap toolkit stack to look up",
    )
    debug: bool = Field(default=False, description="Emit debug log lines")

    # Set by the jsii host runtime; read without the STACKMETA_ prefix.
    jsii_agent: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("jsii_agent", "JSII_AGENT"),
    )

    @field_validator("jsii_agent", mode="before")
    @classmethod
    def _blank_agent_is_none(cls, value: Optional[str]) -> Optional[str]:
        if isinstance(value, str):
            trimmed = value.strip()
            return trimmed or None
        return value

    @field_validator("toolkit_stack_name", mode="before")
    @classmethod
    def _strip_stack_name(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip()
        return value
