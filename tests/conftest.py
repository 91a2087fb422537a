from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from stackmeta.analytics.registry import ConstructInfoRegistry

_ENV_VARS = (
    "JSII_AGENT",
    "GITHUB_ACTIONS",
    "STACKMETA_ANALYTICS_REPORTING",
    "STACKMETA_FORCE_UNCOMPRESSED",
    "STACKMETA_DEBUG",
    "STACKMETA_TOOLKIT_STACK_NAME",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Tests start without host-provided agent / settings variables."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def registry() -> ConstructInfoRegistry:
    return ConstructInfoRegistry()
