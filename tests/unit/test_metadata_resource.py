from __future__ import annotations

import re
from typing import Optional

import pytest

from stackmeta.analytics.registry import ConstructInfoRegistry
from stackmeta.config import StackMetaSettings
from stackmeta.constructs import App, Construct, Stack
from stackmeta.errors import ConstructError


class CoreConstruct(Construct):
    pass


class ThirdPartyConstruct(Construct):
    pass


@pytest.fixture
def app(registry: ConstructInfoRegistry) -> App:
    registry.register(CoreConstruct, "@amzn/core.TestConstruct", "1.2.3")
    registry.register(ThirdPartyConstruct, "mycoolthing.TestConstruct", "1.2.3")
    return App(StackMetaSettings(analytics_reporting=True, force_uncompressed=True), registry=registry)


def _analytics(app: App, stack_name: str = "Stack") -> Optional[str]:
    template = app.synth().get_stack_by_name(stack_name).template
    return template.get("Resources", {}).get("CDKMetadata", {}).get("Properties", {}).get("Analytics")


def test_not_included_if_region_known_and_unavailable(app: App) -> None:
    Stack(app, "StackUnavailable", region="definitely-no-metadata-resource-available-here")
    template = app.synth().get_stack_by_name("StackUnavailable").template
    assert "CDKMetadata" not in template.get("Resources", {})


def test_included_if_region_known_and_available(app: App) -> None:
    Stack(app, "StackPresent", region="us-east-1")
    template = app.synth().get_stack_by_name("StackPresent").template
    assert "CDKMetadata" in template["Resources"]
    assert "Condition" not in template["Resources"]["CDKMetadata"]
    assert "Conditions" not in template


def test_included_with_condition_if_region_unknown(app: App) -> None:
    Stack(app, "StackUnknown")
    template = app.synth().get_stack_by_name("StackUnknown").template
    assert template["Resources"]["CDKMetadata"]["Condition"] == "CDKMetadataAvailable"
    assert "CDKMetadataAvailable" in template["Conditions"]


def test_includes_formatted_analytics(app: App) -> None:
    Stack(app, "Stack")
    assert re.match(r"v2:plaintext:.*jsii-runtime\.Runtime.*", _analytics(app) or "")


def test_includes_current_jsii_runtime_version(monkeypatch: pytest.MonkeyPatch, registry: ConstructInfoRegistry) -> None:
    monkeypatch.setenv("JSII_AGENT", "Java/1.2.3.4")
    app = App(StackMetaSettings(force_uncompressed=True), registry=registry)
    Stack(app, "Stack")
    assert "Java/1.2.3.4!jsii-runtime.Runtime" in (_analytics(app) or "")


def test_includes_constructs_added_to_stack(app: App) -> None:
    stack = Stack(app, "Stack")
    CoreConstruct(stack, "Test")
    assert "1.2.3!@amzn/core.TestConstruct" in (_analytics(app) or "")


def test_only_includes_constructs_in_allow_list(app: App) -> None:
    stack = Stack(app, "Stack")
    ThirdPartyConstruct(stack, "Test")
    assert "TestConstruct" not in (_analytics(app) or "")


def test_constructs_in_other_stacks_are_not_reported(app: App) -> None:
    Stack(app, "Stack")
    CoreConstruct(Stack(app, "Other"), "Test")
    assert "TestConstruct" not in (_analytics(app) or "")
    assert "TestConstruct" in (_analytics(app, "Other") or "")


def test_reporting_disabled_omits_resource(registry: ConstructInfoRegistry) -> None:
    app = App(StackMetaSettings(analytics_reporting=False), registry=registry)
    Stack(app, "Stack", region="us-east-1")
    assert app.synth().get_stack_by_name("Stack").template == {}


def test_synthesis_is_repeatable(app: App) -> None:
    stack = Stack(app, "Stack")
    CoreConstruct(stack, "A")
    CoreConstruct(stack, "B")
    assert app.synth() == app.synth()


def test_unknown_stack_name_raises(app: App) -> None:
    with pytest.raises(ConstructError):
        app.synth().get_stack_by_name("Missing")
