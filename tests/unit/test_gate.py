from __future__ import annotations

from stackmeta.analytics.allow_lists import CDK_METADATA_REGIONS
from stackmeta.analytics.gate import (
    add_metadata_resource,
    condition_or,
    decide_inclusion,
    region_availability_condition,
)
from stackmeta.models import Deferred, InclusionDecision, InclusionKind, Resolved
from stackmeta.template import Template


def test_known_supported_region_includes_unconditionally() -> None:
    decision = decide_inclusion(Resolved("us-east-1"))
    assert decision.kind is InclusionKind.INCLUDE_UNCONDITIONAL
    assert decision.condition is None


def test_known_unsupported_region_is_omitted() -> None:
    decision = decide_inclusion(Resolved("definitely-no-metadata-resource-available-here"))
    assert decision.kind is InclusionKind.OMIT
    assert decision.includes is False


def test_deferred_region_is_conditional() -> None:
    decision = decide_inclusion(Deferred())
    assert decision.kind is InclusionKind.INCLUDE_CONDITIONAL
    assert decision.condition == region_availability_condition(Deferred())


def test_empty_region_falls_back_to_conditional() -> None:
    decision = decide_inclusion(Resolved(""))
    assert decision.kind is InclusionKind.INCLUDE_CONDITIONAL
    assert decision.condition == region_availability_condition(Deferred())


def test_custom_allow_list() -> None:
    assert decide_inclusion(Resolved("mars-1"), available_regions=("mars-1",)).kind is InclusionKind.INCLUDE_UNCONDITIONAL
    assert decide_inclusion(Resolved("us-east-1"), available_regions=("mars-1",)).kind is InclusionKind.OMIT


def test_condition_or_collapses_single_operand() -> None:
    only = {"Fn::Equals": ["a", "b"]}
    assert condition_or(only) is only
    assert condition_or(only, only) == {"Fn::Or": [only, only]}


def test_condition_chunks_at_ten_operands() -> None:
    condition = region_availability_condition(Deferred())
    chunks = condition["Fn::Or"]
    assert len(chunks) == 3
    assert len(chunks[0]["Fn::Or"]) == 10
    assert len(chunks[1]["Fn::Or"]) == 10
    # remainder of one region collapses to a bare Fn::Equals
    assert chunks[2] == {"Fn::Equals": [{"Ref": "AWS::Region"}, CDK_METADATA_REGIONS[-1]]}


def test_condition_uses_deferred_reference() -> None:
    condition = region_availability_condition(Deferred("TargetRegion"), regions=("us-east-1", "eu-west-1"))
    assert condition == {
        "Fn::Or": [
            {"Fn::Equals": [{"Ref": "TargetRegion"}, "us-east-1"]},
            {"Fn::Equals": [{"Ref": "TargetRegion"}, "eu-west-1"]},
        ]
    }


def test_omit_leaves_template_untouched() -> None:
    template = Template()
    added = add_metadata_resource(template, "v2:plaintext:x", InclusionDecision(InclusionKind.OMIT))
    assert added is False
    assert template.to_dict() == {}


def test_unconditional_resource() -> None:
    template = Template()
    add_metadata_resource(template, "v2:plaintext:x", InclusionDecision(InclusionKind.INCLUDE_UNCONDITIONAL))
    assert template.to_dict() == {
        "Resources": {
            "CDKMetadata": {
                "Type": "AWS::CDK::Metadata",
                "Properties": {"Analytics": "v2:plaintext:x"},
            }
        }
    }


def test_conditional_resource() -> None:
    template = Template()
    decision = decide_inclusion(Deferred())
    add_metadata_resource(template, "v2:plaintext:x", decision)

    rendered = template.to_dict()
    assert rendered["Resources"]["CDKMetadata"]["Condition"] == "CDKMetadataAvailable"
    assert rendered["Conditions"]["CDKMetadataAvailable"] == decision.condition


def test_unrecognised_region_value_is_conditional() -> None:
    decision = decide_inclusion("us-east-1")  # plain string, not a RegionValue
    assert decision.kind is InclusionKind.INCLUDE_CONDITIONAL
    first_check = decision.condition["Fn::Or"][0]["Fn::Or"][0]
    assert first_check == {"Fn::Equals": [{"Ref": "AWS::Region"}, CDK_METADATA_REGIONS[0]]}
    assert decision.condition == region_availability_condition(Deferred("AWS::Region"))
