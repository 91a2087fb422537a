from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from ..constants import Analytics
from ..logging import StructuredLogger
from ..models import (
    Deferred,
    InclusionDecision,
    InclusionKind,
    Resolved,
    RegionValue,
)
from .allow_lists import CDK_METADATA_REGIONS

if TYPE_CHECKING:
    from ..template import Template


def condition_equals(lhs: Any, rhs: Any) -> Dict[str, Any]:
    return {"Fn::Equals": [lhs, rhs]}


def condition_or(*conditions: Dict[str, Any]) -> Dict[str, Any]:
    """Fn::Or, collapsing to the operand when there is only one."""
    if not conditions:
        raise ValueError("Fn::Or needs at least one condition")
    if len(conditions) == 1:
        return conditions[0]
    return {"Fn::Or": list(conditions)}


def region_availability_condition(
    region_ref: Deferred,
    regions: Sequence[str] = CDK_METADATA_REGIONS,
) -> Dict[str, Any]:
    """
    Deploy-time condition true iff the stack region is in `regions`.

    Fn::Or takes at most 10 operands, so the equality checks are chunked and
    the chunks or-ed together.
    """
    equals = [condition_equals(region_ref.to_template(), region) for region in regions]
    step = Analytics.MAX_OR_CONDITIONS
    chunks: List[Dict[str, Any]] = [
        condition_or(*equals[i : i + step]) for i in range(0, len(equals), step)
    ]
    return condition_or(*chunks)


def decide_inclusion(
    region: RegionValue,
    available_regions: Sequence[str] = CDK_METADATA_REGIONS,
    logger: Optional[StructuredLogger] = None,
) -> InclusionDecision:
    """
    Decide whether a stack's template carries the CDKMetadata resource.

    Known region: include or omit per the allow-list.
    Unknown at synthesis time: include behind a deploy-time region condition.
    """
    if isinstance(region, Resolved) and region.value:
        if region.value in available_regions:
            return InclusionDecision(InclusionKind.INCLUDE_UNCONDITIONAL)
        if logger:
            logger.debug("metadata_resource_unavailable", region=region.value)
        return InclusionDecision(InclusionKind.OMIT)

    ref = region if isinstance(region, Deferred) else Deferred()
    if not isinstance(region, Deferred) and logger:
        logger.debug("region_unresolvable", region=repr(region))
    return InclusionDecision(
        InclusionKind.INCLUDE_CONDITIONAL,
        condition=region_availability_condition(ref, available_regions),
    )


def add_metadata_resource(
    template: "Template",
    analytics: str,
    decision: InclusionDecision,
) -> bool:
    """Attach CDKMetadata per `decision`. Returns whether anything was added."""
    if not decision.includes:
        return False

    resource: Dict[str, Any] = {
        "Type": Analytics.RESOURCE_TYPE,
        "Properties": {Analytics.PROPERTY_NAME: analytics},
    }
    if decision.kind is InclusionKind.INCLUDE_CONDITIONAL:
        template.add_condition(Analytics.CONDITION_ID, decision.condition)
        resource["Condition"] = Analytics.CONDITION_ID
    template.add_resource(Analytics.RESOURCE_ID, resource)
    return True
