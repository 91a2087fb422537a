from __future__ import annotations

import os
import platform
from typing import TYPE_CHECKING, List, Optional

from ..constants import Analytics
from ..models import ConstructInfo
from .provenance import is_trusted
from .registry import ConstructInfoRegistry, default_registry

if TYPE_CHECKING:
    from ..constructs import Construct, Stack


def jsii_agent_version(agent: Optional[str] = None) -> str:
    """
    Agent string for the jsii runtime pseudo construct.

    Explicit value first, then JSII_AGENT, then the running interpreter.
    """
    if agent is None:
        agent = os.environ.get("JSII_AGENT")
    if agent and agent.strip():
        return agent.strip()
    return f"Python/{platform.python_version()}"


def construct_info_from_construct(
    construct: "Construct",
    registry: Optional[ConstructInfoRegistry] = None,
) -> Optional[ConstructInfo]:
    info = (registry or default_registry).lookup(type(construct))
    if info is None:
        return None
    if not isinstance(info.fqn, str) or not isinstance(info.version, str):
        return None
    if not info.fqn or not info.version:
        return None
    return info


def construct_info_from_stack(
    stack: "Stack",
    *,
    registry: Optional[ConstructInfoRegistry] = None,
    agent: Optional[str] = None,
) -> List[ConstructInfo]:
    """
    Walk the stack tree and return the unique construct infos within it.

    Only constructs whose fqn matches the allow list are reported, plus one
    pseudo construct for the jsii runtime.
    """
    infos: List[ConstructInfo] = []
    for construct in stack.node.find_all():
        info = construct_info_from_construct(construct, registry)
        if info is not None and is_trusted(info.fqn):
            infos.append(info)

    infos.append(ConstructInfo(fqn=Analytics.RUNTIME_FQN, version=jsii_agent_version(agent)))

    seen: set[tuple[str, str]] = set()
    unique: List[ConstructInfo] = []
    for info in infos:
        if info.key in seen:
            continue
        seen.add(info.key)
        unique.append(info)
    return unique
