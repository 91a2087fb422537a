from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Union

from .analytics.collector import construct_info_from_stack
from .analytics.encoder import format_analytics
from .analytics.gate import add_metadata_resource, decide_inclusion
from .analytics.registry import ConstructInfoRegistry
from .config import StackMetaSettings
from .errors import ConstructError
from .logging import StructuredLogger
from .models import RegionValue, as_region_value
from .template import Template

PATH_SEP = "/"


class Node:
    """Tree bookkeeping for a construct."""

    def __init__(self, host: "Construct", scope: Optional["Construct"], id: str) -> None:
        if scope is not None and not id:
            raise ConstructError("Only root constructs may have an empty id")
        if PATH_SEP in id:
            raise ConstructError(f"Construct id may not contain '{PATH_SEP}': {id!r}")
        self.host = host
        self.scope = scope
        self.id = id
        self._children: Dict[str, Construct] = {}
        if scope is not None:
            scope.node._add_child(id, host)

    def _add_child(self, id: str, child: "Construct") -> None:
        if id in self._children:
            raise ConstructError(f"There is already a construct with id {id!r} in {self.path or '<root>'}")
        self._children[id] = child

    @property
    def children(self) -> List["Construct"]:
        return list(self._children.values())

    @property
    def path(self) -> str:
        ids: List[str] = []
        node: Optional[Node] = self
        while node is not None and node.scope is not None:
            ids.append(node.id)
            node = node.scope.node
        return PATH_SEP.join(reversed(ids))

    def find_all(self) -> List["Construct"]:
        """This construct and every descendant, pre-order."""
        return list(self._walk())

    def _walk(self) -> Iterator["Construct"]:
        yield self.host
        for child in self._children.values():
            yield from child.node._walk()


class Construct:
    def __init__(self, scope: Optional["Construct"], id: str) -> None:
        self.node = Node(self, scope, id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.node.path or '<root>'})"


class Stack(Construct):
    """A deployment unit; renders to one template."""

    def __init__(
        self,
        scope: Optional[Construct],
        id: str,
        *,
        region: Union[RegionValue, str, None] = None,
    ) -> None:
        super().__init__(scope, id)
        self.region: RegionValue = as_region_value(region)

    @property
    def stack_name(self) -> str:
        return self.node.id


@dataclass(frozen=True)
class StackArtifact:
    stack_name: str
    template: Dict[str, Any]


@dataclass(frozen=True)
class CloudAssembly:
    stacks: List[StackArtifact]

    def get_stack_by_name(self, name: str) -> StackArtifact:
        for artifact in self.stacks:
            if artifact.stack_name == name:
                return artifact
        raise ConstructError(f"Unable to find stack with name {name!r}")


class App(Construct):
    """Root of the construct tree."""

    def __init__(
        self,
        settings: Optional[StackMetaSettings] = None,
        *,
        registry: Optional[ConstructInfoRegistry] = None,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        super().__init__(None, "")
        self.settings = settings or StackMetaSettings()
        self.registry = registry
        self.logger = logger or StructuredLogger("synth", debug=self.settings.debug)

    def stacks(self) -> List[Stack]:
        return [c for c in self.node.find_all() if isinstance(c, Stack)]

    def synth(self) -> CloudAssembly:
        artifacts: List[StackArtifact] = []
        for stack in self.stacks():
            with self.logger.stage("synth_stack", stack=stack.stack_name):
                artifacts.append(StackArtifact(stack.stack_name, self._synth_stack(stack).to_dict()))
        return CloudAssembly(artifacts)

    def _synth_stack(self, stack: Stack) -> Template:
        template = Template()
        if not self.settings.analytics_reporting:
            return template

        infos = construct_info_from_stack(
            stack,
            registry=self.registry,
            agent=self.settings.jsii_agent,
        )
        analytics = format_analytics(infos, self.settings.force_uncompressed)
        decision = decide_inclusion(stack.region, logger=self.logger)
        add_metadata_resource(template, analytics, decision)
        self.logger.debug(
            "analytics_attached",
            stack=stack.stack_name,
            decision=decision.kind.value,
            constructs=len(infos),
        )
        return template
