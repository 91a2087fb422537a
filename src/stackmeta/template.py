from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict

from .errors import TemplateError


@dataclass
class Template:
    """Minimal deployment template: resources and conditions by logical id."""

    resources: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    conditions: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def add_resource(self, logical_id: str, resource: Dict[str, Any]) -> None:
        if logical_id in self.resources:
            raise TemplateError(f"Duplicate resource logical id: {logical_id}")
        self.resources[logical_id] = resource

    def add_condition(self, logical_id: str, condition: Dict[str, Any]) -> None:
        if logical_id in self.conditions:
            raise TemplateError(f"Duplicate condition logical id: {logical_id}")
        self.conditions[logical_id] = condition

    def to_dict(self) -> Dict[str, Any]:
        rendered: Dict[str, Any] = {}
        if self.conditions:
            rendered["Conditions"] = copy.deepcopy(self.conditions)
        if self.resources:
            rendered["Resources"] = copy.deepcopy(self.resources)
        return rendered
