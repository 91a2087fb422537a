from __future__ import annotations

from typing import Callable, Dict, Optional, TypeVar

from ..models import ConstructInfo

T = TypeVar("T", bound=type)


class ConstructInfoRegistry:
    """
    Maps construct classes to their {fqn, version} descriptor.

    Lookup walks the MRO, so subclasses report their closest registered
    ancestor unless they register their own descriptor.
    """

    def __init__(self) -> None:
        self._infos: Dict[type, ConstructInfo] = {}

    def register(self, cls: type, fqn: str, version: str) -> None:
        self._infos[cls] = ConstructInfo(fqn=fqn, version=version)

    def unregister(self, cls: type) -> None:
        self._infos.pop(cls, None)

    def lookup(self, cls: type) -> Optional[ConstructInfo]:
        for klass in cls.__mro__:
            info = self._infos.get(klass)
            if info is not None:
                return info
        return None

    def __contains__(self, cls: object) -> bool:
        return cls in self._infos

    def __len__(self) -> int:
        return len(self._infos)


default_registry = ConstructInfoRegistry()


def construct_info(
    fqn: str,
    version: str,
    registry: Optional[ConstructInfoRegistry] = None,
) -> Callable[[T], T]:
    """Class decorator registering a construct's fqn and version."""
    target = registry if registry is not None else default_registry

    def decorator(cls: T) -> T:
        target.register(cls, fqn, version)
        return cls

    return decorator
