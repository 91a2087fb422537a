from __future__ import annotations

from typing import Iterable, List

from ..models import ConstructInfo
from .allow_lists import ALLOWED_FQN_PREFIXES


def is_trusted(fqn: str, prefixes: tuple[str, ...] = ALLOWED_FQN_PREFIXES) -> bool:
    """Whether a construct fqn belongs to an allow-listed scope or package."""
    return fqn.startswith(prefixes)


def filter_trusted(
    infos: Iterable[ConstructInfo],
    prefixes: tuple[str, ...] = ALLOWED_FQN_PREFIXES,
) -> List[ConstructInfo]:
    return [info for info in infos if is_trusted(info.fqn, prefixes)]
