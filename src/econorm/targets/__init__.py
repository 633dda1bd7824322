"""Group consensus (auto-targeting) and per-item dimension resolution."""

from econorm.targets.groups import IndicatorGroup, Observation, build_groups, observe
from econorm.targets.resolver import GroupTarget, resolve_item, resolve_targets

__all__ = [
    "GroupTarget",
    "IndicatorGroup",
    "Observation",
    "build_groups",
    "observe",
    "resolve_item",
    "resolve_targets",
]
