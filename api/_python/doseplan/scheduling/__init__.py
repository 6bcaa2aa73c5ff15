"""
Scheduling layer.

Modules:
- window: Awake window normalization and containment checks
- feasibility: Fail-fast density precheck
- distribution: Per-phase dose spacing and slot materialization
- collision_resolver: Same-action overlap resolution (bounded local search)
"""

from .collision_resolver import CollisionResolver, find_free_slot
from .distribution import DoseDistributor, PhasePlan, plan_phase
from .feasibility import check_feasibility, required_minutes
from .window import is_within_window, normalize_window

__all__ = [
    "CollisionResolver",
    "find_free_slot",
    "DoseDistributor",
    "PhasePlan",
    "plan_phase",
    "check_feasibility",
    "required_minutes",
    "is_within_window",
    "normalize_window",
]
