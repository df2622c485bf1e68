"""
Planner Protocol - Interface for transition planning strategies.

A planner turns a TransitionContext into a plan plus diagnostics.
Planners must be pure: no shared mutable state between calls, so one
instance can serve many threads.
"""

from typing import Optional, Protocol, runtime_checkable

from autodj.core.models import PlanningResult, TransitionContext


@runtime_checkable
class TransitionPlannerProtocol(Protocol):
    """Protocol for transition planners (DI interface)."""

    def plan(self, context: TransitionContext) -> Optional[PlanningResult]:
        """
        Plan a transition.

        Args:
            context: Current/next tracks, energy targets, duration hint

        Returns:
            PlanningResult, or None when either track is missing
        """
        ...

    @property
    def name(self) -> str:
        """Planner name for logging."""
        ...
