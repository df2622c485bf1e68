"""
Interfaces - Protocols for Dependency Injection.

Example:
    def run_session(planner: TransitionPlannerProtocol):
        # Works with any planning strategy
        result = planner.plan(context)
"""

from .task_result import TaskResult
from .planner_protocol import (
    TransitionPlannerProtocol,
)

__all__ = [
    # Task
    'TaskResult',
    # Planner
    'TransitionPlannerProtocol',
]
