"""
Transition - Entry-offset search, curve synthesis and the planner.
"""

from .entry_search import (
    EntryOffsetResult,
    find_best_entry_offset,
    outgoing_fingerprint,
    candidate_start_times,
    tail_penalty,
)
from .curves import synthesize_waypoints, step_count, crossfade_volumes, merge_volumes
from .planner import HeuristicTransitionPlanner

__all__ = [
    'EntryOffsetResult',
    'find_best_entry_offset',
    'outgoing_fingerprint',
    'candidate_start_times',
    'tail_penalty',
    'synthesize_waypoints',
    'step_count',
    'crossfade_volumes',
    'merge_volumes',
    'HeuristicTransitionPlanner',
]
