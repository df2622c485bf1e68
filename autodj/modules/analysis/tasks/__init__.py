"""
Layer 2: TASKS - Analysis Tasks

Tasks combine primitives to solve one analysis problem each.

Usage:
    from autodj.modules.analysis.tasks import MixPointDetectionTask

    result = MixPointDetectionTask().execute(track)
    print(result.mix_in_point, result.mix_out_point)
"""

from .base import BaseTask
from .mix_points import (
    MixPointResult,
    MixPointDetectionTask,
    find_mix_in_point,
    find_mix_out_point,
)

__all__ = [
    'BaseTask',
    'MixPointResult',
    'MixPointDetectionTask',
    'find_mix_in_point',
    'find_mix_out_point',
]
