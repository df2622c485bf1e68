"""
Layer 3: PIPELINES - Analysis Pipelines

Pipelines orchestrate tasks into a finished, immutable Track.
"""

from .track_analysis import TrackAnalysisPipeline, analyze_track

__all__ = [
    'TrackAnalysisPipeline',
    'analyze_track',
]
