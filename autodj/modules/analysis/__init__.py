"""
Analysis - Turns analyzer output into enriched Track records.

- tasks/      - MixPointDetectionTask
- pipelines/  - TrackAnalysisPipeline
"""
