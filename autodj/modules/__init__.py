"""
Modules - Application logic.

- analysis/    - mix-point detection, track enrichment
- selection/   - compatibility scoring, next-track choice, DJ session
- transition/  - entry-offset search, curve synthesis, planner
- config.py    - tuning constants
"""
