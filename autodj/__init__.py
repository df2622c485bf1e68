"""
autodj - Continuous-mix decision engine.

Layers:
- common/   - Structured logging and pure numpy primitives
- core/     - Domain models, errors, configuration, protocols
- modules/  - Analysis, selection and transition planning
"""

__version__ = "0.1.0"
