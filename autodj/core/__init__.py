"""
Core - Domain models, errors, configuration and protocols.

- models.py      - Track, contexts, transition plan dataclasses
- errors.py      - Error hierarchy with structured logging
- config/        - Settings from environment
- interfaces/    - Protocols for dependency injection
"""
