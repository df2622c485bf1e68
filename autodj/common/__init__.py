"""
Common - Shared utilities and pure functions.

- logging/     - Structured logging configuration
- primitives/  - Pure math functions (numpy only)
"""
