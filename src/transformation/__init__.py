"""
Transformation Layer - Pure, Deterministic Functions

This layer contains all risk scoring and classification logic.
- Pure functions (input → output)
- No I/O operations
- Unit testable
- Deterministic results
"""
