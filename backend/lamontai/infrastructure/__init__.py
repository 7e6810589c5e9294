"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure imports core only for errors and pure rules, never services/ or api/
    - All external calls wrapped with retry, timeout or fallback plus error mapping

Design Decisions:
    - Resilient wrappers over raw clients (ADR: single responsibility)
"""
