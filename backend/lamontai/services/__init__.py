"""Services Layer — orchestration of core logic, persistence, cache and the LLM.

Invariants:
    - Services raise LamontError subclasses, never HTTPException
    - Services receive their AsyncSession / LLM client from the caller

Design Decisions:
    - One service module per capability: auth, quota, writing, site intelligence
"""
