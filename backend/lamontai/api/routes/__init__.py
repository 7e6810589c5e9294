"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Ownership checks and business rules live in services or shared helpers

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
