"""Infrastructure Layer — database, logging, clock, and seeding.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All storage failures mapped to DatabaseError at this boundary

Design Decisions:
    - Thin wrappers over SQLAlchemy and logging so the rest of the app sees one API
"""
