"""Services Layer — domain models, model registry, authorizer, and dispatcher.

Invariants:
    - Every domain model extends ResourceModel and returns ModelOutcome values
    - Registry and verb dispatch use explicit dict mappings (no auto-discovery)

Design Decisions:
    - One file per resource model for locality
"""
