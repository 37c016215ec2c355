"""Pydantic Schemas — input validation for every resource and verb.

Invariants:
    - Schemas validate at the model boundary; a failure never reaches storage
    - One schema per (resource, verb) input shape

Design Decisions:
    - Separate from models: schemas are input contracts, models are persistence
"""
