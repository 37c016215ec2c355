"""Core Layer — pure dispatch and authorization logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (the clock is passed in)

Design Decisions:
    - Functional core separated from imperative shell: the dispatcher and
      authorizer in services/ do the IO and delegate every decision here
"""
