"""Database Declarations — the SQLAlchemy declarative Base shared by every ORM model.

Invariants:
    - Engines and sessions live in infrastructure/database.py, never here
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite for local/dev, asyncpg for PostgreSQL: both native async drivers
"""
