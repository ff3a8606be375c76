"""Data stores for persistence and counters.

Stores handle:
- PostgreSQL: DB session, ORM operations
- Redis: real-time counters

No business logic in stores - that belongs in services.
"""
