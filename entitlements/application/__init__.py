"""Application layer: DTOs, ports (protocols), and entitlement services.

Services depend on repository protocols only, so any store implementing
them (SQLAlchemy in production, an in-memory fake in tests) can be injected.
"""
