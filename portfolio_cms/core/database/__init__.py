"""
Database layer.

SQLModel entities, repositories and the async engine / session management.
"""

from .session import async_session_maker, engine, get_session, init_db

__all__ = ["async_session_maker", "engine", "get_session", "init_db"]
