# src/debate_stage/db/__init__.py
"""Database configuration and utilities."""

from .session import SessionLocal, create_tables, get_db

__all__ = ["get_db", "SessionLocal", "create_tables"]
