"""Storage module."""

from .database import IDatabase, SqliteDatabase

__all__ = ["IDatabase", "SqliteDatabase"]
