"""Database layer for taxfiler application."""

from taxfiler.database.base import Database
from taxfiler.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
