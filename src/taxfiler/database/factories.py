"""Open the SQLite store that holds a sole trader's ledger."""

import os
from pathlib import Path
from typing import Optional

from taxfiler.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "TAXFILER_DB_PATH"
DEFAULT_DB_DIR = ".taxfiler"
DEFAULT_DB_NAME = "taxfiler.db"


def default_database_path() -> Path:
    """Ledger file under the user's home directory, creating its folder."""
    ledger_dir = Path.home() / DEFAULT_DB_DIR
    ledger_dir.mkdir(exist_ok=True)
    return ledger_dir / DEFAULT_DB_NAME


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Open (creating if needed) the ledger database.

    The file is chosen from, in order: ``database_path``, the
    ``TAXFILER_DB_PATH`` environment variable, then
    ``~/.taxfiler/taxfiler.db``. The chosen path is kept on the returned
    instance as ``database_path`` so commands can report where data lives.
    """
    path = database_path or os.environ.get(DB_PATH_ENV) or str(default_database_path())
    db = SQLAlchemyDatabase(f"sqlite:///{path}")
    db.database_path = path
    return db
