"""
Database connection and initialization.
"""

import aiosqlite
from pathlib import Path
from ainotes.logging import get_logger

logger = get_logger('database')

SCHEMA_PATH = Path(__file__).parent / "init_db.sql"


async def connect(db_path: str | Path) -> aiosqlite.Connection:
    """
    Open a connection with dict-like rows.

    :param db_path: Path to the SQLite database file
    :type db_path: str | Path
    :return: Open database connection; the caller closes it
    :rtype: aiosqlite.Connection
    """
    db = await aiosqlite.connect(db_path)
    db.row_factory = aiosqlite.Row
    return db


async def init_db(db_path: str | Path):
    """
    Create the notes schema if it is not there yet.

    :param db_path: Path to the SQLite database file
    :type db_path: str | Path
    :return: None
    :rtype: None
    """
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(path) as db:
        with open(SCHEMA_PATH) as f:
            await db.executescript(f.read())
        await db.commit()
        logger.info(f"Database initialized at {path}")
