import os
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

load_dotenv()

PORTAL_DATA_DIR = Path(
    os.getenv("PORTAL_DATA_DIR", str(Path.home() / ".kist-portal"))
).expanduser()
PORTAL_DATABASE_URL = os.getenv("PORTAL_DATABASE_URL")
PORTAL_KEY_PREFIX = os.getenv("PORTAL_KEY_PREFIX", "kist_")

TIMEOUT_SECONDS = 30


def get_database_url() -> str:
    if PORTAL_DATABASE_URL:
        return PORTAL_DATABASE_URL

    PORTAL_DATA_DIR.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{PORTAL_DATA_DIR / 'store.db'}"


def get_engine(url: str | None = None) -> Engine:
    url = url or get_database_url()

    engine = create_engine(
        url,
        echo=False,
        poolclass=NullPool,
        connect_args={"timeout": TIMEOUT_SECONDS} if url.startswith("sqlite") else {},
    )

    if url.startswith("sqlite"):

        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine
