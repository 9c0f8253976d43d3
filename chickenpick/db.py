import os

from sqlalchemy import create_engine, event
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from chickenpick.config import DATABASE_URL


def _ensure_sqlite_dir(url: str) -> None:
    """Для файловой SQLite создаём каталог заранее (по умолчанию ./data)"""
    database = make_url(url).database
    if database and database != ":memory:":
        folder = os.path.dirname(database)
        if folder:
            os.makedirs(folder, exist_ok=True)


def _sqlite_pragmas(dbapi_connection, connection_record):
    # WAL уменьшает блокировки при параллельных запросах; foreign_keys — для каскадов отзывов и комментариев
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if DATABASE_URL.startswith("sqlite"):
    _ensure_sqlite_dir(DATABASE_URL)
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False, "timeout": 30})
    event.listen(engine, "connect", _sqlite_pragmas)
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_tables() -> None:
    # импорт регистрирует таблицы в Base.metadata
    import chickenpick.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
