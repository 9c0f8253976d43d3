# Utility to create the tables and optionally load a menu CSV: python init_db.py [menus.csv]
import sys

from chickenpick.db import SessionLocal, create_tables
from chickenpick.logging_config import app_logger
from chickenpick.services.csv_import_service import import_menus_csv
from chickenpick.services.storage_client import get_storage_client


def init_db(csv_path: str = None):
    create_tables()
    print('Tables created')
    if not csv_path:
        return

    with open(csv_path, encoding="utf-8-sig") as f:
        text = f.read()

    db = SessionLocal()
    try:
        result = import_menus_csv(text, db, get_storage_client())
        print(f'Imported {csv_path}: created={result.created} updated={result.updated} skipped={result.skipped}')
    except Exception as e:
        db.rollback()
        app_logger.exception("Menu CSV import failed for %s: %s", csv_path, e)
        print(f'Error during import: {e}')
        raise
    finally:
        db.close()


if __name__ == '__main__':
    init_db(sys.argv[1] if len(sys.argv) > 1 else None)
