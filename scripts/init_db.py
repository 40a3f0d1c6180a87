from __future__ import annotations

import importlib
import sys
from pathlib import Path

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from dotenv import load_dotenv

from config import get_settings_module

from labour_system.common.log import configure_logging
from labour_system.database.bootstrap import ensure_indexes
from labour_system.database.connection import DatabaseConnection, MongoConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    mongo_config = dict(settings.MONGO_CONFIG)

    conn = DatabaseConnection.get_instance(MongoConfig(uri=mongo_config["uri"], database=mongo_config["database"]))
    try:
        count = ensure_indexes(conn.database)
    finally:
        conn.close()
    print(f"OK: indexes ready -> {mongo_config['database']} (indexes={count})")


if __name__ == "__main__":
    main()
