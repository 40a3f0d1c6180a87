from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database

logger = logging.getLogger(__name__)


@dataclass
class MongoConfig:
    uri: str
    database: str
    server_selection_timeout_ms: int = 5000


class DatabaseConnection:
    """Singleton-like Mongo client holder.

    Note: MongoClient keeps its own connection pool, so one client is shared by
    every repository for the lifetime of the process.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: MongoConfig):
        self._config = config
        self._client: Optional[MongoClient] = None

    @classmethod
    def get_instance(cls, config: MongoConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            logger.info("connecting to mongo database=%s", self._config.database)
            self._client = MongoClient(
                self._config.uri,
                serverSelectionTimeoutMS=self._config.server_selection_timeout_ms,
                tz_aware=False,
            )
        return self._client

    @property
    def database(self) -> Database:
        return self.client[self._config.database]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
