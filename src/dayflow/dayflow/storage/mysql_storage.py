from __future__ import annotations

from typing import Optional

from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchone
from .port import KeyValueStorage


class MySQLStorage(KeyValueStorage):
    """Key-value storage backed by the ``kv_store`` table."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @property
    def conn_factory(self) -> DatabaseConnection:
        return self._conn_factory

    def get_item(self, key: str) -> Optional[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT item_value FROM kv_store WHERE item_key=%s", (key,))
            row = fetchone(cur)
            return row["item_value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO kv_store(item_key, item_value)
                VALUES(%s, %s)
                ON DUPLICATE KEY UPDATE item_value=VALUES(item_value)
                """,
                (key, value),
            )

    def remove_item(self, key: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM kv_store WHERE item_key=%s", (key,))
