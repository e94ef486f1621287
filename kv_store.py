"""
Key-value store backends used to persist student records.

Every backend offers the same four operations: get, set, delete and scan_prefix.
Keys are plain strings such as 'student:<id>'; values are JSON-serialisable dicts.
"""
import copy
import json
import logging

import mysql.connector

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the backing store cannot complete a read or write."""


class InMemoryKeyValueStore:
    """Process-local store, used for development and tests."""

    def __init__(self, initial=None):
        self._data = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key):
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key, value):
        self._data[key] = copy.deepcopy(value)

    def delete(self, key):
        self._data.pop(key, None)

    def scan_prefix(self, prefix):
        return [copy.deepcopy(self._data[key]) for key in sorted(self._data) if key.startswith(prefix)]


def _escape_like(value):
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class MySQLKeyValueStore:
    """
    Stores each key as one row of a two-column table (k, value JSON).

    A new connection is opened per operation and closed afterwards, so the
    store can be shared across requests without pooling.
    """

    def __init__(self, db_config, table='kv_store'):
        self.db_config = db_config
        self.table = table
        self._table_ready = False

    def get_db_connection(self):
        """Establishes a connection to the MySQL database."""
        return mysql.connector.connect(**self.db_config)

    def _run(self, query, params=(), fetch=False):
        db_conn = None
        cursor = None
        try:
            db_conn = self.get_db_connection()
            cursor = db_conn.cursor()
            cursor.execute(query, params)
            if fetch:
                return cursor.fetchall()
            db_conn.commit()
            return None
        except mysql.connector.Error as e:
            logger.error("Key-value store query failed on table %s: %s", self.table, e)
            raise StoreError(str(e)) from e
        finally:
            if cursor:
                cursor.close()
            if db_conn and db_conn.is_connected():
                db_conn.close()

    def ensure_table(self):
        if self._table_ready:
            return
        self._run(f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                k VARCHAR(255) NOT NULL PRIMARY KEY,
                value JSON NOT NULL
            )
        """)
        self._table_ready = True

    def get(self, key):
        self.ensure_table()
        rows = self._run(f"SELECT value FROM {self.table} WHERE k = %s", (key,), fetch=True)
        if not rows:
            return None
        return json.loads(rows[0][0])

    def set(self, key, value):
        self.ensure_table()
        query = f"""
            INSERT INTO {self.table} (k, value) VALUES (%s, %s)
            ON DUPLICATE KEY UPDATE value = VALUES(value)
        """
        self._run(query, (key, json.dumps(value)))

    def delete(self, key):
        self.ensure_table()
        self._run(f"DELETE FROM {self.table} WHERE k = %s", (key,))

    def scan_prefix(self, prefix):
        self.ensure_table()
        query = f"SELECT value FROM {self.table} WHERE k LIKE %s ORDER BY k ASC"
        rows = self._run(query, (_escape_like(prefix) + '%',), fetch=True)
        return [json.loads(row[0]) for row in rows]
