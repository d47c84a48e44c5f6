import logging

from .database import get_db_connection


class SQLiteHandler(logging.Handler):
    """
    A logging handler that writes lesson logs to an SQLite database.
    """

    def __init__(self, db_path: str = None):
        super().__init__()
        self.db_path = db_path

    def emit(self, record):
        try:
            conn = get_db_connection(self.db_path)
            with conn:
                conn.execute(
                    "INSERT INTO logs (logger, level, message) VALUES (?, ?, ?)",
                    (record.name, record.levelname, self.format(record)),
                )
            conn.close()
        except Exception:
            self.handleError(record)
