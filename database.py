# database.py
import json
import sqlite3
from datetime import datetime


class Database:
    """
    Manages the SQLite connection holding the POS state.
    The whole session is kept as a single JSON record in `app_state`.
    """
    def __init__(self, db_name: str = "pos.db"):
        self.conn = sqlite3.connect(db_name)
        self.conn.row_factory = sqlite3.Row
        self._create_tables()

    def _create_tables(self):
        cur = self.conn.cursor()
        cur.execute("""
        CREATE TABLE IF NOT EXISTS app_state (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            payload TEXT NOT NULL,
            saved_at TEXT
        )
        """)
        self.conn.commit()

    def load_state(self):
        """Return the saved state dict, or None if nothing usable is stored."""
        cur = self.conn.cursor()
        cur.execute("SELECT payload FROM app_state WHERE id = 1")
        row = cur.fetchone()
        if not row:
            return None
        try:
            state = json.loads(row['payload'])
        except (TypeError, ValueError):
            return None
        return state if isinstance(state, dict) else None

    def save_state(self, state: dict):
        """Replace the stored state."""
        payload = json.dumps(state)
        ts = datetime.now().isoformat(timespec='seconds')
        cur = self.conn.cursor()
        cur.execute("""
        INSERT INTO app_state (id, payload, saved_at) VALUES (1, ?, ?)
        ON CONFLICT(id) DO UPDATE SET payload = excluded.payload, saved_at = excluded.saved_at
        """, (payload, ts))
        self.conn.commit()

    def last_saved_at(self):
        cur = self.conn.cursor()
        cur.execute("SELECT saved_at FROM app_state WHERE id = 1")
        row = cur.fetchone()
        return row['saved_at'] if row else None

    def close(self):
        self.conn.close()
