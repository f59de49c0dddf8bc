import os
import tempfile
import unittest
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from database import Database


class DatabaseTests(unittest.TestCase):
    def setUp(self):
        tf = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
        tf.close()
        self.db_path = tf.name

    def tearDown(self):
        try:
            os.unlink(self.db_path)
        except OSError:
            pass

    def test_creates_state_table(self):
        db = Database(self.db_path)
        names = {r[0] for r in db.conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        self.assertIn('app_state', names)
        self.assertIsNone(db.load_state())
        self.assertIsNone(db.last_saved_at())
        db.close()

    def test_save_replaces_previous_state(self):
        db = Database(self.db_path)
        db.save_state({"revenue": 1})
        db.save_state({"revenue": 2})
        self.assertEqual(db.load_state(), {"revenue": 2})
        self.assertEqual(db.conn.execute("SELECT COUNT(*) FROM app_state").fetchone()[0], 1)
        self.assertIsNotNone(db.last_saved_at())
        db.close()

        reopened = Database(self.db_path)
        self.assertEqual(reopened.load_state(), {"revenue": 2})
        reopened.close()

    def test_non_object_payload_ignored(self):
        db = Database(self.db_path)
        db.conn.execute("INSERT INTO app_state (id, payload) VALUES (1, ?)", ("[1, 2]",))
        db.conn.commit()
        self.assertIsNone(db.load_state())
        db.close()


if __name__ == '__main__':
    unittest.main()
