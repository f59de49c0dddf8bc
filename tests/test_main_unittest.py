import os
import json
import logging
import tempfile
import unittest
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import main
from logger import setup_logger


class ConfigTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def test_missing_config_is_created_with_defaults(self):
        path = os.path.join(self.tmpdir, 'config.json')
        config = main.load_config(path)
        self.assertEqual(config, main.DEFAULT_CONFIG)
        with open(path) as f:
            self.assertEqual(json.load(f), main.DEFAULT_CONFIG)

    def test_user_config_overrides_defaults(self):
        path = os.path.join(self.tmpdir, 'config.json')
        with open(path, 'w') as f:
            json.dump({"currency": "EUR ", "database": "shop.db"}, f)
        config = main.load_config(path)
        self.assertEqual(config["currency"], "EUR ")
        self.assertEqual(config["database"], "shop.db")
        self.assertEqual(config["receipt_dir"], "receipts")

    def test_unreadable_config_falls_back(self):
        path = os.path.join(self.tmpdir, 'config.json')
        with open(path, 'w') as f:
            f.write("{broken")
        self.assertEqual(main.load_config(path), main.DEFAULT_CONFIG)

    def test_setup_directories(self):
        config = {
            "receipt_dir": os.path.join(self.tmpdir, 'r'),
            "export_dir": os.path.join(self.tmpdir, 'e'),
            "logging": {"file": os.path.join(self.tmpdir, 'logs', 'pos.log')},
        }
        main.setup_directories(config)
        for d in ('r', 'e', 'logs'):
            self.assertTrue(os.path.isdir(os.path.join(self.tmpdir, d)))

    def test_parse_arguments(self):
        args = main.parse_arguments(["--config", "x.json", "--debug"])
        self.assertEqual(args.config, "x.json")
        self.assertTrue(args.debug)


class LoggerTests(unittest.TestCase):
    def test_setup_logger_is_idempotent(self):
        log_file = os.path.join(tempfile.mkdtemp(), 'logs', 'pos.log')
        config = {"logging": {"level": "DEBUG", "file": log_file}}
        logger = setup_logger(config)
        logger = setup_logger(config)
        try:
            self.assertEqual(logger.level, logging.DEBUG)
            self.assertEqual(len(logger.handlers), 2)
            logging.getLogger("bakery_pos.test").info("hello")
            for h in logger.handlers:
                h.flush()
            with open(log_file) as f:
                self.assertIn("bakery_pos.test - INFO - hello", f.read())
        finally:
            for h in logger.handlers[:]:
                logger.removeHandler(h)
                h.close()


if __name__ == '__main__':
    unittest.main()
