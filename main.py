# main.py
import os
import sys
import logging
import argparse
import json
from pathlib import Path

from database import Database
from logger import setup_logger
from session import PosSession

logger = logging.getLogger("bakery_pos.main")

# Default configuration
DEFAULT_CONFIG = {
    "database": "pos.db",
    "receipt_dir": "receipts",
    "export_dir": "exports",
    "theme": "default",
    "currency": "$",
    "logging": {
        "level": "INFO",
        "file": "logs/pos.log"
    }
}


def load_config(config_path="config.json"):
    """Load configuration from JSON file or create default if not exists"""
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = json.load(f)
            logger.info(f"Configuration loaded from {config_path}")
            return {**DEFAULT_CONFIG, **config}
        except (OSError, ValueError) as e:
            logger.error(f"Error loading config: {e}")
            return dict(DEFAULT_CONFIG)

    with open(config_path, 'w') as f:
        json.dump(DEFAULT_CONFIG, f, indent=4)
    logger.info(f"Created default configuration at {config_path}")

    return dict(DEFAULT_CONFIG)


def setup_directories(config):
    """Create required directories if they don't exist."""
    dirs = [config.get("receipt_dir", "receipts"), config.get("export_dir", "exports")]
    log_file = config.get("logging", {}).get("file")
    if log_file and os.path.dirname(log_file):
        dirs.append(os.path.dirname(log_file))

    for dir_path in dirs:
        path = Path(dir_path)
        if not path.exists():
            path.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created directory: {path}")


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(description="Tiny Bakery POS")
    parser.add_argument("--config", help="Path to configuration file", default="config.json")
    parser.add_argument("--debug", help="Enable debug mode", action="store_true")
    return parser.parse_args(argv)


def main():
    try:
        args = parse_arguments()
        config = load_config(args.config)
        app_logger = setup_logger(config)
        if args.debug:
            app_logger.setLevel(logging.DEBUG)
            logger.debug("Debug mode enabled")

        setup_directories(config)

        db = Database(config["database"])
        logger.info(f"Database initialized: {config['database']}")
        session = PosSession.load(db)

        from ui import BakeryUI
        app = BakeryUI(session, config)
        logger.info("Starting POS application")
        app.run()

    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
