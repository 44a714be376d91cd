#!/usr/bin/env python3
"""
Seed script for the marketplace API.
Run this script to load the demo accounts, store and listings into the
configured storage backend.
"""

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

if __name__ == "__main__":
    from core.config import settings
    from core.logging import configure_logging, get_logger
    from storage import build_storage
    from storage.seed import seed_demo_data

    configure_logging()
    logger = get_logger("seed_db")

    storage = build_storage(settings)
    if seed_demo_data(storage):
        logger.info("Demo data loaded, log in as admin/admin123 or merchant/merchant123")
    else:
        logger.info("Nothing to do")
