"""
Seed script to create the first admin user
"""
import argparse
import asyncio
import getpass
import logging

from noticeboard.config.database import db_config, Collections
from noticeboard.database.db_operations import db_ops
from noticeboard.utils.auth import hash_password

logger = logging.getLogger(__name__)

async def seed_first_admin(username: str, password: str) -> bool:
    """Create the admin user unless it already exists"""
    await db_config.connect_db()
    try:
        existing_admin = await db_ops.get_one(Collections.ADMINS, {"username": username})
        if existing_admin:
            logger.warning("⚠️  Admin user %s already exists. Skipping...", username)
            return False

        await db_ops.create(Collections.ADMINS, {
            "username": username,
            "password": hash_password(password),
        })
        logger.info("✅ Created admin user: %s", username)
        return True
    finally:
        await db_config.close_db()

def main():
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    parser = argparse.ArgumentParser(description="Create the first noticeboard admin")
    parser.add_argument("--username", default="admin")
    args = parser.parse_args()
    password = getpass.getpass(f"Password for {args.username}: ")
    asyncio.run(seed_first_admin(args.username, password))

if __name__ == "__main__":
    main()
