"""
Create (or promote) an administrator account.

    python create_admin.py --email admin@negromate.com --username admin --password '...'
    python create_admin.py --hash-only --password '...'   # print a bcrypt hash, no database

Uses the same DATABASE_URL / DATABASE_NAME settings as the API.
"""
import argparse
import getpass
import logging
import sys

from auth import get_password_hash
from database import create_document, db, ensure_indexes
from schemas import User as UserSchema

logger = logging.getLogger("create_admin")


def create_admin(username: str, email: str, password: str) -> str:
    email = email.strip().lower()
    existing = db["user"].find_one({"email": email})
    if existing:
        if existing.get("role") != "admin":
            db["user"].update_one({"_id": existing["_id"]}, {"$set": {"role": "admin"}})
            logger.info("Promoted existing user %s to admin", email)
        else:
            logger.info("Admin %s already exists", email)
        return str(existing["_id"])

    user = UserSchema(username=username, email=email, password_hash=get_password_hash(password), role="admin")
    user_id = create_document("user", user)
    logger.info("Created admin %s (%s)", email, user_id)
    return user_id


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create an administrator account")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--email")
    parser.add_argument("--password", help="prompted for when omitted")
    parser.add_argument("--hash-only", action="store_true", help="print the bcrypt hash of the password and exit")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    if args.hash_only:
        password = args.password or getpass.getpass("Password: ")
        if not password.strip():
            logger.error("Password cannot be empty")
            return 1
        print(get_password_hash(password))
        return 0

    if not args.email:
        parser.error("--email is required unless --hash-only is given")
    if db is None:
        logger.error("Database not configured. Set DATABASE_URL and DATABASE_NAME.")
        return 1

    password = args.password or getpass.getpass("Password: ")
    if not password.strip():
        logger.error("Password cannot be empty")
        return 1

    ensure_indexes()
    create_admin(args.username, args.email, password)
    return 0


if __name__ == "__main__":
    sys.exit(main())
