#!/usr/bin/env python3
"""Promote an existing account to ADMIN.

Roles only change through explicit updates, and only admins may change
roles over HTTP, so the first admin has to be created here.

Usage:
    python src/scripts/promote_admin.py --email admin@example.com
    python src/scripts/promote_admin.py --email admin@example.com --dry-run

Environment Variables:
    MONGO_URL, MONGODB_DATABASE, JWT_SECRET_KEY (see utils/settings.py)
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adapter.mongodb.connection import close_client, get_mongodb_client
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import DomainError, NotFoundError
from domain.model.user import Role
from port.user_repository import UserRepository
from utils.logging import setup_structured_logging
from utils.settings import load_settings

logger = logging.getLogger(__name__)


def promote_admin(repo: UserRepository, email: str, dry_run: bool = False) -> str:
    """Give the account ADMIN role.

    Returns 'already_admin', 'dry_run' or 'promoted'.

    Raises:
        NotFoundError: no account for this email
        DomainError: the update failed
    """
    user = repo.get_by_email(email)
    if not user:
        raise NotFoundError(f"No user with email {email}")

    if user.role == Role.ADMIN:
        return "already_admin"
    if dry_run:
        return "dry_run"

    if not repo.update(user.id, {"role": Role.ADMIN}):
        raise DomainError("Failed to update role")

    logger.info("User promoted to admin", extra={"userId": user.id})
    return "promoted"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Promote an account to ADMIN")
    parser.add_argument("--email", required=True, help="Email of the account to promote")
    parser.add_argument("--dry-run", action="store_true", help="Report without writing")
    args = parser.parse_args(argv)

    load_dotenv()
    settings = load_settings()
    setup_structured_logging(settings.log_level)

    client = get_mongodb_client(settings.mongo_url)
    if client is None:
        logger.error("Cannot promote user: MongoDB connection failed")
        return 1

    try:
        repo = MongoUserRepository(client[settings.database_name])
        result = promote_admin(repo, args.email, dry_run=args.dry_run)
    except DomainError as e:
        logger.error(f"Promotion failed: {e}")
        return 1
    finally:
        close_client()

    print(f"{args.email}: {result}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
