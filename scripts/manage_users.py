#!/usr/bin/env python3
"""
User management CLI for the collab identity store.

Usage:
    python scripts/manage_users.py list
    python scripts/manage_users.py promote <login>
    python scripts/manage_users.py demote <login>
"""

import argparse
import asyncio
import sys

from loguru import logger

from collab.auth.login import is_valid_github_login, normalize_login
from collab.config import AuthConfig
from collab.database import User, create_engine_and_sessionmaker, init_db, session_scope
from collab.repositories import UserRepository


async def list_users(args):
    """List all users."""
    engine, session_maker = create_engine_and_sessionmaker(args.database_url)
    await init_db(engine)

    async with session_scope(session_maker) as session:
        users = await UserRepository(User, session).list_users(limit=args.limit)
    await engine.dispose()

    if not users:
        print("No users found.")
        return 0

    print(f"\n{'ID':<8} {'Login':<40} {'GitHub ID':<12} {'Admin':<6} {'Created':<20}")
    print("-" * 90)

    for user in users:
        admin_str = "Yes" if user.admin else "No"
        created = user.created_at.strftime("%Y-%m-%d %H:%M:%S") if user.created_at else ""
        print(f"{user.id:<8} {user.github_login:<40} {user.github_user_id:<12} {admin_str:<6} {created:<20}")

    print(f"\nTotal: {len(users)} users")
    return 0


async def set_admin(args, admin: bool):
    """Set or clear the admin flag on a user."""
    github_login = normalize_login(args.login)
    if not is_valid_github_login(github_login):
        print(f"Error: '{args.login}' is not a valid login")
        return 1

    engine, session_maker = create_engine_and_sessionmaker(args.database_url)
    await init_db(engine)

    async with session_scope(session_maker) as session:
        user = await UserRepository(User, session).set_admin(github_login, admin)
    await engine.dispose()

    if user is None:
        print(f"Error: user '{github_login}' not found")
        return 1

    logger.info(f"Set admin={admin} for {github_login}")
    print(f"✓ {github_login} is {'now' if admin else 'no longer'} an admin")
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Collab User Management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--database-url",
        default=AuthConfig.from_env().database_url,
        help="SQLAlchemy async database URL (default: $DATABASE_URL)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    list_parser = subparsers.add_parser("list", help="List users")
    list_parser.add_argument("--limit", type=int, default=100, help="Maximum rows")
    list_parser.set_defaults(func=list_users)

    promote_parser = subparsers.add_parser("promote", help="Grant admin to a user")
    promote_parser.add_argument("login", help="GitHub login")
    promote_parser.set_defaults(func=lambda a: set_admin(a, True))

    demote_parser = subparsers.add_parser("demote", help="Revoke admin from a user")
    demote_parser.add_argument("login", help="GitHub login")
    demote_parser.set_defaults(func=lambda a: set_admin(a, False))

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        return 1

    return asyncio.run(args.func(args))


if __name__ == "__main__":
    sys.exit(main())
