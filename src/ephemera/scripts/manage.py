"""Seed and inspect the local database.

Usage:
    python -m ephemera.scripts.manage init-db
    python -m ephemera.scripts.manage add-user 05abc... --name Alice
    python -m ephemera.scripts.manage add-group 03def... --admin 05abc...
    python -m ephemera.scripts.manage add-thread 05abc... [--group]
    python -m ephemera.scripts.manage token 05abc...
"""
from __future__ import annotations

import argparse
import sys

from sqlalchemy.orm import Session

from ephemera.core.security import create_access_token
from ephemera.db.session import SessionLocal, create_tables
from ephemera.models import ClosedGroup, GroupAdmin, LocalUser, Thread


def add_user(db: Session, address: str, display_name: str | None = None) -> LocalUser:
    """Create or rename a local user."""
    user = db.get(LocalUser, address)
    if user is None:
        user = LocalUser(address=address)
        db.add(user)
    user.display_name = display_name
    db.commit()
    return user


def add_group(db: Session, address: str, admins: list[str], title: str | None = None) -> ClosedGroup:
    """Create a closed group or update it so its admins are exactly ``admins``."""
    group = db.get(ClosedGroup, address)
    if group is None:
        group = ClosedGroup(address=address)
        db.add(group)
    group.title = title
    wanted = set(admins)
    group.admins = [admin for admin in group.admins if admin.admin_address in wanted]
    existing = {admin.admin_address for admin in group.admins}
    for admin in sorted(wanted - existing):
        group.admins.append(GroupAdmin(group_address=address, admin_address=admin))
    db.commit()
    return group


def add_thread(db: Session, recipient_address: str, is_closed_group: bool = False) -> Thread:
    """Create a thread addressed to ``recipient_address``."""
    thread = Thread(recipient_address=recipient_address, is_closed_group=is_closed_group)
    db.add(thread)
    db.commit()
    db.refresh(thread)
    return thread


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Manage the Ephemera database")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("init-db", help="Create all tables")

    user_parser = commands.add_parser("add-user", help="Create a local user")
    user_parser.add_argument("address")
    user_parser.add_argument("--name", default=None)

    group_parser = commands.add_parser("add-group", help="Create a closed group")
    group_parser.add_argument("address")
    group_parser.add_argument("--admin", action="append", default=[])
    group_parser.add_argument("--title", default=None)

    thread_parser = commands.add_parser("add-thread", help="Create a thread")
    thread_parser.add_argument("recipient")
    thread_parser.add_argument("--group", action="store_true")

    token_parser = commands.add_parser("token", help="Issue an access token")
    token_parser.add_argument("address")

    args = parser.parse_args(argv)

    if args.command == "init-db":
        create_tables()
        print("[manage] tables created")
        return
    if args.command == "token":
        print(create_access_token(args.address))
        return

    db = SessionLocal()
    try:
        if args.command == "add-user":
            add_user(db, args.address, args.name)
            print(f"[manage] user {args.address} ready")
        elif args.command == "add-group":
            add_group(db, args.address, args.admin, args.title)
            print(f"[manage] group {args.address} ready with {len(args.admin)} admin(s)")
        elif args.command == "add-thread":
            thread = add_thread(db, args.recipient, args.group)
            print(f"[manage] thread {thread.id} -> {args.recipient}")
    except Exception as exc:
        print(f"[manage] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
