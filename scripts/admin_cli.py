#!/usr/bin/env python3
"""
Admin Console CLI

Usage:
    python scripts/admin_cli.py init-db
    python scripts/admin_cli.py create-admin --username admin --email admin@example.com --password ...
    python scripts/admin_cli.py list-admins
    python scripts/admin_cli.py seed-samples [--with-payments]
    python scripts/admin_cli.py stats
    python scripts/admin_cli.py check-connections
"""
import argparse
import getpass
import sys

sys.path.insert(0, '.')

from sqlalchemy import text

from admin_console.core.auth import hash_password
from admin_console.core.config import get_settings
from admin_console.core.logging import configure_logging
from admin_console.db.postgres import get_db_session, execute_raw_sql, test_postgres_connection
from admin_console.db.mongodb import test_mongo_connection
from admin_console.db.tables import init_db
from admin_console.services import billing_service, dashboard_service


def cmd_init_db(args) -> int:
    init_db()
    added = billing_service.seed_default_plans()
    print(f"Tables ready, {added} subscription plans added")
    return 0


def cmd_create_admin(args) -> int:
    password = args.password or getpass.getpass("Password: ")
    if len(password) < 8:
        print("Password must be at least 8 characters", file=sys.stderr)
        return 1

    with get_db_session() as db:
        existing = db.execute(
            text("SELECT id FROM users WHERE username = :username OR email = :email"),
            {"username": args.username, "email": args.email}
        ).fetchone()
        if existing:
            print(f"User '{args.username}' or '{args.email}' already exists", file=sys.stderr)
            return 1
        db.execute(
            text("""
                INSERT INTO users (username, password_hash, email, first_name, last_name, user_type, is_admin, blocked)
                VALUES (:username, :password_hash, :email, :first_name, :last_name, 'admin', TRUE, FALSE)
            """),
            {
                "username": args.username,
                "password_hash": hash_password(password),
                "email": args.email,
                "first_name": args.first_name,
                "last_name": args.last_name,
            }
        )
    print(f"Admin '{args.username}' created")
    return 0


def cmd_list_admins(args) -> int:
    rows = execute_raw_sql(
        "SELECT id, username, email, blocked, last_login FROM users WHERE is_admin = TRUE ORDER BY id"
    )
    if not rows:
        print("No admins")
        return 0
    for row in rows:
        status = "blocked" if row["blocked"] else "active"
        print(f"{row['id']:>5}  {row['username']:<20} {row['email']:<32} {status:<8} {row['last_login'] or '-'}")
    return 0


def cmd_seed_samples(args) -> int:
    counts = billing_service.seed_sample_data(include_payments=args.with_payments)
    print(f"Added {counts['plans']} plans, {counts['payments']} payments")
    return 0


def cmd_stats(args) -> int:
    stats = dashboard_service.dashboard_stats()
    for card in stats["cards"]:
        print(f"{card['title']:<15} {card['value']:>12}  {card['description']}")
    return 0


def cmd_check_connections(args) -> int:
    settings = get_settings()
    database_ok = test_postgres_connection()
    mongo_ok = test_mongo_connection()
    print(f"Database ({settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}): "
          f"{'CONNECTED' if database_ok else 'FAILED'}")
    print(f"MongoDB ({settings.mongodb_db}): {'CONNECTED' if mongo_ok else 'FAILED'}")
    return 0 if database_ok and mongo_ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Marketplace admin console maintenance")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("init-db", help="Create tables and default plans").set_defaults(func=cmd_init_db)

    create = subparsers.add_parser("create-admin", help="Create an admin account")
    create.add_argument("--username", required=True)
    create.add_argument("--email", required=True)
    create.add_argument("--password", help="Prompted when omitted")
    create.add_argument("--first-name", default="Admin")
    create.add_argument("--last-name", default="User")
    create.set_defaults(func=cmd_create_admin)

    subparsers.add_parser("list-admins", help="List admin accounts").set_defaults(func=cmd_list_admins)

    seed = subparsers.add_parser("seed-samples", help="Seed default plans and sample payments")
    seed.add_argument("--with-payments", action="store_true", help="Also add the sample payment history")
    seed.set_defaults(func=cmd_seed_samples)

    subparsers.add_parser("stats", help="Print dashboard summary").set_defaults(func=cmd_stats)
    subparsers.add_parser("check-connections", help="Ping the databases").set_defaults(func=cmd_check_connections)

    return parser


def main(argv=None) -> int:
    settings = get_settings()
    configure_logging(settings.log_level, settings.debug)
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
