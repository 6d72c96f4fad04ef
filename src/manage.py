"""Starter pack database management CLI.

Creates and drops the relational schema when the domain is configured with an
RDBMS provider (for example PROTEAN_ENV=production).

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    """Create the starterpack database schema."""
    from starterpack.domain import starterpack
    from starterpack.utils.db import setup_db

    print("Initializing starterpack domain...")
    starterpack.init()
    print("Creating starterpack database schema...")
    setup_db(starterpack)
    print("Done.")


def drop_database():
    """Drop the starterpack database schema."""
    from starterpack.domain import starterpack
    from starterpack.utils.db import drop_db

    print("Initializing starterpack domain...")
    starterpack.init()
    print("Dropping starterpack database schema...")
    drop_db(starterpack)
    print("Done.")


def main():
    parser = argparse.ArgumentParser(description="Starter pack database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
