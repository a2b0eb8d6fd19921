"""Create (or recreate) the Huddle tables without running migrations."""

import argparse

from huddle.db.session import create_tables, drop_tables


def init_db(reset: bool = False) -> None:
    """Initialize the database by creating all tables."""
    if reset:
        drop_tables()
    create_tables()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the Huddle database tables")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop all tables before creating them.",
    )
    args = parser.parse_args()
    init_db(reset=args.reset)
    print("Database initialized.")


if __name__ == "__main__":
    main()
