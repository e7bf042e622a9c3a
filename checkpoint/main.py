"""
Command-line entry point for the backlog.

Each command runs one store operation and prints the store's message
verbatim. Exit status is 0 on success and 1 on a known failure.
"""

import argparse
import logging
import sys

from checkpoint.config import settings
from checkpoint.models.failure import ValidationError
from checkpoint.models.game import Game
from checkpoint.parsers.game_fields import parse_int_field, parse_ownership, parse_status
from checkpoint.services.backlog_store import BacklogStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def configure_logging(level_name: str | None = None) -> None:
    """Configure root logging from settings."""
    level = getattr(logging, (level_name or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="checkpoint",
        description="Track a personal game backlog",
    )
    parser.add_argument(
        "--db",
        default=settings.database_path,
        help="Path to the SQLite database file",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="Display all game records")

    add = commands.add_parser("add", help="Add a new game record")
    add.add_argument("id")
    add.add_argument("name")
    add.add_argument("platform")
    add.add_argument("status", help="UNPLAYED, PLAYING or BEATEN")
    add.add_argument("priority", help="1 (low) to 5 (high)")
    add.add_argument("ownership", help="PHYSICAL or DIGITAL")

    remove = commands.add_parser("remove", help="Remove a game record")
    remove.add_argument("id", type=int)

    update = commands.add_parser("update", help="Update one field of a game record")
    update.add_argument("id", type=int)
    update.add_argument("field", help="id, name, platform, status, priority or ownership")
    update.add_argument("value")

    import_cmd = commands.add_parser("import", help="Import records from a text file")
    import_cmd.add_argument("file")

    report = commands.add_parser("report", help="Show backlog stats and what to play next")
    report.add_argument("--top", type=int, default=settings.report_top_n)

    return parser


def _game_from_args(args: argparse.Namespace) -> Game:
    return Game(
        id=parse_int_field("id", args.id),
        name=args.name,
        platform=args.platform,
        status=parse_status(args.status),
        priority=parse_int_field("priority", args.priority),
        ownership=parse_ownership(args.ownership),
    )


def run(argv: list[str] | None = None) -> int:
    """Run one command and return the process exit status."""
    args = build_parser().parse_args(argv)
    if args.log_level:
        logging.getLogger().setLevel(getattr(logging, args.log_level.upper(), logging.INFO))

    logger.debug("Running %s against %s", args.command, args.db)
    opened = BacklogStore.open(args.db)
    if not opened.ok:
        print(opened.message)
        return EXIT_FAILURE
    store: BacklogStore = opened.data

    try:
        if args.command == "list":
            games = store.list_all()
            if not games:
                print("(no records yet)")
            for game in games:
                print(game)
            return EXIT_OK

        if args.command == "report":
            print(store.backlog_report(args.top))
            return EXIT_OK

        if args.command == "add":
            try:
                game = _game_from_args(args)
            except ValidationError as e:
                print(e.message)
                return EXIT_FAILURE
            result = store.add(game)
        elif args.command == "remove":
            result = store.remove(args.id)
        elif args.command == "update":
            result = store.update_field(args.id, args.field, args.value)
        else:
            result = store.import_from_file(args.file)

        print(result)
        return EXIT_OK if result.ok else EXIT_FAILURE
    finally:
        store.close()


def main() -> None:
    """CLI entry point."""
    configure_logging()
    sys.exit(run())


if __name__ == "__main__":
    main()
