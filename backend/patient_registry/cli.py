"""Patient Registry CLI - Command Line Interface for administrative tasks.

Usage:
    python -m patient_registry.cli <command> [options]

Commands:
    init-db       Create the database tables
    check-db      Check database connectivity
    seed-demo     Insert demo patients (skips existing ones)
    purge-demo    Delete demo patients (dry run unless --apply)
    version       Show version information

Examples:
    python -m patient_registry.cli init-db
    python -m patient_registry.cli seed-demo
    python -m patient_registry.cli purge-demo --apply

"""

import argparse
import asyncio
import sys
from collections.abc import Sequence
from typing import NoReturn

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from patient_registry.core.config import settings
from patient_registry.core.exceptions import RegistryError
from patient_registry.models.base import (
    create_engine_from_settings,
    create_session_maker,
    init_models,
)


def print_banner() -> None:
    """Print Patient Registry CLI banner."""
    print("\n" + "=" * 50)
    print(" Patient Registry CLI")
    print("=" * 50 + "\n")


def print_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"ERROR: {message}", file=sys.stderr)


def print_success(message: str) -> None:
    """Print success message."""
    print(f"SUCCESS: {message}")


def print_info(message: str) -> None:
    """Print info message."""
    print(f"INFO: {message}")


async def check_database(engine: AsyncEngine) -> bool:
    """Check database connectivity."""
    try:
        print_info("Checking database connectivity...")
        async with create_session_maker(engine)() as session:
            await session.execute(text("SELECT 1"))
        print_success("Database connection successful")
        return True
    except (SQLAlchemyError, OSError) as e:
        print_error(f"Database connection failed: {e}")
        return False


async def init_database(engine: AsyncEngine) -> bool:
    """Create any missing tables."""
    if not await check_database(engine):
        return False

    try:
        await init_models(engine)
    except SQLAlchemyError as e:
        print_error(f"Failed to initialize database: {e}")
        return False

    print_success("Database tables created (existing tables left untouched)")
    return True


async def seed_demo(engine: AsyncEngine) -> bool:
    """Insert demo patients that are not present yet."""
    from patient_registry.services.demo_data import seed_demo_patients

    try:
        async with create_session_maker(engine)() as session:
            inserted = await seed_demo_patients(session)
    except (RegistryError, SQLAlchemyError) as e:
        print_error(f"Failed to seed demo data: {e}")
        return False

    print_success(f"Inserted {inserted} demo patient(s)")
    return True


async def purge_demo(engine: AsyncEngine, apply: bool) -> bool:
    """Delete demo patients, or report how many would be deleted."""
    from patient_registry.services.demo_data import purge_demo_patients

    try:
        async with create_session_maker(engine)() as session:
            matched = await purge_demo_patients(session, dry_run=not apply)
    except SQLAlchemyError as e:
        print_error(f"Failed to purge demo data: {e}")
        return False

    if apply:
        print_success(f"Deleted {matched} demo patient record(s)")
    else:
        print_info(f"[dry-run] Demo patients matched: {matched}")
    return True


def _run(coro_factory) -> bool:
    """Run an engine-bound coroutine and dispose the engine afterwards."""

    async def runner() -> bool:
        engine = create_engine_from_settings(settings.database)
        try:
            return await coro_factory(engine)
        finally:
            await engine.dispose()

    return asyncio.run(runner())


def cmd_version(_args: argparse.Namespace) -> int:
    """Show version information."""
    print_banner()
    print(f"Version:     {settings.app_version}")
    print(f"Environment: {settings.environment}")
    print(f"Debug:       {settings.debug}")
    print(f"Database:    {settings.database.driver}")
    print(f"Python:      {sys.version.split()[0]}")
    return 0


def cmd_check_db(_args: argparse.Namespace) -> int:
    """Check database connectivity command."""
    print_banner()
    return 0 if _run(check_database) else 1


def cmd_init_db(_args: argparse.Namespace) -> int:
    """Initialize database command."""
    print_banner()
    return 0 if _run(init_database) else 1


def cmd_seed_demo(_args: argparse.Namespace) -> int:
    """Seed demo patients command."""
    print_banner()
    return 0 if _run(seed_demo) else 1


def cmd_purge_demo(args: argparse.Namespace) -> int:
    """Purge demo patients command."""
    print_banner()
    return 0 if _run(lambda engine: purge_demo(engine, apply=args.apply)) else 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="patient-registry",
        description="Patient Registry CLI - Administrative command line interface",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"Patient Registry {settings.app_version}",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    version_parser = subparsers.add_parser(
        "version",
        help="Show version information",
    )
    version_parser.set_defaults(func=cmd_version)

    check_db_parser = subparsers.add_parser(
        "check-db",
        help="Check database connectivity",
    )
    check_db_parser.set_defaults(func=cmd_check_db)

    init_db_parser = subparsers.add_parser(
        "init-db",
        help="Create the database tables",
    )
    init_db_parser.set_defaults(func=cmd_init_db)

    seed_demo_parser = subparsers.add_parser(
        "seed-demo",
        help="Insert demo patients",
    )
    seed_demo_parser.set_defaults(func=cmd_seed_demo)

    purge_demo_parser = subparsers.add_parser(
        "purge-demo",
        help="Delete demo patients (dry run by default)",
    )
    purge_demo_parser.add_argument(
        "--apply",
        action="store_true",
        help="Apply deletions (default is dry-run).",
    )
    purge_demo_parser.set_defaults(func=cmd_purge_demo)

    return parser


def main(argv: Sequence[str] | None = None) -> NoReturn:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
