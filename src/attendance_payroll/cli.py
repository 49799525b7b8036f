"""Command line interface.

Provides operational tools for:
- Settling payrolls whose auto-approval time has passed
- Creating the database schema
- Running the API server

Usage:
    attendance-payroll settle-due [--now 2026-04-01T00:00:00Z]
    attendance-payroll init-db
    attendance-payroll serve --port 8000
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime
from typing import Callable

from attendance_payroll.config import get_settings
from attendance_payroll.logging_config import configure_logging


def parse_datetime(s: str) -> datetime:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


class PayrollCli:
    """Attendance payroll command line interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="attendance-payroll",
            description="Attendance payroll operational tools",
        )
        parser.add_argument(
            "--database-url",
            type=str,
            help="Database URL (default: $DATABASE_URL)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        settle = subparsers.add_parser(
            "settle-due",
            help="Settle payrolls whose auto-approval time has passed",
        )
        settle.add_argument(
            "--now",
            type=parse_datetime,
            help="Treat this instant as the current time (ISO format)",
        )

        subparsers.add_parser("init-db", help="Create all tables")

        serve = subparsers.add_parser("serve", help="Run the API server")
        serve.add_argument("--host", type=str, help="Bind host (default: $HOST)")
        serve.add_argument("--port", type=int, help="Bind port (default: $PORT)")

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        configure_logging(get_settings().log_level)

        handlers: dict[str, Callable[..., int]] = {
            "settle-due": self._cmd_settle_due,
            "init-db": self._cmd_init_db,
            "serve": self._cmd_serve,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _cmd_settle_due(self, args: argparse.Namespace) -> int:
        """Run the auto-approval sweep once."""
        settled = asyncio.run(self._settle_due(args.database_url, args.now))
        print(f"Settled {len(settled)} payroll(s)")
        for payroll in settled:
            print(f"  {payroll.payroll_id} | {payroll.employee_name} | {payroll.period} | {payroll.net_pay}")
        return 0

    async def _settle_due(self, database_url: str | None, now: datetime | None) -> list:
        from attendance_payroll.database import dispose_db, get_session, init_db
        from attendance_payroll.payments import build_gateway
        from attendance_payroll.services import PayrollService

        settings = get_settings()
        init_db(database_url)
        try:
            async with get_session() as session:
                service = PayrollService(
                    session,
                    build_gateway(settings),
                    tz=settings.tzinfo,
                    app_url=settings.app_url,
                )
                return await service.auto_approve_due(now)
        finally:
            await dispose_db()

    def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create the schema."""
        asyncio.run(self._init_db(args.database_url))
        print("Database schema created.")
        return 0

    async def _init_db(self, database_url: str | None) -> None:
        from attendance_payroll.database import create_all, dispose_db, init_db

        init_db(database_url)
        try:
            await create_all()
        finally:
            await dispose_db()

    def _cmd_serve(self, args: argparse.Namespace) -> int:
        """Run uvicorn."""
        import uvicorn

        settings = get_settings()
        uvicorn.run(
            "attendance_payroll.api.app:app",
            host=args.host or settings.host,
            port=args.port or settings.port,
            reload=settings.debug,
        )
        return 0


def main() -> int:
    """CLI entry point."""
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
