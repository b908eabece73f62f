"""Operator command line.

Commands:
  import-export <dir>  import vacations from a chat export folder
  add                  add one vacation interactively
  add-batch            add vacations from ``name | id | start | end | comment``
                       lines on stdin (empty line ends input)
  seed                 insert demo vacations
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable, Iterator, Sequence
from typing import TextIO

from app.core.errors import StoreError, ValidationFailed
from app.core.logging import setup_logging
from app.db.supabase import close_supabase
from app.db.vacations import VacationStore, get_vacation_store
from app.models.enums import ReconciliationOutcome
from app.models.vacation import IngestionReport, ManualEntry, VacationRecord
from app.services.ingestion import (
    add_manual_batch,
    add_manual_vacation,
    import_messages,
    read_export_messages,
    seed_vacations,
)

log = logging.getLogger(__name__)

Prompt = Callable[[str], str]

BATCH_HELP = """\
Format: Name | ID | Start date | End date | Comment
Example:
  Иван Иванов | user001 | 2026-07-01 | 2026-07-15 | July vacation
  Мария Петрова | user002 | 2026-08-01 | 2026-08-31 |
Enter lines (empty line to finish):
"""


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Manage the vacation calendar")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_export = subparsers.add_parser(
        "import-export", help="Import vacations from a chat export folder"
    )
    import_export.add_argument(
        "path",
        type=str,
        help="Folder of the exported chat (contains *.json message files)",
    )

    subparsers.add_parser("add", help="Add a single vacation interactively")
    subparsers.add_parser("add-batch", help="Add vacations from pipe-delimited lines on stdin")
    subparsers.add_parser("seed", help="Insert demo vacations")

    return parser.parse_args(list(argv))


def _print_report(report: IngestionReport, out: TextIO) -> None:
    print(f"Imported: {report.imported}", file=out)
    print(f"Skipped:  {report.skipped}", file=out)
    print(f"Failed:   {report.failed}", file=out)


def run_import(path: str, store: VacationStore, out: TextIO = sys.stdout) -> int:
    print(f"Reading messages from: {path}", file=out)
    messages = read_export_messages(path)
    if not messages:
        print("No messages found", file=out)
        return 1

    print(f"Processing {len(messages)} messages...", file=out)
    report = asyncio.run(import_messages(messages, store))
    _print_report(report, out)
    return 0


def run_add(store: VacationStore, prompt: Prompt = input, out: TextIO = sys.stdout) -> int:
    """Ask for one vacation; confirm before overwriting a same-start record."""
    entry = ManualEntry(
        employee_name=prompt("Employee name: "),
        employee_id=prompt("Employee ID (blank to generate): "),
        start_date=prompt("Start date (YYYY-MM-DD): "),
        end_date=prompt("End date (YYYY-MM-DD): "),
        message_text=prompt("Comment (optional): ") or None,
    )

    def confirm(existing: VacationRecord) -> bool:
        print(
            f"A vacation for {existing.employee_id} starting {existing.start_date} "
            "already exists.",
            file=out,
        )
        return prompt("Overwrite? (y/N): ").strip().lower() == "y"

    try:
        result = add_manual_vacation(entry, store, confirm=confirm)
    except (ValidationFailed, StoreError) as exc:
        print(f"Error: {exc}", file=out)
        return 1

    if result.outcome is ReconciliationOutcome.declined:
        print("Cancelled", file=out)
        return 0

    print(
        f"Saved: {result.record.employee_name} "
        f"({result.record.start_date} - {result.record.end_date})",
        file=out,
    )
    return 0


def _read_batch_lines(stream: TextIO) -> Iterator[str]:
    for line in stream:
        if not line.strip():
            return
        yield line.rstrip("\n")


def run_add_batch(store: VacationStore, stream: TextIO = sys.stdin, out: TextIO = sys.stdout) -> int:
    print(BATCH_HELP, file=out)
    report = add_manual_batch(list(_read_batch_lines(stream)), store)
    print(f"Added:  {report.imported}", file=out)
    print(f"Failed: {report.failed}", file=out)
    return 0


def run_seed(store: VacationStore, out: TextIO = sys.stdout) -> int:
    report = seed_vacations(store)
    _print_report(report, out)
    return 0 if report.failed == 0 else 1


def main(argv: Sequence[str] | None = None) -> None:
    """Main command line entry point."""
    setup_logging(stream=sys.stderr)
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        store = get_vacation_store()
        if parsed_args.command == "import-export":
            code = run_import(parsed_args.path, store)
        elif parsed_args.command == "add":
            code = run_add(store)
        elif parsed_args.command == "add-batch":
            code = run_add_batch(store)
        elif parsed_args.command == "seed":
            code = run_seed(store)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")
    except StoreError:
        log.exception("Store error")
        sys.exit(1)
    except KeyboardInterrupt:
        log.info("Closed by user (Ctrl+C)")
        sys.exit(130)
    finally:
        close_supabase()

    sys.exit(code)


if __name__ == "__main__":
    main()
