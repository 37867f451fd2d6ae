from __future__ import annotations

import argparse
import logging
import sys
from functools import partial
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from contactmerge.adapters.files import load_contacts, load_merge_request
from contactmerge.app import (
    build_services,
    create_contacts,
    delete_contacts,
    merge_contacts,
    update_contact,
)
from contactmerge.config import Backend, ConfigurationError, configure_logging
from contactmerge.domain.editing import ALL_CONTACTS
from contactmerge.domain.merge import validate_merge_request
from contactmerge.domain.ports.notifications import CreateMode
from contactmerge.ui.listener import LoggingListener

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Merge and manage contacts")
    parser.add_argument(
        "--backend",
        choices=[backend.value for backend in Backend],
        default=None,
        help="Contact store to use (defaults to CONTACTMERGE_BACKEND, then sqlite)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log per-contact details",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    merge = subparsers.add_parser("merge", help="Merge groups of duplicate contacts")
    merge.add_argument("path", type=Path, help="JSON document describing the merge groups")

    create = subparsers.add_parser("create", help="Create contacts")
    create.add_argument("path", type=Path, help="JSON document listing the contacts")
    create.add_argument(
        "--import",
        dest="import_mode",
        action="store_true",
        help="Report the contacts as an import",
    )

    update = subparsers.add_parser("update", help="Edit contacts")
    update.add_argument("path", type=Path, help="JSON document listing the edited contacts")

    delete = subparsers.add_parser("delete", help="Delete contacts")
    delete.add_argument("ids", nargs="*", help="Identifiers to delete")
    delete.add_argument("--all", action="store_true", help="Delete every contact")

    return parser.parse_args(list(argv))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.verbose:
            configure_logging(level=logging.DEBUG, force=True)
        if parsed_args.command == "merge":
            request = load_merge_request(parsed_args.path)
            validate_merge_request(request)
        elif parsed_args.command in {"create", "update"}:
            records = load_contacts(parsed_args.path)
        elif parsed_args.command == "delete" and bool(parsed_args.all) == bool(parsed_args.ids):
            raise ValueError("Pass either contact IDs or --all")  # noqa: TRY301
    except (ValueError, OSError):
        log.exception("CLI validation error")
        sys.exit(2)

    services_factory = partial(build_services, parsed_args.backend)
    listener = LoggingListener()
    try:
        if parsed_args.command == "merge":
            merge_contacts(request, services_factory=services_factory, listener=listener)
        elif parsed_args.command == "create":
            mode = CreateMode.IMPORT if parsed_args.import_mode else CreateMode.DEFAULT
            create_contacts(
                records, mode=mode, services_factory=services_factory, listener=listener
            )
        elif parsed_args.command == "update":
            for record in records:
                update_contact(record, services_factory=services_factory, listener=listener)
        elif parsed_args.command == "delete":
            target = ALL_CONTACTS if parsed_args.all else parsed_args.ids
            delete_contacts(target, services_factory=services_factory, listener=listener)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
