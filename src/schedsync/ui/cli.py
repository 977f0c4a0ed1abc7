from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from schedsync.app import (
    add_creator,
    approve,
    list_activity,
    list_creators,
    list_pending,
    load_auto_update_settings,
    reject,
    scan,
    tick,
    update_auto_update_settings,
)
from schedsync.common.logging import configure_logging
from schedsync.domain.activity import ActivityQuery, ActivitySort
from schedsync.domain.approval import parse_proposal_ids
from schedsync.domain.broadcast_time import format_hhmm
from schedsync.domain.model import Actor, LogAction

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from schedsync.domain.activity import ActivityPage
    from schedsync.domain.approval import BulkResult

log = logging.getLogger(__name__)


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"true", "1", "yes", "on"}:
        return True
    if normalized in {"false", "0", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean: {value}")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    actor_options = argparse.ArgumentParser(add_help=False)
    actor_options.add_argument(
        "--actor-id",
        type=str,
        help="Identifier recorded as the actor in the activity log",
    )
    actor_options.add_argument(
        "--actor-name",
        type=str,
        help="Display name recorded as the actor in the activity log",
    )

    parser = argparse.ArgumentParser(
        description="Reconcile creator schedules with published videos",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser(
        "scan",
        parents=[actor_options],
        help="Scan recent videos now and stage proposals",
    )
    scan_parser.add_argument(
        "--range-days",
        type=int,
        default=None,
        help="Lookback window in days (defaults to the persisted setting)",
    )

    subparsers.add_parser(
        "tick",
        parents=[actor_options],
        help="Scan only if auto update is enabled and due",
    )
    subparsers.add_parser("pending", help="List staged proposals, newest first")

    for name, verb in (("approve", "Approve"), ("reject", "Reject")):
        decision = subparsers.add_parser(
            name,
            parents=[actor_options],
            help=f"{verb} staged proposals",
        )
        decision.add_argument("ids", nargs="*", default=[], help="Proposal ids")
        decision.add_argument(
            "--all",
            action="store_true",
            dest="all_proposals",
            help=f"{verb} every staged proposal",
        )

    settings = subparsers.add_parser("settings", help="Auto update settings")
    settings_sub = settings.add_subparsers(dest="settings_command", required=True)
    settings_sub.add_parser("show", help="Show the persisted settings")
    settings_set = settings_sub.add_parser("set", help="Change the persisted settings")
    settings_set.add_argument("--enabled", type=str, help="true or false")
    settings_set.add_argument("--interval-hours", type=int, help="Hours between automatic runs")
    settings_set.add_argument("--range-days", type=int, help="Lookback window in days")

    creators = subparsers.add_parser("creators", help="Creator management commands")
    creators_sub = creators.add_subparsers(dest="creators_command", required=True)
    creators_add = creators_sub.add_parser("add", help="Track a new creator")
    creators_add.add_argument("--name", type=str, required=True, help="Display name")
    creators_add.add_argument(
        "--channel-id",
        type=str,
        help="External channel id used to list the creator's videos",
    )
    creators_sub.add_parser("list", help="List creators")

    logs = subparsers.add_parser("logs", help="Browse the activity log")
    logs.add_argument(
        "--action",
        choices=[action.value for action in LogAction],
        help="Only show rows with this action",
    )
    logs.add_argument("--creator", type=str, help="Creator name contains this text")
    logs.add_argument("--from", dest="date_from", type=str, help="Earliest schedule date")
    logs.add_argument("--to", dest="date_to", type=str, help="Latest schedule date")
    logs.add_argument("--query", type=str, help="Title or creator name contains this text")
    logs.add_argument(
        "--sort",
        choices=[sort.value for sort in ActivitySort],
        default=ActivitySort.CREATED_DESC.value,
        help="Row ordering (default: newest first)",
    )
    logs.add_argument("--page", type=int, default=1, help="Page number, starting at 1")
    logs.add_argument("--page-size", type=int, default=50, help="Rows per page (1-200)")

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:  # noqa: C901
    if args.command == "scan" and args.range_days is not None and args.range_days < 0:
        raise ValueError("Range days must be non-negative")
    if args.command in {"approve", "reject"}:
        if args.all_proposals and args.ids:
            raise ValueError("Pass proposal ids or --all, not both")
        if not args.all_proposals:
            args.ids = parse_proposal_ids(args.ids)
    if args.command == "settings" and args.settings_command == "set":
        if args.enabled is not None:
            args.enabled = _parse_bool(args.enabled)
        if args.interval_hours is not None and args.interval_hours < 1:
            raise ValueError("Interval hours must be at least 1")
        if args.range_days is not None and args.range_days < 0:
            raise ValueError("Range days must be non-negative")
    if args.command == "logs":
        args.activity_query = ActivityQuery(
            action=LogAction(args.action) if args.action else None,
            creator=args.creator,
            date_from=date.fromisoformat(args.date_from) if args.date_from else None,
            date_to=date.fromisoformat(args.date_to) if args.date_to else None,
            text=args.query,
            sort=ActivitySort(args.sort),
            page=args.page,
            page_size=args.page_size,
        )


def _actor_from(args: argparse.Namespace) -> Actor:
    actor_id = getattr(args, "actor_id", None)
    actor_name = getattr(args, "actor_name", None)
    if actor_id is None and actor_name is None:
        return Actor.system()
    return Actor(actor_id=actor_id, name=actor_name)


def _log_bulk(verb: str, result: BulkResult) -> None:
    log.info(
        "%s: requested=%s, succeeded=%s, failed=%s",
        verb,
        result.total_requested,
        result.success_count,
        result.failed_count,
    )
    for failure in result.failures:
        log.warning(
            "Proposal %s not processed (%s): %s",
            failure.proposal_id,
            failure.reason,
            failure.message,
        )


def _log_activity(page: ActivityPage) -> None:
    for record in page.items:
        log.info(
            "%s %s %s %s %s by %s",
            record.created_at.isoformat(timespec="seconds"),
            record.action,
            record.entry_date,
            record.creator_name or "-",
            record.title or "",
            record.actor_name or record.actor_id or "-",
        )
    log.info("Page %s/%s, total=%s", page.page, page.total_pages, page.total)


def _run(args: argparse.Namespace) -> None:  # noqa: C901
    if args.command == "scan":
        result = scan(range_days=args.range_days, actor=_actor_from(args))
        for detail in result.details:
            log.info(
                "Staged %s for %s on %s %s: %s",
                detail.action,
                detail.creator_name,
                detail.date,
                format_hhmm(detail.start_time),
                detail.title,
            )
    elif args.command == "tick":
        if tick(actor=_actor_from(args)) is None:
            log.info("Nothing to do")
    elif args.command == "pending":
        proposals = list_pending()
        if not proposals:
            log.info("No staged proposals")
        for proposal in proposals:
            log.info(
                "#%s %s %s %s %s %s",
                proposal.id,
                proposal.action,
                proposal.creator_name,
                proposal.date,
                format_hhmm(proposal.start_time),
                proposal.title,
            )
    elif args.command == "approve":
        bulk = approve(args.ids, approve_all=args.all_proposals, actor=_actor_from(args))
        _log_bulk("Approve", bulk)
    elif args.command == "reject":
        bulk = reject(args.ids, reject_all=args.all_proposals, actor=_actor_from(args))
        _log_bulk("Reject", bulk)
    elif args.command == "settings" and args.settings_command == "show":
        settings = load_auto_update_settings()
        log.info(
            "enabled=%s interval_hours=%s range_days=%s last_run=%s",
            settings.enabled,
            settings.interval_hours,
            settings.range_days,
            settings.last_run,
        )
    elif args.command == "settings" and args.settings_command == "set":
        update_auto_update_settings(
            enabled=args.enabled,
            interval_hours=args.interval_hours,
            range_days=args.range_days,
        )
    elif args.command == "creators" and args.creators_command == "add":
        creator = add_creator(name=args.name, channel_id=args.channel_id)
        log.info("Created creator %s", creator.id)
    elif args.command == "creators" and args.creators_command == "list":
        for creator in list_creators():
            log.info(
                "#%s %s channel=%s%s",
                creator.id,
                creator.name,
                creator.external_channel_id or "-",
                " (archived)" if creator.archived else "",
            )
    elif args.command == "logs":
        _log_activity(list_activity(args.activity_query))
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _run(parsed_args)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
