"""Wellness reminder scheduler - command line entry point.

Commands:
    run     Tick every 60s and surface reminders until Ctrl+C
    test    Fire the diagnostic reminder once (does not touch the ledger)
    status  Show settings, ledger markers and notification permission
    reset   Clear last-fired markers (all, or one type)
"""

import argparse
import asyncio
import json
from typing import Optional

from config import (
    REMINDER_DB,
    REMINDER_TIMEZONE,
    NOTIFICATION_CHANNEL,
    WEB_PUSH_RELAY_URL,
    NTFY_SERVER,
    NTFY_TOPIC,
)
from logger import logger
from reminders import (
    ReminderEvent,
    ReminderScheduler,
    ReminderType,
    SqliteKVStore,
    build_sink,
    resolve_timezone,
)


def create_scheduler() -> ReminderScheduler:
    """Build a scheduler from environment configuration."""
    store = SqliteKVStore(REMINDER_DB)
    sink = build_sink(
        NOTIFICATION_CHANNEL,
        store,
        relay_url=WEB_PUSH_RELAY_URL,
        ntfy_server=NTFY_SERVER,
        ntfy_topic=NTFY_TOPIC,
    )
    reminders = ReminderScheduler(
        store,
        sink,
        tz=resolve_timezone(REMINDER_TIMEZONE),
        owns_store=True,
    )
    reminders.banner.subscribe(print_banner)
    return reminders


def print_banner(event: Optional[ReminderEvent]) -> None:
    """Console stand-in for the in-app banner."""
    if event is None:
        return
    print(f"[{event.type.value.upper()}] {event.message}", flush=True)


async def run_forever(request_permission: bool = False) -> None:
    reminders = create_scheduler()
    async with reminders:
        if request_permission:
            await reminders.request_notification_permission()
        logger.info(f"Reminder scheduler running (notifications via {reminders.sink.name})")
        await asyncio.Event().wait()


async def run_test() -> None:
    reminders = create_scheduler()
    try:
        result = await reminders.fire_test_reminder()
        for warning in result.warnings:
            print(f"! {warning}")
    finally:
        reminders.shutdown()


def show_status() -> None:
    reminders = create_scheduler()
    try:
        print(json.dumps(reminders.status(), indent=2, ensure_ascii=False))
    finally:
        reminders.shutdown()


def reset_ledger(type_name: Optional[str]) -> None:
    reminders = create_scheduler()
    try:
        reminder_type = ReminderType.parse(type_name) if type_name else None
        if reminders.reset_ledger(reminder_type):
            print(f"Reset {type_name or 'all'} reminder markers")
        else:
            print("Reset applied for this session only (storage write failed)")
    finally:
        reminders.shutdown()


def main():
    parser = argparse.ArgumentParser(description="Fit Buddy reminder scheduler")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run the reminder loop")
    run_parser.add_argument("--request-permission", action="store_true",
                            help="Ask for OS notification permission on start")

    subparsers.add_parser("test", help="Fire a test reminder now")
    subparsers.add_parser("status", help="Show reminder state")

    reset_parser = subparsers.add_parser("reset", help="Clear last-fired markers")
    reset_parser.add_argument("--type", "-t", choices=["water", "exercise", "tip"],
                              help="Only reset this reminder type")

    args = parser.parse_args()

    if args.command == "run":
        try:
            asyncio.run(run_forever(request_permission=args.request_permission))
        except KeyboardInterrupt:
            logger.info("Reminder scheduler stopped")
    elif args.command == "test":
        asyncio.run(run_test())
    elif args.command == "status":
        show_status()
    elif args.command == "reset":
        reset_ledger(args.type)


if __name__ == "__main__":
    main()
