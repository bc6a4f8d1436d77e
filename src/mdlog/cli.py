"""Command line entry point: extract records from a log or generate templates."""
from __future__ import annotations

import argparse
import logging
import random
from datetime import date
from pathlib import Path
from typing import List, Sequence

from mdlog.config import Settings, get_settings
from mdlog.log_reader import read_events, read_tasks
from mdlog.logging_utils import setup_logging
from mdlog.models import Person
from mdlog.parser import LINE_END_LINUX, ParseError
from mdlog.renderer import records_to_json, render_records
from mdlog.roster import RosterFormatError, load_birthday_file
from mdlog.template import generate_template
from mdlog.time_utils import get_timezone, get_today

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mdlog", description="Work with a markdown week/day log")
    subparsers = parser.add_subparsers(dest="command", required=True)

    tasks = subparsers.add_parser("tasks", help="List tasks found in a log file")
    tasks.add_argument("path", type=Path, help="Log file to read")
    tasks.add_argument("--open", action="store_true", help="Only show tasks that are not done")
    tasks.add_argument("--json", action="store_true", help="Print JSON instead of an outline")

    events = subparsers.add_parser("events", help="List events found in a log file")
    events.add_argument("path", type=Path, help="Log file to read")
    events.add_argument("--date", type=date.fromisoformat, help="Only show events of this day (YYYY-MM-DD)")
    events.add_argument("--json", action="store_true", help="Print JSON instead of an outline")

    generate = subparsers.add_parser("generate", help="Print an empty log template")
    generate.add_argument("week", type=int, help="First ISO week to generate")
    generate.add_argument("n_weeks", type=int, nargs="?", default=1, help="Number of weeks to generate")
    generate.add_argument("--year", type=int, help="Year of the first week (defaults to the current year)")
    generate.add_argument(
        "-b", "--generate-birthdays", action="store_true", help="Add TODOs to congratulate people on their birthday"
    )
    generate.add_argument(
        "-c", "--generate-calls", action="store_true", help="Randomly add TODOs to call someone from the birthday file"
    )
    generate.add_argument("--birthday-file", type=Path, help="Override the birthday file location")
    generate.add_argument("--no-placeholder", action="store_true", help="Do not add an empty TODO to each day")
    generate.add_argument("--seed", type=int, help="Seed for the call generator")
    return parser


def _emit(records, *, as_json: bool) -> None:
    if as_json:
        print(records_to_json(records))
    else:
        print(render_records(records), end="")


def run_tasks(args: argparse.Namespace, settings: Settings) -> None:
    tasks = read_tasks(args.path, settings.line_ending, skip_invalid_dates=settings.skip_invalid_dates)
    if args.open:
        tasks = [task for task in tasks if not task.is_done]
    _emit(tasks, as_json=args.json)


def run_events(args: argparse.Namespace, settings: Settings) -> None:
    events = read_events(args.path, settings.line_ending, skip_invalid_dates=settings.skip_invalid_dates)
    if args.date is not None:
        events = [event for event in events if event.date == args.date]
    _emit(events, as_json=args.json)


def run_generate(args: argparse.Namespace, settings: Settings) -> None:
    year = args.year
    if year is None:
        year = get_today(get_timezone(settings.timezone)).year
        logger.info("No year provided, defaulting to %d", year)

    people: List[Person] = []
    if args.generate_birthdays or args.generate_calls:
        people = load_birthday_file(args.birthday_file or settings.birthday_file)

    template = generate_template(
        args.week,
        args.n_weeks,
        year,
        people=people,
        include_birthdays=args.generate_birthdays,
        generate_calls=args.generate_calls,
        call_probability=settings.call_probability,
        placeholder=not args.no_placeholder,
        rng=random.Random(args.seed),
        line_end=settings.line_end or LINE_END_LINUX,
    )
    print(template, end="")
    logger.info("Done")


COMMANDS = {"tasks": run_tasks, "events": run_events, "generate": run_generate}


def main(argv: Sequence[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        COMMANDS[args.command](args, settings)
    except ParseError as exc:
        logger.error("Failed to parse log: %s", exc)
        return 1
    except RosterFormatError as exc:
        logger.error("Failed to parse birthday file with %s", exc)
        return 1
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
