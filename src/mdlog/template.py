"""Generation of blank week/day skeletons for the log."""
from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from typing import Iterable, List, Optional

from mdlog.models import Person
from mdlog.parser import DAY, ITEM, LINE_END_LINUX, TODO, WEEK
from mdlog.roster import group_by_birthday

logger = logging.getLogger(__name__)

DATE_FMT = "%d.%m.%Y"
WEEKDAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
CALL_PROBABILITY = 0.1


def week_range(year: int, first_week: int, n_weeks: int = 1) -> tuple[date, date]:
    """Return Monday of ``first_week`` and Sunday of the last generated week."""

    if n_weeks < 1:
        raise ValueError("n_weeks must be at least 1")
    try:
        start = date.fromisocalendar(year, first_week, 1)
    except ValueError as exc:
        raise ValueError(f"Week {first_week} does not exist in {year}: {exc}") from exc
    return start, start + timedelta(weeks=n_weeks, days=-1)


def generate_template(
    first_week: int,
    n_weeks: int = 1,
    year: int | None = None,
    *,
    people: Iterable[Person] = (),
    include_birthdays: bool = False,
    generate_calls: bool = False,
    call_probability: float = CALL_PROBABILITY,
    placeholder: bool = True,
    rng: Optional[random.Random] = None,
    line_end: str = LINE_END_LINUX,
) -> str:
    """Render ``n_weeks`` of empty log starting with ISO week ``first_week``.

    Birthdays of ``people`` become congratulation TODOs when ``include_birthdays``
    is set. With ``generate_calls`` each day has a ``call_probability`` chance
    of a TODO to call a random person from ``people``.
    """

    if year is None:
        year = date.today().year
    start, last_day = week_range(year, first_week, n_weeks)
    people = list(people)
    birthdays = group_by_birthday(people)
    rng = rng or random.Random()

    logger.info("Generating templates for %d weeks starting with week %d of year %d", n_weeks, first_week, year)

    lines: List[str] = []
    day = start
    while day <= last_day:
        if day.weekday() == 0:
            iso_year, iso_week, _ = day.isocalendar()
            sunday = date.fromisocalendar(iso_year, iso_week, 7)
            lines.append(f"{WEEK}{iso_week}, {day.strftime(DATE_FMT)} - {sunday.strftime(DATE_FMT)}")
            lines.append("")

        lines.append(f"{DAY}{WEEKDAY_NAMES[day.weekday()]}, {day.strftime(DATE_FMT)}")
        if include_birthdays:
            for person in birthdays.get((day.month, day.day), []):
                lines.append(_congratulation(person, day))
        if generate_calls and people and rng.random() < call_probability:
            lines.append(f"{ITEM}{TODO}: Call {rng.choice(people).name}")
        if placeholder:
            lines.append(f"{ITEM}{TODO}: ")
        lines.append("")

        day += timedelta(days=1)

    return line_end.join(lines) + line_end


def _congratulation(person: Person, day: date) -> str:
    age = person.birthday.age_on(day)
    suffix = f" (Age {age})" if age is not None else ""
    return f"{ITEM}{TODO}: Congratulate {person.name}{suffix}"


__all__ = ["DATE_FMT", "CALL_PROBABILITY", "week_range", "generate_template"]
