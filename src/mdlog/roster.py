"""Loading of the birthday roster.

The file starts with a mapping of ``<name>: <dd.mm.yyyy>`` (``dd.mm.?`` when the
year is unknown). An optional second part, introduced by a ``# Presents``
heading, maps names to lists of present ideas::

    Alex: 19.01.2001
    Bob Smith: 20.12.?

    ### Presents
    Alex:
    - Salad
"""
from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Tuple

import yaml
from pydantic import ValidationError

from mdlog.models import Birthday, Person

PRESENTS_HEADING = "# Presents"
UNKNOWN_YEAR = "?"


class RosterFormatError(ValueError):
    """Raised when the birthday file cannot be understood."""


def load_birthday_file(path: Path) -> List[Person]:
    """Read ``path`` and return the people listed in it."""

    content = Path(path).read_text(encoding="utf-8")
    return parse_people(content)


def parse_people(content: str) -> List[Person]:
    begin_presents = content.find(PRESENTS_HEADING)
    if begin_presents == -1:
        birthdays_part, presents_part = content, ""
    else:
        birthdays_part, presents_part = content[:begin_presents], content[begin_presents:]

    birthdays = _load_mapping(birthdays_part, "birthdays")
    presents = _load_mapping(presents_part, "presents")

    people: List[Person] = []
    for name, raw_birthday in birthdays.items():
        gifts = presents.get(name)
        if gifts is not None and not isinstance(gifts, list):
            raise RosterFormatError(f"Presents for {name} must be a list, got {gifts!r}")
        people.append(
            Person(
                name=name,
                birthday=_parse_birthday(name, raw_birthday),
                presents=[str(gift) for gift in gifts] if gifts is not None else None,
            )
        )
    return people


def group_by_birthday(people: List[Person]) -> Dict[Tuple[int, int], List[Person]]:
    """Index people by ``(month, day)`` of their birthday."""

    grouped: Dict[Tuple[int, int], List[Person]] = defaultdict(list)
    for person in people:
        grouped[(person.birthday.month, person.birthday.day)].append(person)
    return dict(grouped)


def _load_mapping(content: str, section: str) -> dict:
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise RosterFormatError(f"Failed to parse {section} section: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RosterFormatError(f"The {section} section must be a mapping of names")
    for name in data:
        if not isinstance(name, str):
            raise RosterFormatError(f"Entry {name!r} in the {section} section is not a name")
    return data


def _parse_birthday(name: str, value: object) -> Birthday:
    if not isinstance(value, str):
        raise RosterFormatError(
            f"Failed to parse date for {name}:{value} please check the entry! Use dd.mm.yyyy or dd.mm.?"
        )
    value = value.strip()
    try:
        if value.endswith(UNKNOWN_YEAR):
            day, month, _ = value.split(".")
            return Birthday.unknown_year(month=int(month), day=int(day))
        return Birthday.known(datetime.strptime(value, "%d.%m.%Y").date())
    except (ValueError, ValidationError) as exc:
        raise RosterFormatError(f"Failed to parse date for {name}:{value} please check the entry!") from exc


__all__ = [
    "PRESENTS_HEADING",
    "RosterFormatError",
    "load_birthday_file",
    "parse_people",
    "group_by_birthday",
]
