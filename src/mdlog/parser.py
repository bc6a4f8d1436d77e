"""Extraction of tasks and events from a markdown log.

The log is a ``# Week`` / ``## Day`` / ``- item`` outline. Records are recovered
with two lookups over the raw text: the nearest preceding day heading gives the
date and the nearest following terminator gives the extent of an item.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, time
from typing import List, Tuple

from mdlog.models import Event, Subtask, Task

logger = logging.getLogger(__name__)

LINE_END_LINUX = "\n"
LINE_END_WINDOWS = "\r\n"

ITEM = "- "
DAY = "## "
WEEK = "# Week "
TODO = "TODO"
DONE = "DONE"
EVT = "EVT"
EVT_PLAIN = "EVT: "

_CLOCK_PATTERN = re.compile(r"\s*(\d{1,2}):(\d{1,2}):")


class ParseError(ValueError):
    """Base class for errors raised while extracting records."""

    def __init__(self, message: str, *, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class StructuralError(ParseError):
    """Raised when the end of an item cannot be located."""


class DateResolutionError(ParseError):
    """Raised when an item has no usable day heading above it."""


class MarkerFormatError(ParseError):
    """Raised when a marker line does not carry the expected payload."""


class ConflictingMarkerWarning(UserWarning):
    """A task child line carries both TODO and DONE."""


@dataclass(frozen=True)
class Markers:
    """Marker strings for one line-ending convention."""

    line_end: str
    task_todo: str
    task_done: str
    event: str
    day: str
    unit_ends: Tuple[str, ...]

    @classmethod
    def from_line_end(cls, line_end: str) -> "Markers":
        if line_end not in (LINE_END_LINUX, LINE_END_WINDOWS):
            raise ValueError(f"Unsupported line ending: {line_end!r}")
        day = line_end + DAY
        return cls(
            line_end=line_end,
            task_todo=line_end + ITEM + TODO,
            task_done=line_end + ITEM + DONE,
            event=line_end + ITEM + EVT,
            day=day,
            unit_ends=(
                # next top-level item
                line_end + ITEM,
                # empty line
                line_end + line_end,
                day,
                line_end + WEEK,
            ),
        )


class LogParser:
    """Parser bound to a single line-ending convention.

    With ``skip_invalid_dates`` a record whose date cannot be resolved is
    dropped with a warning instead of failing the whole call.
    """

    def __init__(self, line_end: str = LINE_END_LINUX, *, skip_invalid_dates: bool = False):
        self.markers = Markers.from_line_end(line_end)
        self.skip_invalid_dates = skip_invalid_dates

    @classmethod
    def from_line_end(cls, line_end: str, **kwargs) -> "LogParser":
        return cls(line_end, **kwargs)

    @property
    def line_end(self) -> str:
        return self.markers.line_end

    def parse_events(self, text: str) -> List[Event]:
        """Return every event in the order it appears in ``text``."""

        events: List[Event] = []
        for idx in _find_all(text, self.markers.event):
            start = idx + len(self.line_end)
            end = self.lookup_end_of_unit(text, start)
            eol = text.find(self.line_end, start)
            line = text[start:eol]

            try:
                event_date = self.lookup_date(text, start)
            except DateResolutionError as exc:
                if not self.skip_invalid_dates:
                    raise
                logger.warning("Skipping event: %s", exc)
                continue

            msg, clock = self._parse_event_line(line, self._line_number(text, start))
            notes = [
                child.lstrip()[len(ITEM):]
                for child in text[eol:end].split(self.line_end)
                if child.strip()
            ]
            events.append(Event(msg=msg, notes=notes, date=event_date, time=clock))

        return events

    def parse_tasks(self, text: str) -> List[Task]:
        """Return every TODO/DONE task in the order it appears in ``text``."""

        starts = [(idx, False) for idx in _find_all(text, self.markers.task_todo)]
        starts += [(idx, True) for idx in _find_all(text, self.markers.task_done)]
        starts.sort()

        tasks: List[Task] = []
        for idx, marked_done in starts:
            start = idx + len(self.line_end)
            line_no = self._line_number(text, start)
            end = self.lookup_end_of_unit(text, start)
            eol = text.find(self.line_end, start)
            line = text[start:eol]

            try:
                task_date = self.lookup_date(text, start)
            except DateResolutionError as exc:
                if not self.skip_invalid_dates:
                    raise
                logger.warning("Skipping task: %s", exc)
                continue

            subtasks, notes = self._classify_children(text[eol:end], line_no)
            is_done = marked_done and all(subtask.is_done for subtask in subtasks)
            tasks.append(
                Task(
                    msg=_after_separator(line, line_no).strip(),
                    subtasks=subtasks,
                    notes=notes,
                    date=task_date,
                    is_done=is_done,
                )
            )

        return tasks

    def lookup_date(self, text: str, lookup_from: int) -> date:
        """Parse the date of the nearest day heading before ``lookup_from``."""

        pos = text.rfind(self.markers.day, 0, lookup_from)
        if pos == -1:
            raise DateResolutionError(
                "no day heading found above this item",
                line=self._line_number(text, lookup_from),
            )
        start = pos + len(self.line_end)
        eol = text.find(self.line_end, start)
        heading = text[start:] if eol == -1 else text[start:eol]

        # headings are always dd.mm.yyyy, decoration around it is ignored
        digits = "".join(char for char in heading if char.isdigit())
        line_no = self._line_number(text, start)
        if len(digits) != 8:
            raise DateResolutionError(
                f"expected a DD.MM.YYYY date in heading {heading!r}", line=line_no
            )
        try:
            return date(int(digits[4:]), int(digits[2:4]), int(digits[:2]))
        except ValueError as exc:
            raise DateResolutionError(f"parsing {heading!r} failed with {exc}", line=line_no) from exc

    def lookup_end_of_unit(self, text: str, start: int) -> int:
        """Offset of the first terminator after ``start``.

        A unit is a line plus the lines indented below it.
        """

        candidates = [pos for pos in (text.find(end, start) for end in self.markers.unit_ends) if pos != -1]
        if not candidates:
            raise StructuralError(
                "failed to find the end of this item (truncated text or missing trailing newline?)",
                line=self._line_number(text, start),
            )
        return min(candidates)

    def _parse_event_line(self, line: str, line_no: int) -> Tuple[str, time | None]:
        body = line[len(ITEM) :]
        if body.startswith(EVT_PLAIN) or body.startswith(EVT + ":"):
            return body[len(EVT) + 1 :].lstrip(), None

        match = _CLOCK_PATTERN.match(body, len(EVT))
        if match is None:
            raise MarkerFormatError(f"expected 'EVT HH:MM: ...' in {line!r}", line=line_no)
        hour, minute = int(match.group(1)), int(match.group(2))
        try:
            clock = time(hour, minute, 0)
        except ValueError as exc:
            raise MarkerFormatError(f"invalid time in {line!r}: {exc}", line=line_no) from exc
        return body[match.end() :].lstrip(), clock

    def _classify_children(self, body: str, line_no: int) -> Tuple[List[Subtask], List[str]]:
        subtasks: List[Subtask] = []
        notes: List[str] = []
        for offset, raw in enumerate(body.split(self.line_end)):
            pos = raw.find(ITEM)
            child = raw[pos + len(ITEM) :] if pos != -1 else raw
            if not child:
                continue

            has_todo, has_done = TODO in child, DONE in child
            if has_todo and has_done:
                logger.warning(
                    "%s: line %d: found TODO and DONE in %r. A task can either be done or todo.",
                    ConflictingMarkerWarning.__name__,
                    line_no + offset,
                    child,
                )
            elif has_todo or has_done:
                subtasks.append(Subtask(msg=_after_separator(child, line_no + offset), is_done=has_done))
            else:
                notes.append(child)
        return subtasks, notes

    def _line_number(self, text: str, offset: int) -> int:
        return text.count(self.line_end, 0, offset) + 1


def _find_all(text: str, needle: str) -> List[int]:
    positions: List[int] = []
    pos = text.find(needle)
    while pos != -1:
        positions.append(pos)
        pos = text.find(needle, pos + len(needle))
    return positions


def _after_separator(line: str, line_no: int) -> str:
    _, sep, rest = line.partition(": ")
    if not sep:
        raise MarkerFormatError(f"expected '<MARKER>: <message>' in {line!r}", line=line_no)
    return rest


def parse_tasks(text: str, line_end: str = LINE_END_LINUX) -> List[Task]:
    return LogParser(line_end).parse_tasks(text)


def parse_events(text: str, line_end: str = LINE_END_LINUX) -> List[Event]:
    return LogParser(line_end).parse_events(text)


__all__ = [
    "LINE_END_LINUX",
    "LINE_END_WINDOWS",
    "ParseError",
    "StructuralError",
    "DateResolutionError",
    "MarkerFormatError",
    "ConflictingMarkerWarning",
    "Markers",
    "LogParser",
    "parse_tasks",
    "parse_events",
]
