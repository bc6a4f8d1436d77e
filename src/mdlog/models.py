"""Data models shared across the project."""
from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Birthdays without a known year are validated against a leap year so 29.02 stays legal.
_LEAP_YEAR = 2000


class Subtask(BaseModel):
    """A `- TODO:` / `- DONE:` line nested below a task."""

    model_config = ConfigDict(frozen=True)

    msg: str
    is_done: bool


class Task(BaseModel):
    """A scheduled task extracted from the log."""

    model_config = ConfigDict(frozen=True)

    msg: str
    subtasks: List[Subtask] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    date: dt.date
    is_done: bool

    @property
    def open_subtasks(self) -> List[Subtask]:
        return [subtask for subtask in self.subtasks if not subtask.is_done]


class Event(BaseModel):
    """An event line, optionally carrying a clock time."""

    model_config = ConfigDict(frozen=True)

    msg: str
    notes: List[str] = Field(default_factory=list)
    date: dt.date
    time: Optional[dt.time] = None


class Birthday(BaseModel):
    """Day and month of a birthday, with the year when it is known."""

    model_config = ConfigDict(frozen=True)

    day: int = Field(..., ge=1, le=31)
    month: int = Field(..., ge=1, le=12)
    year: Optional[int] = None

    @model_validator(mode="after")
    def _check_calendar_day(self) -> "Birthday":
        dt.date(self.year if self.year is not None else _LEAP_YEAR, self.month, self.day)
        return self

    @classmethod
    def known(cls, value: dt.date) -> "Birthday":
        return cls(day=value.day, month=value.month, year=value.year)

    @classmethod
    def unknown_year(cls, month: int, day: int) -> "Birthday":
        return cls(day=day, month=month)

    @property
    def has_year(self) -> bool:
        return self.year is not None

    def as_date(self) -> dt.date | None:
        if self.year is None:
            return None
        return dt.date(self.year, self.month, self.day)

    def age_on(self, day: dt.date) -> int | None:
        """Age reached on ``day``; ``None`` when the birth year is unknown."""

        if self.year is None:
            return None
        age = day.year - self.year
        if (day.month, day.day) < (self.month, self.day):
            age -= 1
        return age


class Person(BaseModel):
    """Roster entry: a person, their birthday and present ideas."""

    model_config = ConfigDict(frozen=True)

    name: str
    birthday: Birthday
    presents: Optional[List[str]] = None


__all__ = ["Subtask", "Task", "Event", "Birthday", "Person"]
