"""Utilities for reading a log file and running the extractor on it."""
from __future__ import annotations

from pathlib import Path
from typing import List

from mdlog.config import LINE_ENDINGS, LineEnding
from mdlog.models import Event, Task
from mdlog.parser import LINE_END_LINUX, LINE_END_WINDOWS, LogParser


def detect_line_end(text: str) -> str:
    if LINE_END_WINDOWS in text:
        return LINE_END_WINDOWS
    return LINE_END_LINUX


def read_log(path: Path) -> str:
    """Read the log as UTF-8 without translating line endings."""

    with Path(path).open("r", encoding="utf-8", newline="") as handle:
        return handle.read()


def build_parser(text: str, line_ending: LineEnding = "auto", *, skip_invalid_dates: bool = False) -> LogParser:
    line_end = LINE_ENDINGS.get(line_ending) or detect_line_end(text)
    return LogParser(line_end, skip_invalid_dates=skip_invalid_dates)


def read_tasks(path: Path, line_ending: LineEnding = "auto", *, skip_invalid_dates: bool = False) -> List[Task]:
    text = read_log(path)
    return build_parser(text, line_ending, skip_invalid_dates=skip_invalid_dates).parse_tasks(text)


def read_events(path: Path, line_ending: LineEnding = "auto", *, skip_invalid_dates: bool = False) -> List[Event]:
    text = read_log(path)
    return build_parser(text, line_ending, skip_invalid_dates=skip_invalid_dates).parse_events(text)


__all__ = ["detect_line_end", "read_log", "build_parser", "read_tasks", "read_events"]
