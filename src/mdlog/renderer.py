"""Utilities for turning extracted records into text."""
from __future__ import annotations

import json
from typing import Iterable, List

from mdlog.models import Event, Task


def render_records(records: Iterable[Task | Event]) -> str:
    """Render records as an outline, one block per record."""

    blocks = [render_record(record) for record in records]
    return "\n".join(blocks) + ("\n" if blocks else "")


def render_record(record: Task | Event) -> str:
    if isinstance(record, Task):
        return render_task(record)
    if isinstance(record, Event):
        return render_event(record)
    raise TypeError(f"Unsupported record type: {type(record)!r}")


def render_task(task: Task) -> str:
    mark = "x" if task.is_done else " "
    lines = [f"[{mark}] {task.date.isoformat()} {task.msg}"]
    for subtask in task.subtasks:
        sub_mark = "x" if subtask.is_done else " "
        lines.append(f"    [{sub_mark}] {subtask.msg}")
    lines.extend(_render_notes(task.notes))
    return "\n".join(lines)


def render_event(event: Event) -> str:
    when = event.date.isoformat()
    if event.time is not None:
        when = f"{when} {event.time.strftime('%H:%M')}"
    lines = [f"{when} {event.msg}"]
    lines.extend(_render_notes(event.notes))
    return "\n".join(lines)


def records_to_json(records: Iterable[Task | Event]) -> str:
    payload = [record.model_dump(mode="json") for record in records]
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _render_notes(notes: List[str]) -> List[str]:
    return [f"    - {note}" for note in notes]


__all__ = ["render_records", "render_record", "render_task", "render_event", "records_to_json"]
