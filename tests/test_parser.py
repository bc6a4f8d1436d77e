import logging
from datetime import date, time

import pytest

from mdlog.models import Event, Subtask, Task
from mdlog.parser import (
    LINE_END_LINUX,
    LINE_END_WINDOWS,
    DateResolutionError,
    LogParser,
    Markers,
    MarkerFormatError,
    StructuralError,
    parse_events,
    parse_tasks,
)


def test_events_from_example(example_log):
    parser = LogParser.from_line_end(LINE_END_LINUX)

    events = parser.parse_events(example_log)

    assert events == [
        Event(msg="b", notes=["b1", "b2"], date=date(2019, 10, 14), time=time(16, 25, 0)),
        Event(msg="e", notes=[], date=date(2019, 10, 16), time=None),
        Event(msg="h", notes=[], date=date(2019, 10, 20), time=time(6, 1, 0)),
    ]


def test_tasks_from_example(example_log):
    parser = LogParser.from_line_end(LINE_END_LINUX)

    tasks = parser.parse_tasks(example_log)

    assert tasks == [
        Task(msg="c", subtasks=[], notes=[], date=date(2019, 10, 14), is_done=False),
        Task(
            msg="d",
            subtasks=[Subtask(msg="d1", is_done=True)],
            notes=[],
            date=date(2019, 10, 15),
            is_done=False,
        ),
        Task(
            msg="f",
            subtasks=[Subtask(msg="f1", is_done=False), Subtask(msg="f2", is_done=False)],
            notes=[],
            date=date(2019, 10, 17),
            is_done=False,
        ),
        Task(msg="g", subtasks=[], notes=[], date=date(2019, 10, 19), is_done=True),
    ]


def test_crlf_log_gives_same_records(example_log):
    windows_log = example_log.replace("\n", "\r\n")
    parser = LogParser(LINE_END_WINDOWS)

    assert parser.parse_tasks(windows_log) == parse_tasks(example_log)
    assert parser.parse_events(windows_log) == parse_events(example_log)


def test_extraction_is_idempotent(example_log):
    parser = LogParser()

    assert parser.parse_tasks(example_log) == parser.parse_tasks(example_log)
    assert parser.parse_events(example_log) == parser.parse_events(example_log)


def test_tasks_are_returned_in_text_order():
    log = "\n## Mon, 14.10.2019\n- DONE: first\n- TODO: second\n- DONE: third\n\n"

    assert [task.msg for task in parse_tasks(log)] == ["first", "second", "third"]


def test_done_task_with_open_subtask_is_not_done():
    log = "\n## Mon, 14.10.2019\n- DONE: parent\n  - DONE: one\n  - TODO: two\n\n"

    (task,) = parse_tasks(log)

    assert task.is_done is False
    assert task.subtasks == [Subtask(msg="one", is_done=True), Subtask(msg="two", is_done=False)]
    assert task.open_subtasks == [Subtask(msg="two", is_done=False)]


def test_done_task_with_done_subtasks_stays_done():
    log = "\n## Mon, 14.10.2019\n- DONE: parent\n  - DONE: one\n  - DONE X: two\n\n"

    (task,) = parse_tasks(log)

    assert task.is_done is True


def test_task_children_become_notes_and_subtasks_in_order():
    log = (
        "\n## Mon, 14.10.2019\n"
        "- TODO: write report\n"
        "  - ask Bob for numbers\n"
        "  - TODO: draft\n"
        "  continuation without marker\n"
        "  - DONE: outline\n"
        "- next item\n"
    )

    (task,) = parse_tasks(log)

    assert task.notes == ["ask Bob for numbers", "  continuation without marker"]
    assert task.subtasks == [Subtask(msg="draft", is_done=False), Subtask(msg="outline", is_done=True)]


def test_conflicting_child_line_is_dropped_with_warning(caplog):
    log = "\n## Mon, 14.10.2019\n- TODO: task\n  - TODO or DONE: unclear\n  - a note\n\n"

    with caplog.at_level(logging.WARNING, logger="mdlog.parser"):
        (task,) = parse_tasks(log)

    assert task.subtasks == []
    assert task.notes == ["a note"]
    assert "ConflictingMarkerWarning" in caplog.text
    assert "line 4" in caplog.text


def test_unit_stops_at_empty_line_and_headings():
    log = (
        "\n# Week 42, 14.10.2019 - 20.10.2019\n"
        "## Mon, 14.10.2019\n"
        "- TODO: a\n"
        "  - note a\n"
        "\n"
        "  - not part of a\n"
        "- EVT 9:5: b\n"
        "  - note b\n"
        "## Tue, 15.10.2019\n"
        "- EVT: c\n"
        "  - note c\n"
        "# Week 43, 21.10.2019 - 27.10.2019\n"
    )

    (task,) = parse_tasks(log)
    events = parse_events(log)

    assert task.notes == ["note a"]
    assert events == [
        Event(msg="b", notes=["note b"], date=date(2019, 10, 14), time=time(9, 5)),
        Event(msg="c", notes=["note c"], date=date(2019, 10, 15)),
    ]


def test_event_message_keeps_later_colons():
    log = "\n## Mon, 14.10.2019\n- EVT 08:30: call: dentist\n- EVT: meeting: room 4\n\n"

    events = parse_events(log)

    assert [event.msg for event in events] == ["call: dentist", "meeting: room 4"]


def test_missing_terminator_is_a_structural_error():
    log = "\n## Mon, 14.10.2019\n- TODO: never ends"

    with pytest.raises(StructuralError) as excinfo:
        parse_tasks(log)

    assert excinfo.value.line == 3


def test_item_without_day_heading_fails():
    log = "\n# Week 42, 14.10.2019 - 20.10.2019\n- EVT: orphan\n\n"

    with pytest.raises(DateResolutionError):
        parse_events(log)


def test_invalid_calendar_date_fails():
    log = "\n## Mon, 31.09.2019\n- TODO: impossible\n\n"

    with pytest.raises(DateResolutionError) as excinfo:
        parse_tasks(log)

    assert excinfo.value.line == 2


def test_invalid_dates_can_be_skipped(caplog):
    log = "\n## Mon, 31.09.2019\n- TODO: impossible\n\n## Tue, 01.10.2019\n- TODO: fine\n\n"
    parser = LogParser(skip_invalid_dates=True)

    with caplog.at_level(logging.WARNING, logger="mdlog.parser"):
        tasks = parser.parse_tasks(log)

    assert [task.msg for task in tasks] == ["fine"]
    assert "Skipping task" in caplog.text


@pytest.mark.parametrize(
    "line",
    ["- EVT 25:00: too late", "- EVT soon: no clock", "- TODO without separator"],
)
def test_malformed_marker_lines_fail(line):
    log = f"\n## Mon, 14.10.2019\n{line}\n\n"

    with pytest.raises(MarkerFormatError):
        parse_events(log) if "EVT" in line else parse_tasks(log)


def test_record_dates_match_nearest_heading(example_log):
    parser = LogParser()
    headings = [line for line in example_log.splitlines() if line.startswith("## ")]
    dates = {date(int(h[-4:]), int(h[-7:-5]), int(h[-10:-8])) for h in headings}

    for record in parser.parse_tasks(example_log) + parser.parse_events(example_log):
        assert record.date in dates


def test_markers_reject_unknown_line_end():
    with pytest.raises(ValueError):
        Markers.from_line_end("\r")


def test_markers_are_prefixed_with_line_end():
    markers = Markers.from_line_end(LINE_END_WINDOWS)

    assert markers.task_todo == "\r\n- TODO"
    assert markers.day == "\r\n## "
    assert "\r\n\r\n" in markers.unit_ends
