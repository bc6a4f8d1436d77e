from __future__ import annotations

import pytest

from mdlog import config

EXAMPLE_DATA = """
# Week 42, 14.10.2019 - 20.10.2019

## Mon, 14.10.2019
- a
- EVT 16:25: b
  - b1
  - b2
- TODO: c

## Tue, 15.10.2019
- TODO: d
    - DONE: d1

## Wed, 16.10.2019
- EVT: e

## Thu, 17.10.2019
- TODO A1: f
    - TODO: f1
    - TODO C3: f2

## Fri, 18.10.2019
- some code
```
# code
```
## Sat, 19.10.2019
- DONE: g
## Sun, 20.10.2019
- EVT 06:01: h

# Week 43, 21.10.2019 - 27.10.2019"""


@pytest.fixture()
def example_log() -> str:
    return EXAMPLE_DATA


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep the developer's environment and .env out of the tests."""

    for name in (
        "MDLOG_LINE_ENDING",
        "MDLOG_BIRTHDAY_FILE",
        "MDLOG_CALL_PROBABILITY",
        "MDLOG_SKIP_INVALID_DATES",
        "MDLOG_TIMEZONE",
        "MDLOG_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    config.reset_settings()
    yield
    config.reset_settings()
