"""Shared fixtures for the spikeslayer test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"
MARKER = "val:  "


def _line_value(line: str) -> str | None:
    index = line.rfind(MARKER)
    return line[index + len(MARKER) :] if index > -1 else None


@pytest.fixture
def line_value():
    """Y accessor slicing the value after the ``val:`` marker of a series line."""
    return _line_value


@pytest.fixture
def two_peak_series() -> list[int]:
    """Ten values with local peaks at indices 2 (y=5) and 7 (y=6)."""
    return [1, 2, 5, 2, 1, 1, 2, 6, 2, 1]


@pytest.fixture
def series_path() -> Path:
    """Text fixture: 536 lines, each ending with ``val:  <number>``."""
    return FIXTURES / "series.txt"


@pytest.fixture
def series_values(series_path: Path) -> list[float]:
    with series_path.open(encoding="utf-8") as handle:
        return [float(_line_value(line)) for line in handle]


@pytest.fixture
def records() -> list[dict]:
    """Object items with their own timestamp and identifier."""
    values = [0, 0, 0, 12, 0, 0, 5, 0, 0, 0, 0, 9, 0]
    return [
        {"id": f"item-{i}", "date": f"2014-04-12T17:31:{i:02d}.000Z", "value": value}
        for i, value in enumerate(values)
    ]
