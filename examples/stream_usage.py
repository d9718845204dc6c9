#!/usr/bin/env python3
"""Stream usage: detect spikes in a log file read line by line.

Each line ends with ``val:  <number>``; the Y accessor slices that value out
and spikes are printed as soon as the look-ahead window confirms them.

Usage: python stream_usage.py [path/to/series.txt]
"""

import asyncio
import sys
from pathlib import Path

from spikeslayer import slayer

DEFAULT_PATH = Path(__file__).parent.parent / "tests" / "fixtures" / "series.txt"
MARKER = "val:  "


def line_value(line):
    index = line.rfind(MARKER)
    return line[index + len(MARKER) :] if index > -1 else None


async def read_lines(path):
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            await asyncio.sleep(0)
            yield line.rstrip("\n")


async def main(path):
    stream = (
        slayer({"minPeakHeight": 8, "minPeakDistance": 10})
        .x(lambda line, i: line.split(" ", 1)[0])
        .y(line_value)
        .from_stream(read_lines(path))
    )
    stream.on("data", lambda spike: print(f"  {spike['x']}  {spike['y']:.3f}"))
    stream.on("error", lambda exc: print(f"Stream failed: {exc}"))
    stream.on("end", lambda: print(f"Done: {stream.count} spikes"))
    await stream


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_PATH))
