"""Integration tests: end-to-end array and line-stream detection."""

from __future__ import annotations

import asyncio

import numpy as np

from spikeslayer import slayer


async def read_lines(path):
    """Decoded lines of *path*, one chunk per line."""
    with path.open(encoding="utf-8") as handle:
        for line in handle:
            await asyncio.sleep(0)
            yield line.rstrip("\n")


class TestArrayScenario:
    """Two-peak series with a height threshold."""

    def test_two_spikes(self, two_peak_series):
        results = []
        slayer({"minPeakHeight": 3}).from_array(
            two_peak_series, lambda error, spikes: results.append((error, spikes))
        )
        error, spikes = results[0]
        assert error is None
        assert spikes == [{"x": 2, "y": 5.0}, {"x": 7, "y": 6.0}]

    def test_height_threshold_drops_lower_peak(self, two_peak_series):
        spikes = slayer({"minPeakHeight": 5.5}).detect(two_peak_series)
        assert spikes == [{"x": 7, "y": 6.0}]

    def test_synthetic_sine(self):
        t = np.arange(0, 400)
        values = np.sin(2 * np.pi * t / 100.0) * 10.0
        spikes = slayer({"minPeakHeight": 5}).detect(values)
        assert [s["x"] for s in spikes] == [25, 125, 225, 325]
        assert all(abs(s["y"] - 10.0) < 1e-9 for s in spikes)

    def test_distance_strategy_on_noisy_series(self):
        rng = np.random.default_rng(7)
        values = rng.normal(0.0, 1.0, size=500)
        spikes = slayer({"algorithm": "distance", "minPeakDistance": 25}).detect(values)
        xs = [s["x"] for s in spikes]
        assert xs == sorted(xs)
        assert all(b - a >= 25 for a, b in zip(xs, xs[1:]))
        assert all(s["y"] >= 0 for s in spikes)


class TestLineStreamScenario:
    """536-line text source decoded by a caller-supplied Y accessor."""

    def test_fixture_has_536_decodable_lines(self, series_values):
        assert len(series_values) == 536

    def test_consumes_whole_stream(self, series_path, line_value):
        ended = []

        async def main():
            stream = slayer().y(line_value).from_stream(read_lines(series_path))
            stream.on("end", lambda: ended.append(True))
            await stream

        asyncio.run(main())
        assert ended == [True]

    def test_one_data_notification_per_decoded_line(self, series_path, line_value):
        log = []

        async def main():
            await (
                slayer({"algorithm": "none"})
                .y(line_value)
                .from_stream(read_lines(series_path))
                .on("data", lambda spike: log.append("data"))
                .on("end", lambda: log.append("end"))
                .on("error", lambda exc: log.append("error"))
            )

        asyncio.run(main())
        assert log.count("data") == 536
        assert log[-1] == "end"
        assert log.count("end") == 1
        assert "error" not in log

    def test_stream_matches_array_on_series(self, series_path, series_values, line_value):
        spikes = []

        async def main():
            stream = slayer().y(line_value).from_stream(read_lines(series_path))
            await stream.on("data", spikes.append)

        asyncio.run(main())
        assert spikes == slayer().detect(series_values)
        assert len(spikes) > 0

    def test_decoded_values_and_positions(self, series_path, series_values, line_value):
        spikes = []

        async def main():
            stream = slayer({"algorithm": "none"}).y(line_value).from_stream(
                read_lines(series_path)
            )
            await stream.on("data", spikes.append)

        asyncio.run(main())
        assert [s["x"] for s in spikes] == list(range(536))
        np.testing.assert_allclose([s["y"] for s in spikes], series_values)
